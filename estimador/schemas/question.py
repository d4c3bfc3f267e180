from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field

# answer/time llegan como número o como texto ("12,5"); el service los valida
Number = Union[float, str]

class QuestionIn(BaseModel):
    topic: Optional[str] = None
    question: Optional[str] = None
    answer: Optional[Number] = None
    time: Optional[Number] = None

class QuestionUpdate(BaseModel):
    topic: Optional[str] = None
    question: Optional[str] = None
    answer: Optional[Number] = None
    time: Optional[Number] = None

class QuestionOut(BaseModel):
    id: str = Field(serialization_alias="_id")
    topic: str
    question: str
    answer: float
    time: float
    model_config = ConfigDict(from_attributes=True)

class BulkIn(BaseModel):
    questions: Optional[List[dict]] = None

class BulkResult(BaseModel):
    success: int
    errors: List[str]

class TopicOut(BaseModel):
    topic: str
    count: int

class SimpleMsg(BaseModel):
    message: str
