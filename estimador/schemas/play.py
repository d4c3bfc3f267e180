from typing import Optional, Literal, Union
from pydantic import BaseModel

class ResultOut(BaseModel):
    correct: float
    userAnswer: Optional[float] = None
    diff: float
    diffPercent: float
    points: int

class CurrentQuestionOut(BaseModel):
    question: str
    time: float

class PlayStateOut(BaseModel):
    sessionId: str
    step: Literal["topic", "question", "result"]
    topic: Optional[str] = None
    questionIndex: int
    timeLeft: float
    score: int
    current: Optional[CurrentQuestionOut] = None
    result: Optional[ResultOut] = None

class TopicIn(BaseModel):
    topic: str

class AnswerIn(BaseModel):
    answer: Optional[Union[float, str]] = None
