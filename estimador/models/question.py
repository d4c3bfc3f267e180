import uuid

from sqlalchemy import Column, String, Text, Float, DateTime
from sqlalchemy.sql import func

from estimador.db import Base
from estimador.core.settings import DEFAULT_TIME


def _new_id() -> str:
    return uuid.uuid4().hex


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(32), primary_key=True, default=_new_id)
    topic = Column(String(120), index=True, nullable=False)     # minúsculas y sin espacios extremos
    question = Column(Text, nullable=False)
    answer = Column(Float, nullable=False)
    time = Column(Float, nullable=False, default=DEFAULT_TIME)  # segundos, siempre > 0
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
