"""State machine de una partida: elegir tema → pregunta con tiempo → resultado.

Cada transición es una función pura (estado, evento) -> estado nuevo. El
estado es inmutable; quien maneja el reloj (``PlaySession``) guarda la
referencia al estado vigente. Las dos únicas transiciones que se rechazan
(entrar a responder un tema sin preguntas) lanzan ``TopicUnavailable`` y no
producen estado nuevo.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from estimador.core.errors import TopicUnavailable
from estimador.core.utils_text import coerce_time
from estimador.domain.game.scoring import RoundResult, evaluate_submission


class Step(str, Enum):
    SELECTING_TOPIC = "topic"
    ANSWERING = "question"
    SHOWING_RESULT = "result"


@dataclass(frozen=True)
class QuestionItem:
    question: str
    answer: float
    time: float = 10.0

    @classmethod
    def from_any(cls, raw) -> "QuestionItem":
        """Acepta un dict del API/caché ({question, answer, time?}) o un objeto con esos atributos."""
        if isinstance(raw, QuestionItem):
            return raw
        if isinstance(raw, dict):
            return cls(str(raw["question"]), float(raw["answer"]), coerce_time(raw.get("time")))
        return cls(str(raw.question), float(raw.answer), coerce_time(getattr(raw, "time", None)))


@dataclass(frozen=True)
class SessionState:
    step: Step = Step.SELECTING_TOPIC
    topic: Optional[str] = None
    question_index: int = 0
    remaining_seconds: float = 0
    score: int = 0
    last_result: Optional[RoundResult] = None
    current: Optional[QuestionItem] = None   # snapshot de la pregunta activa

    @property
    def answering(self) -> bool:
        return self.step is Step.ANSWERING


def initial_state() -> SessionState:
    return SessionState()


def _enter_question(state: SessionState, topic: str, index: int, questions: Sequence) -> SessionState:
    if not questions:
        raise TopicUnavailable(f"El tema '{topic}' no tiene preguntas")
    index = index % len(questions)
    item = QuestionItem.from_any(questions[index])
    return replace(
        state,
        step=Step.ANSWERING,
        topic=topic,
        question_index=index,
        remaining_seconds=item.time,
        last_result=None,
        current=item,
    )


def select_topic(state: SessionState, topic: str, questions: Sequence) -> SessionState:
    """Resetea puntaje e índice sin importar el estado previo."""
    fresh = replace(initial_state(), topic=topic)
    return _enter_question(fresh, topic, 0, questions)


def submit(state: SessionState, raw_input=None) -> SessionState:
    if not state.answering or state.current is None:
        return state
    result = evaluate_submission(state.current.answer, raw_input)
    return replace(
        state,
        step=Step.SHOWING_RESULT,
        score=state.score + result.points,
        last_result=result,
    )


def timeout(state: SessionState) -> SessionState:
    return submit(state, None)


def tick(state: SessionState) -> SessionState:
    if not state.answering:
        return state
    remaining = state.remaining_seconds - 1
    if remaining <= 0:
        return timeout(replace(state, remaining_seconds=0))
    return replace(state, remaining_seconds=remaining)


def next_question(state: SessionState, questions: Sequence) -> SessionState:
    """Avanza con wrap sobre la lista *actual* del tema (puede haber cambiado)."""
    if state.step is not Step.SHOWING_RESULT or state.topic is None:
        return state
    if not questions:
        raise TopicUnavailable(f"El tema '{state.topic}' no tiene preguntas")
    return _enter_question(state, state.topic, (state.question_index + 1) % len(questions), questions)


def change_topic(state: SessionState) -> SessionState:
    return initial_state()
