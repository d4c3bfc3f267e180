from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from estimador.core.utils_text import normalize_topic
from estimador.deps import get_db, get_registry
from estimador.domain.game.play import PlayRegistry, PlaySession
from estimador.domain.questions import service
from estimador.schemas.play import AnswerIn, PlayStateOut, TopicIn
from estimador.schemas.question import SimpleMsg

router = APIRouter(prefix="/play", tags=["play"])

def _state_out(ps: PlaySession) -> dict:
    s = ps.state
    r = s.last_result
    return {
        "sessionId": ps.id,
        "step": s.step.value,
        "topic": s.topic,
        "questionIndex": s.question_index,
        "timeLeft": s.remaining_seconds,
        "score": s.score,
        # la respuesta correcta sólo viaja dentro del resultado
        "current": {"question": s.current.question, "time": s.current.time} if s.current else None,
        "result": {
            "correct": r.correct_answer,
            "userAnswer": r.user_answer,
            "diff": r.absolute_difference,
            "diffPercent": r.percent_difference,
            "points": r.points,
        } if r else None,
    }

# Los endpoints que arrancan el reloj son async: el Countdown se agenda en el loop del server.
# Las lecturas de DB van al threadpool; en el loop sólo corre la transición.

@router.post("", status_code=201, response_model=PlayStateOut)
async def open_play(registry: PlayRegistry = Depends(get_registry)):
    return _state_out(registry.open())

@router.get("/{session_id}", response_model=PlayStateOut)
async def get_play(session_id: str, registry: PlayRegistry = Depends(get_registry)):
    return _state_out(registry.get(session_id))

@router.post("/{session_id}/topic", response_model=PlayStateOut)
async def select_topic(
    session_id: str,
    body: TopicIn,
    registry: PlayRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
):
    ps = registry.get(session_id)
    topic = normalize_topic(body.topic)
    questions = await run_in_threadpool(service.topic_questions, db, topic)
    ps.select_topic(topic, questions)
    return _state_out(ps)

@router.post("/{session_id}/submit", response_model=PlayStateOut)
async def submit_answer(session_id: str, body: AnswerIn, registry: PlayRegistry = Depends(get_registry)):
    ps = registry.get(session_id)
    ps.submit(body.answer)
    return _state_out(ps)

@router.post("/{session_id}/next", response_model=PlayStateOut)
async def next_question(
    session_id: str,
    registry: PlayRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
):
    ps = registry.get(session_id)
    questions = await run_in_threadpool(service.topic_questions, db, ps.state.topic or "")
    ps.next_question(questions)
    return _state_out(ps)

@router.post("/{session_id}/change-topic", response_model=PlayStateOut)
async def change_topic(session_id: str, registry: PlayRegistry = Depends(get_registry)):
    ps = registry.get(session_id)
    ps.change_topic()
    return _state_out(ps)

@router.delete("/{session_id}", response_model=SimpleMsg)
async def close_play(session_id: str, registry: PlayRegistry = Depends(get_registry)):
    registry.close(session_id)
    return {"message": "Sesión cerrada"}
