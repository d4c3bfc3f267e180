import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from estimador.core.errors import NotFoundError, ValidationError
from estimador.core.settings import DEFAULT_TIME
from estimador.core.utils_text import coerce_time, compact_number, normalize_topic, parse_decimal
from estimador.domain.questions.importer import QuestionDraft, parse_rows
from estimador.models.question import Question

log = logging.getLogger("questions")

# id desempata las filas de un mismo bulk (comparten created_at)
_ORDER = (Question.topic.asc(), Question.created_at.desc(), Question.id.asc())


def list_all(db: Session) -> List[Question]:
    return list(db.execute(select(Question).order_by(*_ORDER)).scalars().all())


def grouped(db: Session) -> Dict[str, List[Dict[str, Any]]]:
    """{topic: [{question, answer, time?}]}; `time` se omite cuando es el default."""
    out: Dict[str, List[Dict[str, Any]]] = {}
    for q in list_all(db):
        item: Dict[str, Any] = {"question": q.question, "answer": compact_number(q.answer)}
        if q.time != DEFAULT_TIME:
            item["time"] = compact_number(q.time)
        out.setdefault(q.topic, []).append(item)
    return out


def topic_questions(db: Session, topic: str) -> List[Question]:
    return list(
        db.execute(
            select(Question).where(Question.topic == normalize_topic(topic)).order_by(*_ORDER)
        ).scalars().all()
    )


def get(db: Session, question_id: str) -> Question:
    q = db.get(Question, question_id)
    if q is None:
        raise NotFoundError("Pregunta no encontrada")
    return q


def create(db: Session, topic, question, answer, time=None) -> Question:
    tag = normalize_topic(topic)
    text = str(question).strip() if question is not None else ""
    if not tag or not text or answer is None:
        raise ValidationError("Faltan campos requeridos: topic, question, answer")
    value = parse_decimal(answer)
    if value is None:
        raise ValidationError(f'La respuesta "{answer}" no es un número válido')

    row = Question(topic=tag, question=text, answer=value, time=coerce_time(time))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update(db: Session, question_id: str, fields: Dict[str, Any]) -> Question:
    """Actualización parcial: sólo se tocan los campos presentes."""
    row = get(db, question_id)

    # se valida todo antes de tocar la fila
    text = value = None
    if fields.get("question") is not None:
        text = str(fields["question"]).strip()
        if not text:
            raise ValidationError("La pregunta está vacía")
    if fields.get("answer") is not None:
        value = parse_decimal(fields["answer"])
        if value is None:
            raise ValidationError(f'La respuesta "{fields["answer"]}" no es un número válido')

    topic = normalize_topic(fields.get("topic"))
    if topic:
        row.topic = topic
    if text is not None:
        row.question = text
    if value is not None:
        row.answer = value
    if "time" in fields and fields["time"] is not None:
        row.time = coerce_time(fields["time"])

    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def remove(db: Session, question_id: str) -> None:
    row = get(db, question_id)
    db.delete(row)
    db.commit()


def replace_all(db: Session, drafts: Sequence[QuestionDraft]) -> int:
    """Borra toda la colección e inserta `drafts` en una sola transacción."""
    try:
        db.execute(delete(Question))
        db.add_all(
            Question(topic=d.topic, question=d.question, answer=d.answer, time=d.time)
            for d in drafts
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    return len(drafts)


def bulk_import(db: Session, rows: Iterable[Sequence[Any]], start: int = 1) -> Tuple[int, List[str]]:
    drafts, errors = parse_rows(rows, start=start)
    return apply_import(db, drafts, errors)


def apply_import(db: Session, drafts: Sequence[QuestionDraft], errors: List[str]) -> Tuple[int, List[str]]:
    """
    Reemplazo total: con al menos una fila válida, la colección queda con sólo
    esas filas. Sin filas válidas el store no se toca.
    """
    if not drafts:
        log.warning("bulk import rejected: %d row errors, store untouched", len(errors))
        return 0, errors

    inserted = replace_all(db, drafts)
    log.info("bulk import replaced store: %d inserted, %d row errors", inserted, len(errors))
    return inserted, errors


def bulk_rows_from_payload(items: Iterable[Any]) -> List[List[Any]]:
    """Convierte [{topic, question, answer, time}] al layout posicional de la planilla."""
    rows: List[List[Any]] = []
    for it in items:
        if not isinstance(it, dict):
            rows.append([])
            continue
        rows.append([it.get("topic"), it.get("question"), it.get("answer"), it.get("time")])
    return rows
