from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from estimador.core.errors import NotFoundError, ValidationError
from estimador.domain.questions import service
from estimador.domain.questions.importer import QuestionDraft, parse_spreadsheet, write_workbook
from estimador.models.question import Question


def seed(db: Session) -> None:
    service.create(db, "Deportes", "¿Goles?", 821)
    service.create(db, "deportes", "¿Pista?", 400, 8)
    service.create(db, "  GEO ", "¿Km?", "6992,5", 15)


def snapshot(db: Session) -> list[tuple]:
    return sorted((q.topic, q.question, q.answer, q.time) for q in service.list_all(db))


def test_create_normalizes_and_assigns_id(db: Session) -> None:
    row = service.create(db, "  Historia ", "¿Año?", "1969", None)
    assert row.id
    assert row.topic == "historia"
    assert row.answer == 1969.0
    assert row.time == 10.0


@pytest.mark.parametrize("time", [0, -4, "abc", None])
def test_create_coerces_invalid_time(db: Session, time) -> None:
    assert service.create(db, "t", "q", 1, time).time == 10.0


@pytest.mark.parametrize(
    "topic, question, answer",
    [(None, "q", 1), ("  ", "q", 1), ("t", "", 1), ("t", "q", None), ("t", "q", "mucho")],
)
def test_create_rejects_missing_fields(db: Session, topic, question, answer) -> None:
    with pytest.raises(ValidationError):
        service.create(db, topic, question, answer)
    assert service.list_all(db) == []


def test_grouped_omits_default_time(db: Session) -> None:
    seed(db)
    grouped = service.grouped(db)
    assert sorted(grouped) == ["deportes", "geo"]
    assert {"question": "¿Goles?", "answer": 821} in grouped["deportes"]
    assert {"question": "¿Pista?", "answer": 400, "time": 8} in grouped["deportes"]
    assert grouped["geo"] == [{"question": "¿Km?", "answer": 6992.5, "time": 15}]


def test_update_is_partial(db: Session) -> None:
    row = service.create(db, "geo", "¿Km?", 100, 12)
    updated = service.update(db, row.id, {"answer": "150", "topic": " GEOGRAFÍA "})
    assert updated.topic == "geografía"
    assert updated.answer == 150.0
    assert updated.question == "¿Km?"
    assert updated.time == 12.0


def test_update_time_zero_becomes_default(db: Session) -> None:
    row = service.create(db, "geo", "¿Km?", 100, 12)
    assert service.update(db, row.id, {"time": 0}).time == 10.0


def test_update_unknown_id(db: Session) -> None:
    with pytest.raises(NotFoundError):
        service.update(db, "no-existe", {"answer": 1})


def test_update_rejects_non_numeric_answer(db: Session) -> None:
    row = service.create(db, "geo", "¿Km?", 100)
    with pytest.raises(ValidationError):
        service.update(db, row.id, {"answer": "mucho"})


def test_remove(db: Session) -> None:
    qid = service.create(db, "geo", "¿Km?", 100).id
    service.remove(db, qid)
    assert service.list_all(db) == []
    with pytest.raises(NotFoundError):
        service.remove(db, qid)


def test_bulk_import_partial_success_replaces_store(db: Session) -> None:
    seed(db)
    success, errors = service.bulk_import(
        db, [["sports", "How many?", "42", "5"], ["", "bad", ""]]
    )
    assert success == 1
    assert len(errors) == 1
    assert "Fila 2" in errors[0] and "tag" in errors[0]
    assert snapshot(db) == [("sports", "How many?", 42.0, 5.0)]


def test_bulk_import_all_invalid_leaves_store_untouched(db: Session) -> None:
    seed(db)
    before = snapshot(db)
    success, errors = service.bulk_import(db, [["", "x", "1"], ["t", "", "1"], ["t", "q", "?"]])
    assert success == 0
    assert len(errors) == 3
    assert snapshot(db) == before


def test_bulk_rows_from_payload() -> None:
    rows = service.bulk_rows_from_payload([
        {"topic": "t", "question": "q", "answer": 1, "time": 3},
        {"topic": "t", "question": "q", "answer": 2},
        "basura",
    ])
    assert rows == [["t", "q", 1, 3], ["t", "q", 2, None], []]


@pytest.mark.parametrize("blank", ["", "   "])
def test_update_rejects_blank_question(db: Session, blank: str) -> None:
    row = service.create(db, "geo", "¿Km?", 100, 12)
    with pytest.raises(ValidationError):
        service.update(db, row.id, {"question": blank, "topic": "otro"})
    db.rollback()
    stored = service.get(db, row.id)
    assert stored.question == "¿Km?"
    assert stored.topic == "geo"


def test_update_strips_question(db: Session) -> None:
    row = service.create(db, "geo", "¿Km?", 100)
    assert service.update(db, row.id, {"question": "  ¿Metros?  "}).question == "¿Metros?"


def test_updated_question_survives_export_reimport(db: Session) -> None:
    row = service.create(db, "geo", "¿Km?", 100, 12)
    service.update(db, row.id, {"question": " ¿Millas? "})
    drafts, errors = parse_spreadsheet("questions.xlsx", write_workbook(service.list_all(db)))
    assert errors == []
    assert drafts == [QuestionDraft("geo", "¿Millas?", 100.0, 12.0)]


def test_rows_sharing_created_at_keep_a_stable_order(db: Session) -> None:
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for qid in ("c", "a", "b"):
        db.add(Question(id=qid, topic="geo", question=qid, answer=1, time=10, created_at=stamp, updated_at=stamp))
    db.commit()
    assert [q.id for q in service.topic_questions(db, "geo")] == ["a", "b", "c"]
