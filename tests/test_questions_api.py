from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from estimador.domain.questions.importer import HEADER, XLSX_MEDIA_TYPE


def create(client: TestClient, **body) -> dict:
    resp = client.post("/questions", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_create_and_list(client: TestClient) -> None:
    created = create(client, topic=" Deportes ", question="¿Goles?", answer=821)
    assert created["_id"]
    assert created["topic"] == "deportes"
    assert created["time"] == 10

    listed = client.get("/questions/list").json()
    assert listed == [created]

    grouped = client.get("/questions").json()
    assert grouped == {"deportes": [{"question": "¿Goles?", "answer": 821}]}


def test_create_missing_fields_is_400(client: TestClient) -> None:
    resp = client.post("/questions", json={"topic": "t", "answer": 3})
    assert resp.status_code == 400
    assert "Faltan campos" in resp.json()["detail"]


def test_update_and_delete(client: TestClient) -> None:
    q = create(client, topic="geo", question="¿Km?", answer="6992,5", time=15)
    assert q["answer"] == 6992.5

    resp = client.put(f"/questions/{q['_id']}", json={"time": 0})
    assert resp.status_code == 200
    assert resp.json()["time"] == 10
    assert resp.json()["answer"] == 6992.5

    resp = client.delete(f"/questions/{q['_id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Pregunta eliminada correctamente"}
    assert client.get("/questions/list").json() == []


def test_unknown_id_is_404(client: TestClient) -> None:
    assert client.put("/questions/nope", json={"answer": 1}).status_code == 404
    assert client.delete("/questions/nope").status_code == 404


def test_bulk_replaces_collection(client: TestClient) -> None:
    create(client, topic="viejo", question="¿Se borra?", answer=1)
    resp = client.post(
        "/questions/bulk",
        json={"questions": [
            {"topic": "Sports", "question": "How many?", "answer": "42", "time": "5"},
            {"topic": "", "question": "bad", "answer": ""},
        ]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] == 1
    assert len(body["errors"]) == 1
    assert client.get("/questions").json() == {"sports": [{"question": "How many?", "answer": 42, "time": 5}]}


def test_bulk_all_invalid_keeps_collection(client: TestClient) -> None:
    create(client, topic="viejo", question="¿Queda?", answer=1)
    resp = client.post("/questions/bulk", json={"questions": [{"topic": "t"}]})
    assert resp.json() == {"success": 0, "errors": ["Fila 1: La pregunta está vacía"]}
    assert list(client.get("/questions").json()) == ["viejo"]


def test_bulk_requires_array(client: TestClient) -> None:
    assert client.post("/questions/bulk", json={"questions": []}).status_code == 400
    assert client.post("/questions/bulk", json={}).status_code == 400


def test_topics_lists_counts(client: TestClient) -> None:
    create(client, topic="geo", question="a", answer=1)
    create(client, topic="geo", question="b", answer=2)
    create(client, topic="arte", question="c", answer=3)
    assert client.get("/questions/topics").json() == [
        {"topic": "arte", "count": 1},
        {"topic": "geo", "count": 2},
    ]


def test_export_and_reimport(client: TestClient) -> None:
    create(client, topic="geo", question="¿Km?", answer=6992.5, time=15)
    create(client, topic="arte", question="¿Año?", answer=1503)

    resp = client.get("/questions/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == XLSX_MEDIA_TYPE
    rows = [list(r) for r in load_workbook(io.BytesIO(resp.content)).active.iter_rows(values_only=True)]
    assert rows[0] == HEADER
    assert ["arte", "¿Año?", 1503, 10] in rows

    before = sorted(client.get("/questions").json().items())
    resp = client.post(
        "/questions/import",
        files={"file": ("questions.xlsx", resp.content, XLSX_MEDIA_TYPE)},
    )
    assert resp.json() == {"success": 2, "errors": []}
    assert sorted(client.get("/questions").json().items()) == before


def test_import_rejects_unknown_format(client: TestClient) -> None:
    resp = client.post("/questions/import", files={"file": ("x.txt", b"hola", "text/plain")})
    assert resp.status_code == 400


@pytest.mark.parametrize(
    "body, field",
    [
        ({"topic": 5, "question": "q", "answer": 1}, "topic"),
        ({"topic": "t", "question": "q", "answer": [1]}, "answer"),
    ],
)
def test_wrongly_typed_body_is_400(client: TestClient, body: dict, field: str) -> None:
    resp = client.post("/questions", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith(field)
    assert client.get("/questions/list").json() == []


def test_malformed_bulk_payload_is_400(client: TestClient) -> None:
    assert client.post("/questions/bulk", json={"questions": "no-es-lista"}).status_code == 400
