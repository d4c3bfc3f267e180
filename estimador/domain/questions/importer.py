"""
Parser de planillas de preguntas.

Layout posicional (fila 1 = encabezado, se omite):
  columna 1: tag (temática)
  columna 2: pregunta
  columna 3: respuesta numérica
  columna 4: tiempo en segundos (opcional, default 10)

La exportación reproduce exactamente las mismas cuatro columnas.
"""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from openpyxl import Workbook, load_workbook

from estimador.core.errors import ValidationError
from estimador.core.settings import DEFAULT_TIME
from estimador.core.utils_text import coerce_time, compact_number, normalize_topic, parse_decimal

HEADER = ["Tag", "Pregunta", "Respuesta", "Tiempo"]
SHEET_TITLE = "Preguntas"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class QuestionDraft:
    """Fila validada, lista para persistir."""

    topic: str
    question: str
    answer: float
    time: float = float(DEFAULT_TIME)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_blank(row: Sequence[Any]) -> bool:
    return all(_cell_text(c) == "" for c in row)


def parse_rows(
    rows: Iterable[Sequence[Any]],
    start: int = 1,
    skip_blank: bool = False,
) -> Tuple[List[QuestionDraft], List[str]]:
    """
    Valida cada fila por separado. Devuelve (válidas, errores); una fila mala
    nunca aborta el lote. `start` es el número de la primera fila recibida.
    """
    drafts: List[QuestionDraft] = []
    errors: List[str] = []

    for n, row in enumerate(rows, start=start):
        row = list(row or [])
        if skip_blank and _is_blank(row):
            continue
        if len(row) < 3:
            errors.append(f"Fila {n}: Faltan columnas")
            continue

        tag = normalize_topic(row[0])
        if not tag:
            errors.append(f"Fila {n}: El tag está vacío")
            continue

        text = _cell_text(row[1])
        if not text:
            errors.append(f"Fila {n}: La pregunta está vacía")
            continue

        answer = parse_decimal(row[2])
        if answer is None:
            errors.append(f'Fila {n}: La respuesta "{_cell_text(row[2])}" no es un número válido')
            continue

        time = coerce_time(row[3] if len(row) > 3 else None)
        drafts.append(QuestionDraft(topic=tag, question=text, answer=answer, time=time))

    return drafts, errors


def smart_decode(b: bytes) -> str:
    for enc in ("utf-8-sig", "cp1252"):
        try:
            return b.decode(enc)
        except UnicodeDecodeError:
            continue
    return b.decode("latin-1")


def read_spreadsheet(filename: str, data: bytes) -> List[List[Any]]:
    """
    Lee la primera hoja (xlsx) o el csv y devuelve las filas de datos, sin el
    encabezado. La primera fila devuelta es la fila 2 de la planilla.
    """
    name = (filename or "").lower()
    if name.endswith((".xlsx", ".xlsm")):
        try:
            wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except Exception as e:
            raise ValidationError(f"No se pudo leer el archivo Excel: {e}") from e
        try:
            ws = wb.worksheets[0]
            raw = [list(r) for r in ws.iter_rows(values_only=True)]
        finally:
            wb.close()
    elif name.endswith(".csv"):
        raw = list(csv.reader(io.StringIO(smart_decode(data))))
    else:
        raise ValidationError("Formato no soportado: se espera .xlsx o .csv")

    body = raw[1:]
    if all(_is_blank(r) for r in body):
        raise ValidationError("El archivo debe tener al menos una fila de datos (sin contar el encabezado)")
    return body


def parse_spreadsheet(filename: str, data: bytes) -> Tuple[List[QuestionDraft], List[str]]:
    # las filas vacías se saltean pero la numeración sigue siendo la de la planilla
    return parse_rows(read_spreadsheet(filename, data), start=2, skip_blank=True)


def drafts_from_grouped(grouped: Dict[str, List[Dict[str, Any]]]) -> List[QuestionDraft]:
    """{topic: [{question, answer, time?}]} (API o caché local) -> drafts."""
    return [
        QuestionDraft(
            topic=topic,
            question=str(q["question"]),
            answer=float(q["answer"]),
            time=coerce_time(q.get("time")),
        )
        for topic, items in grouped.items()
        for q in items
    ]


def export_rows(records: Iterable[Any]) -> List[List[Any]]:
    """Filas de exportación; el tiempo siempre se escribe (10 si es el default)."""
    rows: List[List[Any]] = [list(HEADER)]
    for r in records:
        rows.append([
            r.topic,
            r.question,
            compact_number(float(r.answer)),
            compact_number(float(r.time or DEFAULT_TIME)),
        ])
    return rows


def write_workbook(records: Iterable[Any]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    for row in export_rows(records):
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
