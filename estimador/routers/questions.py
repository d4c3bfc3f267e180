import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from estimador.core.errors import ValidationError
from estimador.deps import get_db
from estimador.domain.questions import service
from estimador.domain.questions.importer import XLSX_MEDIA_TYPE, parse_spreadsheet, write_workbook
from estimador.schemas.question import (
    BulkIn, BulkResult, QuestionIn, QuestionOut, QuestionUpdate, SimpleMsg, TopicOut,
)

log = logging.getLogger("questions")

router = APIRouter(prefix="/questions", tags=["questions"])

@router.get("")
def grouped_questions(db: Session = Depends(get_db)):
    """Todas las preguntas agrupadas por tema (lo que consume el juego)."""
    try:
        return service.grouped(db)
    except SQLAlchemyError as e:
        log.error("grouped questions failed: %s", e)
        raise HTTPException(500, "Error al obtener preguntas")

@router.get("/list", response_model=list[QuestionOut])
def list_questions(db: Session = Depends(get_db)):
    """Lista plana con IDs (para el backoffice)."""
    try:
        return service.list_all(db)
    except SQLAlchemyError as e:
        log.error("list questions failed: %s", e)
        raise HTTPException(500, "Error al obtener preguntas con IDs")

@router.get("/topics", response_model=list[TopicOut])
def list_topics(db: Session = Depends(get_db)):
    # sólo temas con al menos una pregunta
    return [{"topic": t, "count": len(items)} for t, items in service.grouped(db).items() if items]

@router.post("", status_code=201, response_model=QuestionOut)
def create_question(body: QuestionIn, db: Session = Depends(get_db)):
    return service.create(db, body.topic, body.question, body.answer, body.time)

@router.put("/{question_id}", response_model=QuestionOut)
def update_question(question_id: str, body: QuestionUpdate, db: Session = Depends(get_db)):
    return service.update(db, question_id, body.model_dump(exclude_unset=True))

@router.delete("/{question_id}", response_model=SimpleMsg)
def delete_question(question_id: str, db: Session = Depends(get_db)):
    service.remove(db, question_id)
    return {"message": "Pregunta eliminada correctamente"}

@router.post("/bulk", response_model=BulkResult)
def bulk_questions(body: BulkIn, db: Session = Depends(get_db)):
    """Reemplaza TODA la colección si al menos una pregunta es válida."""
    if not body.questions:
        raise ValidationError("Se requiere un array de preguntas")
    try:
        success, errors = service.bulk_import(db, service.bulk_rows_from_payload(body.questions))
    except SQLAlchemyError as e:
        log.error("bulk load failed: %s", e)
        raise HTTPException(500, "Error al cargar preguntas en bulk")
    return {"success": success, "errors": errors}

@router.post("/import", response_model=BulkResult)
def import_spreadsheet(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """Misma regla que /bulk, leyendo la planilla en el servidor."""
    content = file.file.read()
    if not content:
        raise ValidationError("El archivo está vacío")
    drafts, errors = parse_spreadsheet(file.filename or "", content)
    try:
        success, errors = service.apply_import(db, drafts, errors)
    except SQLAlchemyError as e:
        log.error("spreadsheet import failed: %s", e)
        raise HTTPException(500, "Error al cargar preguntas en bulk")
    return {"success": success, "errors": errors}

@router.get("/export")
def export_spreadsheet(db: Session = Depends(get_db)):
    data = write_workbook(service.list_all(db))
    return Response(
        content=data,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="questions.xlsx"'},
    )
