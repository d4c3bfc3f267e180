import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path: sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from estimador.db import Base, SessionLocal, engine
from estimador.core.utils_text import coerce_time, normalize_topic
from estimador.models.question import Question

SEEDS = [
    {"topic": "deportes", "question": "¿Cuántos goles marcó Messi en su carrera profesional hasta 2023?", "answer": 821},
    {"topic": "deportes", "question": "¿Cuántos metros mide una pista olímpica de atletismo?", "answer": 400, "time": 8},
    {"topic": "geografía", "question": "¿Cuántos kilómetros mide el río Amazonas?", "answer": 6992, "time": 15},
    {"topic": "geografía", "question": "¿Cuántos metros de altura tiene el Aconcagua?", "answer": 6961},
    {"topic": "historia", "question": "¿En qué año llegó el hombre a la Luna?", "answer": 1969},
]

def upsert(db, data):
    topic = normalize_topic(data["topic"])
    row = db.execute(
        select(Question).where(Question.topic == topic, Question.question == data["question"])
    ).scalar_one_or_none()
    if row:
        row.answer = float(data["answer"])
        row.time = coerce_time(data.get("time"))
    else:
        row = Question(topic=topic, question=data["question"], answer=float(data["answer"]),
                       time=coerce_time(data.get("time")))
        db.add(row)
    db.commit()

def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for d in SEEDS: upsert(db, d)
        print("Questions seed OK")
    finally:
        db.close()

if __name__ == "__main__":
    main()
