"""Carga una planilla (.xlsx/.csv) al API reemplazando TODAS las preguntas.

Uso: python scripts/import_questions.py preguntas.xlsx [--api http://host:3001]
"""
import argparse
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path: sys.path.insert(0, str(ROOT))

from estimador.client.api import ApiClient
from estimador.client.cache import LocalCache
from estimador.client.source import AdminClient
from estimador.core.errors import TransientIOError, ValidationError
from estimador.core.settings import API_URL, LOCAL_CACHE_PATH
from estimador.domain.questions.importer import parse_spreadsheet

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("file", type=Path)
    parser.add_argument("--api", default=API_URL)
    parser.add_argument("--cache", type=Path, default=LOCAL_CACHE_PATH)
    args = parser.parse_args(argv)

    try:
        drafts, errors = parse_spreadsheet(args.file.name, args.file.read_bytes())
    except ValidationError as e:
        print(f"❌ {e}")
        return 1

    if not drafts:
        print(f"❌ No se pudo cargar ninguna pregunta. Errores: {'; '.join(errors[:3])}")
        return 1

    admin = AdminClient(ApiClient(args.api), LocalCache(args.cache))
    payload = [{"topic": d.topic, "question": d.question, "answer": d.answer, "time": d.time} for d in drafts]
    try:
        result = admin.bulk(payload)
    except TransientIOError as e:
        print(f"❌ {e}. Reintentá cuando el servidor esté disponible.")
        return 2

    errors += result.get("errors", [])
    print(f"✅ {result['success']} pregunta(s) cargada(s). Las preguntas anteriores fueron reemplazadas.")
    for err in errors:
        print(f"   {err}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
