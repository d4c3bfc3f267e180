"""Exporta las preguntas a questions.xlsx (Tag, Pregunta, Respuesta, Tiempo).

Lee del API y, si no responde, de la caché local.
"""
import argparse
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path: sys.path.insert(0, str(ROOT))

from estimador.client.api import ApiClient
from estimador.client.cache import LocalCache
from estimador.client.source import select_source
from estimador.core.settings import API_URL, LOCAL_CACHE_PATH
from estimador.domain.questions.importer import drafts_from_grouped, write_workbook

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("-o", "--output", type=Path, default=Path("questions.xlsx"))
    parser.add_argument("--api", default=API_URL)
    parser.add_argument("--cache", type=Path, default=LOCAL_CACHE_PATH)
    args = parser.parse_args(argv)

    source = select_source(ApiClient(args.api), LocalCache(args.cache))
    drafts = drafts_from_grouped(source.load())
    args.output.write_bytes(write_workbook(drafts))
    print(f"{len(drafts)} pregunta(s) exportada(s) a {args.output} (fuente: {source.name})")
    return 0

if __name__ == "__main__":
    sys.exit(main())
