"""Juego de estimación en consola.

Lee las preguntas del API (o de la caché local si no responde) y maneja la
partida localmente con el mismo state machine y reloj que usa el server.
"""
import argparse
import asyncio
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path: sys.path.insert(0, str(ROOT))

from estimador.client.api import ApiClient
from estimador.client.cache import LocalCache
from estimador.client.source import select_source
from estimador.core.errors import TopicUnavailable
from estimador.core.settings import API_URL, LOCAL_CACHE_PATH
from estimador.domain.game.play import PlaySession

def _fmt(n) -> str:
    return f"{n:g}".replace(".", ",")

async def _read_line(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)

async def _answer(ps: PlaySession) -> None:
    """Espera la respuesta o el timeout, lo que llegue primero."""
    line = asyncio.ensure_future(_read_line("> "))
    while ps.state.answering and not line.done():
        await asyncio.sleep(0.1)
    if ps.state.answering:
        ps.submit(line.result())
    else:
        print("\n⏰ ¡Tiempo! (Enter para continuar)")
        await line

def _print_result(ps: PlaySession) -> None:
    r = ps.state.last_result
    if r.user_answer is None:
        print(f"Sin respuesta. Era {_fmt(r.correct_answer)}.")
    else:
        pct = f"{r.percent_difference:.1f}".replace(".", ",")
        print(f"Respuesta: {_fmt(r.correct_answer)} · vos: {_fmt(r.user_answer)} "
              f"(diferencia {_fmt(r.absolute_difference)}, {pct}%)")
    print(f"+{r.points} puntos · total {ps.state.score}")

async def run(source) -> None:
    ps = PlaySession("console")
    try:
        await _loop(ps, source)
    finally:
        ps.close()

async def _loop(ps: PlaySession, source) -> None:
    grouped = source.load()
    while True:
        topics = [t for t, items in grouped.items() if items]
        if not topics:
            print("No hay temáticas disponibles. Cargá preguntas desde el backoffice.")
            return
        for i, t in enumerate(topics, start=1):
            print(f"{i}. {t} ({len(grouped[t])} preguntas)")
        choice = (await _read_line("Tema (q para salir): ")).strip()
        if choice.lower() == "q":
            return
        if not choice.isdigit() or not 1 <= int(choice) <= len(topics):
            continue
        topic = topics[int(choice) - 1]
        try:
            ps.select_topic(topic, grouped.get(topic, []))
        except TopicUnavailable as e:
            print(e)
            continue

        while True:
            print(f"\n[{topic}] {ps.state.current.question}  ({_fmt(ps.state.remaining_seconds)} s)")
            await _answer(ps)
            _print_result(ps)
            nxt = (await _read_line("Enter = siguiente, t = cambiar tema: ")).strip().lower()
            if nxt == "t":
                ps.change_topic()
                break
            grouped = source.load()
            try:
                ps.next_question(grouped.get(topic, []))
            except TopicUnavailable as e:
                print(e)
                ps.change_topic()
                break

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--api", default=API_URL)
    parser.add_argument("--cache", type=Path, default=LOCAL_CACHE_PATH)
    args = parser.parse_args(argv)

    source = select_source(ApiClient(args.api), LocalCache(args.cache))
    print(f"Preguntas desde: {source.name}")
    try:
        asyncio.run(run(source))
    except (KeyboardInterrupt, EOFError):
        print()
    return 0

if __name__ == "__main__":
    sys.exit(main())
