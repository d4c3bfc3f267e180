from __future__ import annotations

import asyncio

from estimador.domain.game.countdown import Countdown
from estimador.domain.game.play import PlaySession
from estimador.domain.game.session import Step

FAST = 0.01


def test_countdown_ticks_until_cancelled() -> None:
    async def scenario() -> int:
        calls: list[int] = []
        countdown = Countdown(lambda: calls.append(1), interval=FAST).start()
        await asyncio.sleep(FAST * 5.5)
        countdown.cancel()
        seen = len(calls)
        await asyncio.sleep(FAST * 5)
        assert len(calls) == seen
        assert not countdown.active
        return seen

    assert asyncio.run(scenario()) >= 3


def test_cancelled_countdown_never_fires() -> None:
    async def scenario() -> list[int]:
        calls: list[int] = []
        countdown = Countdown(lambda: calls.append(1), interval=FAST).start()
        countdown.cancel()
        await asyncio.sleep(FAST * 5)
        return calls

    assert asyncio.run(scenario()) == []


def test_play_session_times_out_on_its_own() -> None:
    async def scenario() -> PlaySession:
        ps = PlaySession("s1", interval=FAST)
        ps.select_topic("a", [{"question": "q", "answer": 50, "time": 3}])
        assert ps.clock_running
        await asyncio.sleep(FAST * 10)
        return ps

    ps = asyncio.run(scenario())
    assert ps.state.step is Step.SHOWING_RESULT
    assert ps.state.last_result.user_answer is None
    assert ps.state.score == 0
    assert not ps.clock_running


def test_submit_stops_the_clock() -> None:
    async def scenario() -> PlaySession:
        ps = PlaySession("s1", interval=FAST)
        ps.select_topic("a", [{"question": "q", "answer": 50, "time": 3}])
        ps.submit("50")
        await asyncio.sleep(FAST * 10)
        return ps

    ps = asyncio.run(scenario())
    assert not ps.clock_running
    assert ps.state.remaining_seconds == 3
    assert ps.state.score == 100


def test_superseded_clock_cannot_time_out_new_question() -> None:
    questions = [
        {"question": "corta", "answer": 1, "time": 2},
        {"question": "larga", "answer": 2, "time": 1000},
    ]

    async def scenario() -> PlaySession:
        ps = PlaySession("s1", interval=FAST)
        ps.select_topic("a", questions)
        await asyncio.sleep(FAST * 1.5)
        ps.submit("1")
        ps.next_question(questions)
        await asyncio.sleep(FAST * 6)
        return ps

    ps = asyncio.run(scenario())
    assert ps.state.step is Step.ANSWERING
    assert ps.state.current.question == "larga"
    # sólo corre el reloj nuevo: unos pocos ticks sobre 1000 s
    assert 990 < ps.state.remaining_seconds <= 1000
    ps.close()
    assert not ps.clock_running


def test_stale_tick_is_ignored() -> None:
    async def scenario() -> PlaySession:
        ps = PlaySession("s1", interval=FAST)
        ps.select_topic("a", [{"question": "q", "answer": 1, "time": 10}])
        stale = ps._countdown
        ps.change_topic()
        ps._on_tick(stale)
        return ps

    ps = asyncio.run(scenario())
    assert ps.state.step is Step.SELECTING_TOPIC
