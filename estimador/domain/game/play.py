import asyncio
import logging
import time
import uuid
from typing import Callable, Dict, Optional, Sequence

from estimador.core.errors import NotFoundError
from estimador.core.settings import PLAY_IDLE_SECONDS, PLAY_MAX_SESSIONS
from estimador.domain.game import session as sm
from estimador.domain.game.countdown import Countdown

log = logging.getLogger("play")


class PlaySession:
    """
    Contexto explícito de una partida: el estado vigente + su reloj.
    Entrar a una pregunta arranca un reloj nuevo; cualquier salida de
    ANSWERING lo cancela. Los ticks de un reloj reemplazado se ignoran.
    """

    def __init__(
        self,
        session_id: str,
        interval: float = 1.0,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.id = session_id
        self.state = sm.initial_state()
        self._interval = interval
        self._loop = loop
        self._countdown: Optional[Countdown] = None

    @property
    def clock_running(self) -> bool:
        return self._countdown is not None and self._countdown.active

    # ---- eventos ----

    def select_topic(self, topic: str, questions: Sequence) -> sm.SessionState:
        self.state = sm.select_topic(self.state, topic, questions)
        self._start_clock()
        return self.state

    def submit(self, raw_input=None) -> sm.SessionState:
        self.state = sm.submit(self.state, raw_input)
        if not self.state.answering:
            self._stop_clock()
        return self.state

    def next_question(self, questions: Sequence) -> sm.SessionState:
        prev = self.state
        self.state = sm.next_question(prev, questions)
        if self.state is not prev:
            self._start_clock()
        return self.state

    def change_topic(self) -> sm.SessionState:
        self._stop_clock()
        self.state = sm.change_topic(self.state)
        return self.state

    def close(self) -> None:
        self._stop_clock()

    # ---- reloj ----

    def _start_clock(self) -> None:
        self._stop_clock()
        countdown = Countdown(lambda: self._on_tick(countdown), self._interval, self._loop)
        self._countdown = countdown.start()

    def _stop_clock(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _on_tick(self, countdown: Countdown) -> None:
        if countdown is not self._countdown:
            log.warning("stale tick ignored (session %s)", self.id)
            countdown.cancel()
            return
        self.state = sm.tick(self.state)
        if not self.state.answering:
            if self.state.last_result is not None and self.state.last_result.user_answer is None:
                log.info("session %s: timeout on question %d", self.id, self.state.question_index)
            self._stop_clock()


class PlayRegistry:
    """
    Partidas en memoria (efímeras, no se persisten). Cada `open`/`get` descarta
    las que llevan más de `idle_seconds` sin actividad; si aun así se llega a
    `max_sessions`, se cierra la de actividad más vieja.
    """

    def __init__(
        self,
        interval: float = 1.0,
        idle_seconds: float = PLAY_IDLE_SECONDS,
        max_sessions: int = PLAY_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._interval = interval
        self._idle_seconds = idle_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: Dict[str, PlaySession] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self) -> PlaySession:
        self._evict_idle()
        while len(self._sessions) >= self._max_sessions:
            oldest = min(self._last_seen, key=self._last_seen.get)
            log.info("session %s evicted: registry full (%d)", oldest, self._max_sessions)
            self._drop(oldest)
        ps = PlaySession(uuid.uuid4().hex, interval=self._interval)
        self._sessions[ps.id] = ps
        self._last_seen[ps.id] = self._clock()
        return ps

    def get(self, session_id: str) -> PlaySession:
        self._evict_idle()
        ps = self._sessions.get(session_id)
        if ps is None:
            raise NotFoundError("Sesión no encontrada")
        self._last_seen[session_id] = self._clock()
        return ps

    def close(self, session_id: str) -> None:
        self.get(session_id)
        self._drop(session_id)

    def close_all(self) -> None:
        for ps in self._sessions.values():
            ps.close()
        self._sessions.clear()
        self._last_seen.clear()

    def _drop(self, session_id: str) -> None:
        self._sessions.pop(session_id).close()
        del self._last_seen[session_id]

    def _evict_idle(self) -> None:
        limit = self._clock() - self._idle_seconds
        stale = [sid for sid, seen in self._last_seen.items() if seen < limit]
        for sid in stale:
            log.info("session %s evicted after %.0f s idle", sid, self._idle_seconds)
            self._drop(sid)
