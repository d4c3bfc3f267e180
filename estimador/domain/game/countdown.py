import asyncio
from typing import Callable, Optional


class Countdown:
    """
    Callback recurrente cancelable sobre el event loop (un `call_later` por tick).
    Nunca hay más de un handle pendiente; después de `cancel()` no se ejecuta
    ningún tick, aunque el loop ya lo tuviera encolado.
    """

    def __init__(
        self,
        on_tick: Callable[[], None],
        interval: float = 1.0,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._on_tick = on_tick
        self._interval = interval
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self.ticks = 0

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._cancelled

    def start(self) -> "Countdown":
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._schedule()
        return self

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = None
        self.ticks += 1
        try:
            self._on_tick()
        except Exception:
            # el loop reporta la excepción; el reloj no sigue corriendo
            self.cancel()
            raise
        if not self._cancelled:
            self._schedule()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
