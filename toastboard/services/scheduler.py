# toastboard/services/scheduler.py
"""
Timers para las sesiones del cliente (polling, stagger, auto-hide).

Todo corre en el event loop de asyncio, un solo hilo.
Cancelar = handle.cancel() sobre la transición agendada.
"""
import asyncio
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], object]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler real: usa loop.call_later del loop que esté corriendo."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callable[[], object]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay_ms, 0) / 1000, callback)
