# whiteboard_sim/timing.py
"""
Fixed-rate tick source for animations, running on the asyncio event loop.
"""
import asyncio
import logging
from typing import Callable, List, Optional

from .constants import DEFAULT_TICK_PERIOD_MS
from .exceptions import ParameterError

logger = logging.getLogger(__name__)

TickListener = Callable[[], None]


class TimingSource:
    """
    Calls its tick listeners every ``period_ms`` milliseconds.

    All listeners run on the event loop thread, one after another, so ticks
    never overlap. A listener may add or remove listeners (itself included)
    while being called; the change applies from the next tick.
    """

    def __init__(self, period_ms: float = DEFAULT_TICK_PERIOD_MS):
        if period_ms <= 0:
            raise ParameterError("period_ms must be positive.")
        self.period_ms = period_ms
        self._listeners: List[TickListener] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def is_started(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_tick_listener(self, listener: TickListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_tick_listener(self, listener: TickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self) -> None:
        """
        Start ticking on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        if self.is_started:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        logger.debug(f"Timing source started with a {self.period_ms}ms period.")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.period_ms / 1000.0)
            for listener in list(self._listeners):
                listener()

    async def stop(self) -> None:
        """Cancel the tick task and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        if task.done():
            if not task.cancelled() and task.exception() is not None:
                logger.debug(f"Timing source had stopped on error: {task.exception()}")
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Timing source stopped.")
