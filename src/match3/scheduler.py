"""Repeating tick sources for the game loop and the bot.

Everything runs on one thread.  :class:`AsyncioTicker` schedules the callback
on the running event loop, :class:`ManualTicker` fires only when asked to and
drives headless training on a synthetic clock.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol


LOGGER = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Ticker(Protocol):
    @property
    def active(self) -> bool: ...

    def start(self, callback: TickCallback, interval_ms: float) -> None: ...

    def cancel(self) -> None: ...


class AsyncioTicker:
    """Call ``callback`` every ``interval_ms`` on the running event loop."""

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: TickCallback, interval_ms: float) -> None:
        # A second start replaces the first schedule instead of running both.
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback, interval_ms / 1000.0))
        LOGGER.debug("Ticker started every %.1f ms", interval_ms)

    async def _run(self, callback: TickCallback, interval_s: float) -> None:
        while True:
            await asyncio.sleep(interval_s)
            callback()

    def cancel(self) -> None:
        # Safe from inside the callback: the task stops at its next sleep.
        if self._task is not None:
            self._task.cancel()
            self._task = None


class ManualTicker:
    """Tick source that only fires when :meth:`fire` is called."""

    def __init__(self) -> None:
        self._callback: Optional[TickCallback] = None
        self.interval_ms: float = 0.0
        self.fired = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback, interval_ms: float) -> None:
        self._callback = callback
        self.interval_ms = interval_ms

    def cancel(self) -> None:
        self._callback = None

    def fire(self, count: int = 1) -> int:
        """Invoke the callback up to ``count`` times; return how many ran.

        Stops early if the callback cancels the ticker.
        """

        ran = 0
        for _ in range(count):
            callback = self._callback
            if callback is None:
                break
            callback()
            ran += 1
            self.fired += 1
        return ran


__all__ = ["AsyncioTicker", "ManualTicker", "Ticker", "TickCallback"]
