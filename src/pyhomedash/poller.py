"""Fixed-cadence poll scheduler."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pyhomedash._constants import DEFAULT_POLL_INTERVAL

_logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[Any]]


class Poller:
    """Invokes a coroutine callback immediately and then every ``interval`` seconds.

    Each tick runs as its own task and the schedule never waits for it, so a
    slow tick can overlap the next one. Stopping cancels the schedule only;
    ticks already in flight run to completion.
    """

    def __init__(self, interval: float = DEFAULT_POLL_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._schedule: asyncio.Task[None] | None = None
        self._ticks: set[asyncio.Task[Any]] = set()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._schedule is not None and not self._schedule.done()

    @property
    def in_flight(self) -> int:
        """Number of ticks that have started but not finished."""
        return len(self._ticks)

    def start(self, on_tick: TickCallback) -> None:
        """Begin ticking. Restarts the schedule if already running."""
        self.stop()
        loop = asyncio.get_running_loop()
        self._schedule = loop.create_task(self._run(on_tick), name="pyhomedash-poller")
        _logger.debug("Poller started interval=%.3fs", self._interval)

    def stop(self) -> None:
        """Cancel future ticks. Safe to call any number of times."""
        schedule = self._schedule
        self._schedule = None
        if schedule is not None and not schedule.done():
            schedule.cancel()
            _logger.debug("Poller stopped")

    async def aclose(self) -> None:
        """Stop, then wait for in-flight ticks to finish."""
        self.stop()
        if self._ticks:
            await asyncio.gather(*list(self._ticks), return_exceptions=True)

    async def _run(self, on_tick: TickCallback) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            self._spawn(on_tick)
            next_at += self._interval
            # Skip missed slots instead of bursting after a stall.
            now = loop.time()
            if next_at < now:
                next_at = now + self._interval
            await asyncio.sleep(next_at - now)

    def _spawn(self, on_tick: TickCallback) -> None:
        task = asyncio.ensure_future(self._guarded(on_tick))
        self._ticks.add(task)
        task.add_done_callback(self._ticks.discard)

    @staticmethod
    async def _guarded(on_tick: TickCallback) -> None:
        try:
            await on_tick()
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.exception("Poll tick failed")
