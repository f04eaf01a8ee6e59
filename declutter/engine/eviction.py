"""Periodic eviction task for the repetition cache."""

from __future__ import annotations

import asyncio
import contextlib
import math
import time
from collections.abc import Awaitable, Callable

from loguru import logger

from declutter.core.models import EvictionStats
from declutter.core.ports import EvictionTarget
from declutter.telemetry.base import TelemetryPort

MIN_EVICTION_INTERVAL_SECONDS = 1
MAX_EVICTION_INTERVAL_SECONDS = 10


def eviction_interval(ttl_seconds: float) -> int:
    """Ten passes per TTL window, clamped to one pass every 1..10 seconds."""
    return max(
        MIN_EVICTION_INTERVAL_SECONDS,
        min(math.floor(ttl_seconds / 10), MAX_EVICTION_INTERVAL_SECONDS),
    )


class EvictionScheduler:
    """Owns the background loop that calls ``target.evict(clock())``.

    The target knows nothing about timers; this class is the only place a
    periodic callback exists, and ``stop()`` guarantees it is gone.
    """

    def __init__(
        self,
        target: EvictionTarget,
        *,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self._target = target
        self._interval = eviction_interval(ttl_seconds)
        self._clock = clock
        self._sleep = sleep
        self._telemetry = telemetry
        self._task: asyncio.Task[None] | None = None
        self._ticks = 0

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self) -> None:
        """Start the loop on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="declutter-eviction")
        logger.debug("declutter_eviction_started interval={}s", self._interval)

    def restart(self, ttl_seconds: float) -> None:
        """Recompute the interval from ``ttl_seconds``; reschedule the loop if it runs."""
        self._interval = eviction_interval(ttl_seconds)
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        self.start()

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("declutter_eviction_stopped ticks={}", self._ticks)

    def run_once(self) -> EvictionStats | None:
        """Run one eviction pass now and publish cache gauges."""
        result = self._target.evict(self._clock())
        self._ticks += 1
        if self._telemetry is not None and result is not None:
            self._telemetry.gauge("declutter_partitions", result.partitions_left)
            self._telemetry.gauge("declutter_records", result.records_left)
        return result

    async def _loop(self) -> None:
        while True:
            await self._sleep(self._interval)
            logger.debug("Running cache eviction cycle")
            try:
                self.run_once()
            except Exception:
                logger.exception("declutter_eviction_failed")
