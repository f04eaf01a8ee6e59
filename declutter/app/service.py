"""Lifecycle wiring for one repetition filter and its eviction loop."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from loguru import logger

from declutter.config.schema import DeclutterConfig
from declutter.core.models import ChatMessage, Decision, EvaluationContext
from declutter.core.pipeline import Pipeline
from declutter.engine.cache import RepetitionCache
from declutter.engine.eviction import EvictionScheduler
from declutter.engine.filter import RepetitionFilter
from declutter.pipeline.repetition import RepetitionMiddleware
from declutter.telemetry.base import TelemetryPort


class DeclutterService:
    """Owns the cache, the filter and the eviction timer for one feature instance.

    Whoever enables the feature constructs this, calls ``start()`` from inside
    the event loop, and ``stop()`` on teardown.  Nothing here is process-wide.
    """

    def __init__(
        self,
        config: DeclutterConfig | None = None,
        *,
        telemetry: TelemetryPort | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        config = config or DeclutterConfig()
        self._clock = clock
        self.cache = RepetitionCache(
            ttl_seconds=config.cache_ttl_seconds,
            similarity_threshold=config.similarity_threshold,
        )
        self.filter = RepetitionFilter(config, cache=self.cache, telemetry=telemetry)
        self.scheduler = EvictionScheduler(
            self.cache,
            ttl_seconds=config.cache_ttl_seconds,
            clock=clock,
            sleep=sleep,
            telemetry=telemetry,
        )
        self.filter.on_ttl_changed(self.scheduler.restart)

    @property
    def config(self) -> DeclutterConfig:
        return self.filter.config

    def start(self) -> None:
        logger.debug("Enabling declutter")
        self.scheduler.start()

    async def stop(self) -> None:
        logger.debug("Disabling declutter")
        self.filter.clear()
        await self.scheduler.stop()

    def update_config(self, config: DeclutterConfig) -> None:
        self.filter.update_config(config)

    def evaluate(
        self,
        message: ChatMessage,
        *,
        viewer_id: str | None = None,
        viewer_is_moderator: bool = False,
        now: float | None = None,
    ) -> Decision:
        """Evaluate one message against the current clock."""
        context = EvaluationContext(
            now=self._clock() if now is None else now,
            viewer_id=viewer_id,
            viewer_is_moderator=viewer_is_moderator,
        )
        return self.filter.evaluate(message, context)

    def build_pipeline(self) -> Pipeline:
        return Pipeline([RepetitionMiddleware(repetition=self.filter)])
