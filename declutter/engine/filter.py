"""Per-message repetition decisions on top of the partitioned cache."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from loguru import logger

from declutter.config.schema import DeclutterConfig
from declutter.core.models import (
    GLOBAL_PARTITION,
    Allow,
    AllowReason,
    Annotate,
    ChatMessage,
    Decision,
    EvaluationContext,
    PartitionKey,
    Suppress,
)
from declutter.core.ports import RepetitionPort
from declutter.engine.cache import RepetitionCache
from declutter.telemetry.base import TelemetryPort

TtlListener: TypeAlias = Callable[[float], None]


class RepetitionFilter(RepetitionPort):
    """Pre-filters, scores once per message, and maps the count to a decision."""

    def __init__(
        self,
        config: DeclutterConfig | None = None,
        *,
        cache: RepetitionCache | None = None,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self._config = config or DeclutterConfig()
        self._cache = cache or RepetitionCache()
        self._cache.configure(
            ttl_seconds=self._config.cache_ttl_seconds,
            similarity_threshold=self._config.similarity_threshold,
        )
        self._telemetry = telemetry
        self._ttl_listeners: list[TtlListener] = []

    @property
    def config(self) -> DeclutterConfig:
        return self._config

    @property
    def cache(self) -> RepetitionCache:
        return self._cache

    def on_ttl_changed(self, listener: TtlListener) -> None:
        """Register a callback fired with the new TTL whenever it changes."""
        self._ttl_listeners.append(listener)

    def update_config(self, config: DeclutterConfig) -> None:
        """Swap in new settings; cached history is kept."""
        previous_ttl = self._config.cache_ttl_seconds
        self._config = config
        self._cache.configure(
            ttl_seconds=config.cache_ttl_seconds,
            similarity_threshold=config.similarity_threshold,
        )
        if config.cache_ttl_seconds != previous_ttl:
            logger.debug(
                "declutter_ttl_changed old={} new={}", previous_ttl, config.cache_ttl_seconds
            )
            for listener in list(self._ttl_listeners):
                listener(config.cache_ttl_seconds)

    def evaluate(self, message: ChatMessage, context: EvaluationContext) -> Decision:
        config = self._config
        if not config.enabled:
            return self._allow("disabled")
        if message.removed or message.deleted:
            return self._allow("removed")
        if not message.has_content:
            return self._allow("no_content")
        if context.viewer_is_moderator and not config.force_enabled_for_moderators:
            return self._allow("viewer_is_moderator")
        if (
            message.is_privileged
            and config.ignore_moderators
            and not config.force_enabled_for_moderators
        ):
            return self._allow("privileged_author")
        if message.is_self or (
            context.viewer_id is not None and message.author_id == context.viewer_id
        ):
            return self._allow("self")

        if message.repetition_count is None:
            message.repetition_count = self._cache.record_and_score(
                self.partition_key(message), message.text, context.now
            )
            self._incr("declutter_evaluated")
        count = message.repetition_count

        if count < config.repetition_threshold:
            return Allow(reason="below_threshold", count=count)

        if config.annotate_instead_of_hide:
            decision: Decision = Annotate(count=count, color=config.annotation_color)
            self._incr("declutter_annotated")
        else:
            decision = Suppress(count=count)
            self._incr("declutter_suppressed")
        logger.info(
            "declutter_decision action={} count={} author={} message_id={}",
            decision.kind,
            count,
            message.author_id,
            message.message_id,
        )
        return decision

    def partition_key(self, message: ChatMessage) -> PartitionKey:
        if self._config.partition_by_author and message.author_id is not None:
            return message.author_id
        return GLOBAL_PARTITION

    def clear(self) -> None:
        self._cache.clear()

    def _allow(self, reason: AllowReason) -> Allow:
        self._incr("declutter_skipped", labels=(("reason", reason),))
        return Allow(reason=reason)

    def _incr(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> None:
        if self._telemetry is not None:
            self._telemetry.incr(name, labels=labels)
