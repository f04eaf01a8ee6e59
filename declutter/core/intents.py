"""Intent types emitted by the repetition middleware."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True, kw_only=True)
class HideMessageIntent:
    """Remove one message from the rendered stream."""

    message_id: str | None
    repetition_count: int


@dataclass(frozen=True, slots=True, kw_only=True)
class RenderBadgeIntent:
    """Show a repetition badge next to one message."""

    message_id: str | None
    repetition_count: int
    color: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordMetricIntent:
    """Emit one structured counter metric."""

    name: str
    value: int = 1
    labels: tuple[tuple[str, str], ...] = ()


DeclutterIntent: TypeAlias = HideMessageIntent | RenderBadgeIntent | RecordMetricIntent
