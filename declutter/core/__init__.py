"""Typed core domain and pipeline primitives."""

from declutter.core.intents import HideMessageIntent, RecordMetricIntent, RenderBadgeIntent
from declutter.core.models import (
    GLOBAL_PARTITION,
    Allow,
    Annotate,
    ChatMessage,
    Decision,
    EvaluationContext,
    Suppress,
)

__all__ = [
    "GLOBAL_PARTITION",
    "Allow",
    "Annotate",
    "ChatMessage",
    "Decision",
    "EvaluationContext",
    "HideMessageIntent",
    "RecordMetricIntent",
    "RenderBadgeIntent",
    "Suppress",
]
