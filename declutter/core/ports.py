"""Port interfaces between the repetition engine and its host."""

from __future__ import annotations

from typing import Protocol

from declutter.core.models import ChatMessage, Decision, EvaluationContext, EvictionStats


class RepetitionPort(Protocol):
    """Per-message repetition decision."""

    def evaluate(self, message: ChatMessage, context: EvaluationContext) -> Decision:
        """Classify one message; must not block or perform I/O."""


class EvictionTarget(Protocol):
    """Anything that can drop its expired state at a given instant."""

    def evict(self, now: float) -> EvictionStats | None:
        """Purge entries that expired before ``now``; optionally report what is left."""
