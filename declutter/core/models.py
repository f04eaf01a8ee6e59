"""Domain models shared by the repetition engine and its host adapters."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Literal, TypeAlias

PartitionKey: TypeAlias = Hashable
AuthorId: TypeAlias = str
MessageId: TypeAlias = str
AllowReason: TypeAlias = Literal[
    "disabled",
    "removed",
    "no_content",
    "viewer_is_moderator",
    "privileged_author",
    "self",
    "below_threshold",
]


class PartitionScope(Enum):
    GLOBAL = "global"


GLOBAL_PARTITION: Final = PartitionScope.GLOBAL
"""Partition key shared by every author when keying is global.

An enum member, so no author id string can ever collide with it.
"""


@dataclass(slots=True, kw_only=True)
class ChatMessage:
    """One candidate chat message as handed over by the host pipeline.

    ``repetition_count`` is the memo slot written by the filter on first
    evaluation; a message that already carries a count is never re-scored.
    """

    text: str
    message_id: MessageId | None = None
    author_id: AuthorId | None = None
    is_moderator: bool = False
    is_broadcaster: bool = False
    is_self: bool = False
    removed: bool = False
    deleted: bool = False
    has_content: bool = True
    repetition_count: int | None = None

    @property
    def is_privileged(self) -> bool:
        return self.is_moderator or self.is_broadcaster


@dataclass(frozen=True, slots=True, kw_only=True)
class EvaluationContext:
    """Per-call state supplied by the host alongside a message."""

    now: float
    viewer_id: AuthorId | None = None
    viewer_is_moderator: bool = False


@dataclass(slots=True, kw_only=True)
class MessageRecord:
    """Cached copy of one ingested message."""

    text: str
    expires_at: float


@dataclass(slots=True, kw_only=True)
class Partition:
    """Recent history for one cache key, oldest record first."""

    messages: list[MessageRecord] = field(default_factory=list)
    expires_at: float = 0.0


@dataclass(frozen=True, slots=True, kw_only=True)
class EvictionStats:
    """Outcome of one eviction pass."""

    partitions_dropped: int = 0
    records_dropped: int = 0
    partitions_left: int = 0
    records_left: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class Allow:
    """Leave the message untouched."""

    reason: AllowReason
    count: int | None = None

    kind: Literal["allow"] = "allow"


@dataclass(frozen=True, slots=True, kw_only=True)
class Suppress:
    """Hide the message from the rendered stream."""

    count: int

    kind: Literal["suppress"] = "suppress"


@dataclass(frozen=True, slots=True, kw_only=True)
class Annotate:
    """Keep the message but render a repetition badge next to it."""

    count: int
    color: str

    kind: Literal["annotate"] = "annotate"


Decision: TypeAlias = Allow | Suppress | Annotate
