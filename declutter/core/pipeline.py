"""Middleware pipeline for inbound chat messages.

A composable chain of independently testable middleware classes: each
middleware calls ``next()`` to pass through, or sets ``ctx.halted = True``
to short-circuit.

Usage::

    pipeline = Pipeline([
        RepetitionMiddleware(repetition=service.filter),
    ])
    ctx = await pipeline.run(message, context)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from declutter.core.intents import DeclutterIntent, RecordMetricIntent
from declutter.core.models import ChatMessage, Decision, EvaluationContext


@dataclass
class PipelineContext:
    """Mutable state flowing through the middleware chain.

    Attributes:
        message: The chat message being processed.
        context: Host-supplied per-call state (clock, viewer identity).
        decision: Set by the repetition middleware.
        intents: Accumulated output intents.  Each middleware appends to this.
        halted: When ``True``, the pipeline stops executing further middleware.
    """

    message: ChatMessage
    context: EvaluationContext
    decision: Decision | None = None
    intents: list[DeclutterIntent] = field(default_factory=list)
    halted: bool = False

    def metric(
        self,
        name: str,
        value: int = 1,
        labels: tuple[tuple[str, str], ...] = (),
    ) -> None:
        """Append a metric intent."""
        self.intents.append(RecordMetricIntent(name=name, value=value, labels=labels))

    def halt(self) -> None:
        """Signal the pipeline to stop after this middleware."""
        self.halted = True


NextFn = Callable[[PipelineContext], Awaitable[None]]
"""Signature for the ``next`` callback passed to each middleware."""


@runtime_checkable
class Middleware(Protocol):
    """Protocol for pipeline middleware.

    Implementations must be callable with ``(ctx, next)`` and may:

    1. Modify ``ctx`` and call ``await next(ctx)`` (pass through).
    2. Call ``ctx.halt()`` and append intents (short-circuit).
    3. Call ``await next(ctx)`` then inspect/modify the result (post-process).
    """

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None: ...


class Pipeline:
    """Ordered chain of middleware that processes one chat message."""

    __slots__ = ("_layers",)

    def __init__(self, layers: list[Middleware]) -> None:
        self._layers = list(layers)

    async def run(self, message: ChatMessage, context: EvaluationContext) -> PipelineContext:
        """Process *message* through the full chain and return the final context."""
        ctx = PipelineContext(message=message, context=context)
        await self._execute(ctx, index=0)
        return ctx

    async def _execute(self, ctx: PipelineContext, index: int) -> None:
        if ctx.halted or index >= len(self._layers):
            return
        layer = self._layers[index]
        await layer(ctx, lambda c: self._execute(c, index + 1))

    def __len__(self) -> int:
        return len(self._layers)

    def __repr__(self) -> str:
        names = [type(m).__name__ for m in self._layers]
        return f"Pipeline({' → '.join(names)})"
