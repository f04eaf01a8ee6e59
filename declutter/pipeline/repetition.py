"""Repetition middleware.

Hides or badges messages that the repetition filter flags; everything else
passes through untouched.
"""

from __future__ import annotations

from declutter.core.intents import HideMessageIntent, RenderBadgeIntent
from declutter.core.pipeline import NextFn, PipelineContext
from declutter.core.ports import RepetitionPort


class RepetitionMiddleware:
    """Run the repetition filter; halt on suppression, badge on annotation."""

    def __init__(self, *, repetition: RepetitionPort | None = None) -> None:
        self._repetition = repetition

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None:
        if self._repetition is None:
            await next(ctx)
            return

        decision = self._repetition.evaluate(ctx.message, ctx.context)
        ctx.decision = decision

        if decision.kind == "allow":
            await next(ctx)
            return

        ctx.metric("declutter_flagged", labels=(("action", decision.kind),))

        if decision.kind == "annotate":
            ctx.intents.append(
                RenderBadgeIntent(
                    message_id=ctx.message.message_id,
                    repetition_count=decision.count,
                    color=decision.color,
                )
            )
            await next(ctx)
            return

        ctx.intents.append(
            HideMessageIntent(
                message_id=ctx.message.message_id,
                repetition_count=decision.count,
            )
        )
        ctx.halt()
