"""Middleware pipeline stages.  See ``core/pipeline.py`` for the runner."""

from declutter.pipeline.repetition import RepetitionMiddleware

__all__ = [
    "RepetitionMiddleware",
]
