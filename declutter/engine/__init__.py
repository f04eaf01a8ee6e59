"""Repetition-detection engine: scorer, cache, filter and eviction loop."""

from declutter.engine.cache import RepetitionCache
from declutter.engine.eviction import EvictionScheduler, eviction_interval
from declutter.engine.filter import RepetitionFilter
from declutter.engine.similarity import similarity

__all__ = [
    "EvictionScheduler",
    "RepetitionCache",
    "RepetitionFilter",
    "eviction_interval",
    "similarity",
]
