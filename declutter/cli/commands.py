"""CLI commands for declutter."""

from . import config_commands, replay_commands  # noqa: F401  (registers sub-commands)
from .core import app

__all__ = ["app"]
