"""Application wiring."""

from declutter.app.service import DeclutterService

__all__ = ["DeclutterService"]
