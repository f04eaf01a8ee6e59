"""declutter - repetition detection for live chat streams."""

__version__ = "0.3.0"
__logo__ = "🧹"
