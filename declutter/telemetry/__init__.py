"""Telemetry backends for declutter observability."""

from declutter.telemetry.base import TelemetryPort
from declutter.telemetry.inmemory import InMemoryTelemetry

__all__ = [
    "TelemetryPort",
    "InMemoryTelemetry",
]
