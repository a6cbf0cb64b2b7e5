"""Progress reporter adapters."""

from .queue_reporter import QueueProgressReporter
from .telemetry_reporter import PROGRESS_EVENT, TelemetryProgressReporter

__all__ = ["PROGRESS_EVENT", "QueueProgressReporter", "TelemetryProgressReporter"]
