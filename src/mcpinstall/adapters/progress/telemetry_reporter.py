"""Progress reporter that appends to the event log tailed by the UI."""

from __future__ import annotations

from mcpinstall.domain.mcp import NotifyError, ProgressEvent
from mcpinstall.ports.progress_reporter import ProgressReporter
from mcpinstall.settings import RuntimeSettings
from mcpinstall.utils.telemetry import TelemetryError, append_record, build_record

PROGRESS_EVENT = "mcp.progress"


class TelemetryProgressReporter(ProgressReporter):
    """Writes progress records regardless of the telemetry opt-out."""

    offload = True

    def __init__(self, settings: RuntimeSettings) -> None:
        self._settings = settings

    def notify(self, event: ProgressEvent) -> None:
        try:
            record = build_record(
                PROGRESS_EVENT,
                payload=event.to_dict(),
                level="info" if event.mcp_installed else "warn",
                status="success" if event.mcp_installed else "error",
                component="mcp",
                correlation_id=event.project_id,
            )
            append_record(self._settings, record)
        except (OSError, TelemetryError) as exc:
            raise NotifyError(f"Progress event not delivered: {exc}") from exc
