from __future__ import annotations

import asyncio
import json
import threading
from pathlib import Path

import pytest

from mcpinstall.adapters.progress import PROGRESS_EVENT, QueueProgressReporter, TelemetryProgressReporter
from mcpinstall.adapters.settings import MappingSettingsStore
from mcpinstall.app.mcp import McpInstaller
from mcpinstall.domain.mcp import NotifyError, ProgressEvent, ProjectConfig
from mcpinstall.ports.progress_reporter import ProgressReporter
from mcpinstall.runtime import stream_progress
from mcpinstall.settings import RuntimeSettings
from mcpinstall.utils.telemetry import iter_events, record_structured_event


def test_queue_reporter_delivers_and_reports_full_queue() -> None:
    async def _run() -> None:
        queue: asyncio.Queue[ProgressEvent] = asyncio.Queue(maxsize=1)
        reporter = QueueProgressReporter(queue)
        first = ProgressEvent("p-1", True, "ok")
        reporter.notify(first)
        with pytest.raises(NotifyError):
            reporter.notify(ProgressEvent("p-2", True, "ok"))
        assert await queue.get() is first

    asyncio.run(_run())


def test_telemetry_reporter_appends_progress_record(runtime_settings: RuntimeSettings) -> None:
    reporter = TelemetryProgressReporter(runtime_settings)
    reporter.notify(ProgressEvent("p-1", False, "Figma MCP server not configured: boom"))

    events = list(iter_events(runtime_settings))
    assert len(events) == 1
    record = events[0]
    assert record["event"] == PROGRESS_EVENT
    assert record["status"] == "error"
    assert record["level"] == "warn"
    assert record["correlationId"] == "p-1"
    assert record["payload"] == {
        "projectId": "p-1",
        "mcpInstalled": False,
        "message": "Figma MCP server not configured: boom",
    }


def test_progress_records_ignore_telemetry_opt_out(
    runtime_settings: RuntimeSettings, project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MCPINSTALL_TELEMETRY", "off")
    record_structured_event(runtime_settings, "cli.install", status="start")
    assert not (runtime_settings.log_dir / "telemetry.jsonl").exists()

    installer = McpInstaller.from_settings(runtime_settings)
    outcome = asyncio.run(installer.install(project_dir, ProjectConfig(id="proj-1")))
    assert outcome.ok

    payloads = list(stream_progress(runtime_settings.log_dir))
    assert [payload["projectId"] for payload in payloads] == ["proj-1"]
    assert [evt["event"] for evt in iter_events(runtime_settings)] == [PROGRESS_EVENT]


def test_offloaded_reporter_runs_off_the_event_loop_thread(project_dir: Path, tmp_path: Path) -> None:
    class ThreadRecordingReporter(ProgressReporter):
        offload = True

        def __init__(self) -> None:
            self.calls: list[tuple[int, ProgressEvent]] = []

        def notify(self, event: ProgressEvent) -> None:
            self.calls.append((threading.get_ident(), event))

    reporter = ThreadRecordingReporter()
    installer = McpInstaller(
        settings_store=MappingSettingsStore({}),
        user_config_path=tmp_path / "home" / ".mcp.json",
        reporter=reporter,
    )
    outcome = asyncio.run(installer.install(project_dir, ProjectConfig(id="proj-1")))

    assert outcome.ok
    assert len(reporter.calls) == 1
    thread_id, event = reporter.calls[0]
    assert thread_id != threading.get_ident()
    assert event.project_id == "proj-1"


def test_stream_progress_reads_installer_events(runtime_settings: RuntimeSettings, project_dir: Path) -> None:
    runtime_settings.settings_file.write_text("mcpInstallScope: project\n", encoding="utf-8")
    installer = McpInstaller.from_settings(runtime_settings)
    asyncio.run(installer.install(project_dir, ProjectConfig(id="proj-1", name="demo")))

    log_path = runtime_settings.log_dir / "telemetry.jsonl"
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps({"event": "cli.install", "payload": {"x": 1}}) + "\n")
        fh.write("not json\n")

    payloads = list(stream_progress(runtime_settings.log_dir))
    assert payloads == [
        {
            "projectId": "proj-1",
            "mcpInstalled": True,
            "message": f"Figma MCP server configured in {project_dir / '.mcp.json'}",
        }
    ]


def test_stream_progress_without_log(tmp_path: Path) -> None:
    assert list(stream_progress(tmp_path / "logs")) == []
