from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "home"
os.environ.setdefault("MCPINSTALL_HOME", str(SANDBOX_HOME))
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mcpinstall import __version__  # noqa: E402
from mcpinstall.domain.mcp import ProgressEvent  # noqa: E402
from mcpinstall.ports.progress_reporter import ProgressReporter  # noqa: E402
from mcpinstall.settings import RuntimeSettings  # noqa: E402


class RecordingReporter(ProgressReporter):
    def __init__(self) -> None:
        self.events: List[ProgressEvent] = []

    def notify(self, event: ProgressEvent) -> None:
        self.events.append(event)


class BrokenReporter(ProgressReporter):
    def notify(self, event: ProgressEvent) -> None:
        raise ConnectionError("ui process is gone")


def make_runtime_settings(base: Path) -> RuntimeSettings:
    home = base / "home"
    state_dir = base / "state"
    log_dir = base / "logs"
    for directory in (home, state_dir, log_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(
        home_dir=home,
        state_dir=state_dir,
        log_dir=log_dir,
        cli_version=__version__,
    )


@pytest.fixture()
def runtime_settings(tmp_path: Path) -> RuntimeSettings:
    return make_runtime_settings(tmp_path / "runtime")


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "proj1"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _telemetry_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCPINSTALL_TELEMETRY", "1")
