"""UI-side helpers for consuming installer progress events."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Iterator

from mcpinstall.adapters.progress import PROGRESS_EVENT


def _read_from(log_path: Path, position: int) -> tuple[list[dict[str, object]], int]:
    records: list[dict[str, object]] = []
    with log_path.open("r", encoding="utf-8") as fh:
        fh.seek(position)
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        position = fh.tell()
    return records, position


def stream_progress(log_dir: Path, *, follow: bool = False, poll_interval: float = 0.5) -> Iterator[dict[str, object]]:
    """Yield progress payloads from the telemetry log, optionally following new entries."""

    log_path = log_dir / "telemetry.jsonl"
    position = 0
    while True:
        if log_path.exists():
            records, position = _read_from(log_path, position)
            for record in records:
                if record.get("event") == PROGRESS_EVENT and isinstance(record.get("payload"), dict):
                    yield record["payload"]
        if not follow:
            return
        time.sleep(poll_interval)
