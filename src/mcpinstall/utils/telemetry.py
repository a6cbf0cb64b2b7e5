"""JSONL event log shared by CLI telemetry and the installer progress channel.

Telemetry records honour the ``MCPINSTALL_TELEMETRY`` opt-out; progress records
are the UI's only view of install outcomes and are always appended.
"""

from __future__ import annotations

import json
import os
import time
from importlib import resources
from pathlib import Path
from typing import Any, Iterator

import jsonschema

from mcpinstall.settings import RuntimeSettings

LEVELS = {"info", "warn", "error"}

_DISABLE_VALUES = {"0", "false", "no", "off"}

_TELEMETRY_VALIDATOR: jsonschema.Draft202012Validator | None = None


class TelemetryError(ValueError):
    """Raised when a record does not match the telemetry schema."""


def telemetry_enabled() -> bool:
    value = os.getenv("MCPINSTALL_TELEMETRY", "1").lower()
    return value not in _DISABLE_VALUES


def telemetry_log(settings: RuntimeSettings) -> Path:
    return settings.log_dir / "telemetry.jsonl"


def build_record(
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    level: str = "info",
    status: str | None = None,
    component: str | None = None,
    correlation_id: str | None = None,
    duration_ms: float | None = None,
) -> dict[str, Any]:
    """Assemble a record and check it against the packaged schema."""

    record: dict[str, Any] = {
        "ts": time.time(),
        "event": event,
        "payload": payload or {},
        "level": level,
    }
    if status:
        record["status"] = status
    if component:
        record["component"] = component
    if correlation_id:
        record["correlationId"] = correlation_id
    if duration_ms is not None:
        record["durationMs"] = duration_ms
    _validate_record(record)
    _validate_against_schema(record)
    return record


def append_record(settings: RuntimeSettings, record: dict[str, Any]) -> None:
    log_path = telemetry_log(settings)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def record_structured_event(settings: RuntimeSettings, event: str, **fields: Any) -> None:
    """Append a telemetry record unless the user opted out."""

    if not telemetry_enabled():
        return
    append_record(settings, build_record(event, **fields))


def iter_events(settings: RuntimeSettings) -> Iterator[dict[str, Any]]:
    log_path = telemetry_log(settings)
    if not log_path.exists():
        return
    with log_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


def clear(settings: RuntimeSettings) -> bool:
    """Delete the event log; return whether there was one."""

    log_path = telemetry_log(settings)
    if not log_path.exists():
        return False
    log_path.unlink()
    return True


def _validate_record(record: dict[str, Any]) -> None:
    if not isinstance(record.get("event"), str) or not record["event"].strip():
        raise TelemetryError("Telemetry event must have non-empty string 'event'")
    if not isinstance(record.get("payload"), dict):
        raise TelemetryError("Telemetry payload must be a dict")
    if record["level"] not in LEVELS:
        raise TelemetryError(f"Telemetry level '{record['level']}' is not supported")
    duration = record.get("durationMs")
    if duration is not None and (not isinstance(duration, (int, float)) or duration < 0):
        raise TelemetryError("Telemetry durationMs must be a non-negative number")


def _telemetry_validator() -> jsonschema.Draft202012Validator:  # pragma: no cover - trivial cache
    global _TELEMETRY_VALIDATOR
    if _TELEMETRY_VALIDATOR is None:
        schema_resource = resources.files("mcpinstall.resources") / "telemetry.schema.json"
        schema = json.loads(schema_resource.read_text(encoding="utf-8"))
        _TELEMETRY_VALIDATOR = jsonschema.Draft202012Validator(schema)
    return _TELEMETRY_VALIDATOR


def _validate_against_schema(record: dict[str, Any]) -> None:
    try:
        _telemetry_validator().validate(record)
    except jsonschema.ValidationError as exc:
        raise TelemetryError(f"Telemetry record rejected: {exc.message}") from exc
