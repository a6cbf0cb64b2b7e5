"""In-memory settings store."""

from __future__ import annotations

from typing import Any, Mapping

from mcpinstall.ports.settings_store import SettingsStore


class MappingSettingsStore(SettingsStore):
    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
