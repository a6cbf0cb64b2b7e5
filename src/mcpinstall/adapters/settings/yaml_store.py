"""YAML-file-backed settings store."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict

import yaml

from mcpinstall.domain.mcp import SettingsReadError
from mcpinstall.logging_config import get_logger
from mcpinstall.ports.settings_store import SettingsStore

logger = get_logger("adapters.settings")


class YamlSettingsStore(SettingsStore):
    """Reads preferences from a YAML mapping on every lookup."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any) -> Any:
        try:
            data = self._load()
        except SettingsReadError as exc:
            logger.debug("Using default for %s: %s", key, exc)
            return default
        return data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        try:
            data = self._load()
        except SettingsReadError:
            data = {}
        data[key] = value
        self._save(data)

    def remove(self, *keys: str) -> list[str]:
        """Drop ``keys`` so lookups fall back to defaults; return the keys that were set."""

        data = self.as_dict()
        removed = [key for key in keys if key in data]
        if not removed:
            return []
        for key in removed:
            del data[key]
        self._save(data)
        return removed

    def as_dict(self) -> Dict[str, Any]:
        try:
            return self._load()
        except SettingsReadError:
            return {}

    def _save(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = yaml.safe_dump(data, sort_keys=True, allow_unicode=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self._path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise SettingsReadError(f"Cannot read {self._path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsReadError(f"{self._path} must contain a mapping")
        return data
