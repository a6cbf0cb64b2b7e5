"""Adapt raw preference values into ``InstallSettings``."""

from __future__ import annotations

from typing import Any

from mcpinstall.domain.mcp import InstallScope, InstallSettings, McpInstallError
from mcpinstall.logging_config import get_logger
from mcpinstall.ports.settings_store import ENABLE_KEY, SCOPE_KEY, SERVER_URL_KEY, SettingsStore

logger = get_logger("app.mcp.settings")

DEFAULTS = InstallSettings()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return default


def _read(store: SettingsStore, key: str, default: Any) -> Any:
    try:
        return store.get(key, default)
    except Exception as exc:
        raise McpInstallError(f"Could not read setting '{key}': {exc}") from exc


def resolve_install_settings(store: SettingsStore) -> InstallSettings:
    """Read the three installer keys, substituting defaults for malformed values."""

    raw_enabled = _read(store, ENABLE_KEY, DEFAULTS.enabled)
    enabled = coerce_bool(raw_enabled, DEFAULTS.enabled)
    if not enabled:
        return InstallSettings(enabled=False, server_url=DEFAULTS.server_url, scope=DEFAULTS.scope)

    raw_url = _read(store, SERVER_URL_KEY, DEFAULTS.server_url)
    if isinstance(raw_url, str) and raw_url.strip():
        server_url = raw_url
    else:
        logger.debug("Ignoring malformed %s=%r", SERVER_URL_KEY, raw_url)
        server_url = DEFAULTS.server_url

    raw_scope = _read(store, SCOPE_KEY, DEFAULTS.scope.value)
    scope = InstallScope.parse(raw_scope, DEFAULTS.scope)
    return InstallSettings(enabled=True, server_url=server_url, scope=scope)


__all__ = ["DEFAULTS", "coerce_bool", "resolve_install_settings"]
