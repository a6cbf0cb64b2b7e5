"""Runtime settings for the MCP installer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from mcpinstall import __version__


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    state_dir: Path
    log_dir: Path
    cli_version: str = __version__

    @property
    def settings_file(self) -> Path:
        return self.home_dir / "settings.yaml"

    @property
    def user_mcp_config(self) -> Path:
        return self.home_dir / ".mcp.json"


def _default_home_dir() -> Path:
    override = os.getenv("MCPINSTALL_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".mcpinstall"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    return RuntimeSettings(
        home_dir=base,
        state_dir=base / "state",
        log_dir=base / "logs",
    )


SETTINGS = load_settings()
