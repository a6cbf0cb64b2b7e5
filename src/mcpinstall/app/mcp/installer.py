"""Application service that provisions the Figma MCP registration for a project."""

from __future__ import annotations

import asyncio
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

from mcpinstall.domain.mcp import (
    InstallFailure,
    InstallOutcome,
    InstallSuccess,
    McpConfigDocument,
    McpConfigRepository,
    McpInstallError,
    McpServerDescriptor,
    ProgressEvent,
    ProjectConfig,
    ValidationError,
    WriteError,
)
from mcpinstall.logging_config import get_logger
from mcpinstall.ports.progress_reporter import ProgressReporter
from mcpinstall.ports.settings_store import SettingsStore
from mcpinstall.settings import RuntimeSettings

from .settings import resolve_install_settings

logger = get_logger("app.mcp.installer")

_INVALID_PATH_CHARS = re.compile(r'[<>:"|?*]')
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:[\\/]")


def validate_project_path(project_path: Path) -> Path:
    """Reject paths with reserved characters or that are not existing directories."""

    raw = str(project_path)
    if not raw.strip():
        raise ValidationError("Project path is required")
    candidate = raw[2:] if _DRIVE_PREFIX.match(raw) else raw
    if _INVALID_PATH_CHARS.search(candidate):
        raise ValidationError(f"Project path contains invalid characters: {raw}")
    if not project_path.is_dir():
        raise WriteError(f"Project directory {project_path} does not exist")
    return project_path


def _notify(reporter: ProgressReporter, event: ProgressEvent) -> None:
    try:
        reporter.notify(event)
    except Exception as exc:
        logger.warning("Progress notification for project %s dropped: %s", event.project_id, exc)


def _project_id(project_config: Any) -> str:
    if isinstance(project_config, ProjectConfig):
        return project_config.id
    if isinstance(project_config, Mapping):
        return str(project_config.get("id") or "")
    return ""


@dataclass(frozen=True)
class McpInstaller:
    """Writes the MCP config document for a project and reports the outcome.

    ``install`` never raises: every failure comes back as ``InstallFailure`` so the
    project-creation flow can carry on.
    """

    settings_store: SettingsStore
    user_config_path: Path
    reporter: ProgressReporter | None = None

    async def install(
        self,
        project_path: Path,
        project_config: Union[ProjectConfig, Mapping[str, Any]],
    ) -> InstallOutcome:
        start = time.perf_counter()
        try:
            outcome = await self._install(Path(project_path), project_config)
        except McpInstallError as exc:
            outcome = InstallFailure(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while installing MCP config for %s", project_path)
            outcome = InstallFailure(f"Unexpected error: {exc}")
        duration = (time.perf_counter() - start) * 1000

        if isinstance(outcome, InstallSuccess) and not outcome.installed:
            logger.info("MCP installation disabled; skipped %s", project_path)
            return outcome
        if isinstance(outcome, InstallSuccess):
            message = f"Figma MCP server configured in {outcome.path}"
            logger.info("%s (%.1f ms)", message, duration)
        else:
            message = f"Figma MCP server not configured: {outcome.message}"
            logger.warning("%s (%.1f ms)", message, duration)
        self._dispatch(ProgressEvent(_project_id(project_config), isinstance(outcome, InstallSuccess), message))
        return outcome

    async def _install(
        self,
        project_path: Path,
        project_config: Union[ProjectConfig, Mapping[str, Any]],
    ) -> InstallOutcome:
        settings = resolve_install_settings(self.settings_store)
        if not settings.enabled:
            return InstallSuccess(installed=False)
        if not isinstance(project_config, ProjectConfig):
            project_config = ProjectConfig.from_dict(project_config)
        validate_project_path(project_path)
        document = McpConfigDocument.single(McpServerDescriptor(url=settings.server_url))
        repository = McpConfigRepository(project_path, self.user_config_path)
        target = await asyncio.to_thread(repository.save, settings.scope, document)
        return InstallSuccess(installed=True, path=target)

    def _dispatch(self, event: ProgressEvent) -> None:
        if self.reporter is None:
            return
        if getattr(self.reporter, "offload", False):
            # Not awaited; asyncio.run drains the default executor before closing the loop.
            asyncio.get_running_loop().run_in_executor(None, _notify, self.reporter, event)
        else:
            _notify(self.reporter, event)

    @classmethod
    def from_settings(cls, settings: RuntimeSettings, reporter: ProgressReporter | None = None) -> "McpInstaller":
        from mcpinstall.adapters.progress import TelemetryProgressReporter
        from mcpinstall.adapters.settings import YamlSettingsStore

        return cls(
            settings_store=YamlSettingsStore(settings.settings_file),
            user_config_path=settings.user_mcp_config,
            reporter=reporter if reporter is not None else TelemetryProgressReporter(settings),
        )


__all__ = ["McpInstaller", "validate_project_path"]
