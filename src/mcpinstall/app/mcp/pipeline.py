"""Hook invoked by the project-creation pipeline once the project directory exists."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Union

from mcpinstall.domain.mcp import InstallFailure, InstallOutcome, ProjectConfig
from mcpinstall.logging_config import get_logger

from .installer import McpInstaller

logger = get_logger("app.mcp.pipeline")


async def install_mcp_for_project(
    installer: McpInstaller,
    project_path: Path,
    project_config: Union[ProjectConfig, Mapping[str, Any]],
) -> InstallOutcome:
    """Run the installer and downgrade any failure to a logged warning."""

    try:
        outcome = await installer.install(project_path, project_config)
    except Exception as exc:
        logger.warning("MCP installation for %s raised %s; continuing project creation", project_path, exc)
        return InstallFailure(str(exc))
    if isinstance(outcome, InstallFailure):
        logger.warning("MCP installation for %s failed: %s; continuing project creation", project_path, outcome.message)
    return outcome
