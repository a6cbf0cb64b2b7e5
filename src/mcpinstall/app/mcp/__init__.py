"""Application services for MCP installation."""

from .installer import McpInstaller, validate_project_path
from .pipeline import install_mcp_for_project
from .settings import resolve_install_settings

__all__ = ["McpInstaller", "install_mcp_for_project", "resolve_install_settings", "validate_project_path"]
