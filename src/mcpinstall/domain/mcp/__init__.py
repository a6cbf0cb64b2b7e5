"""Domain primitives for MCP server installation."""

from .errors import McpInstallError, NotifyError, SettingsReadError, ValidationError, WriteError
from .repository import PROJECT_CONFIG_NAME, McpConfigRepository
from .value_objects import (
    DEFAULT_SERVER_URL,
    REGISTRATION_NAME,
    TRANSPORT_SSE,
    InstallFailure,
    InstallOutcome,
    InstallScope,
    InstallSettings,
    InstallSuccess,
    McpConfigDocument,
    McpServerDescriptor,
    ProgressEvent,
    ProjectConfig,
    validate_server_url,
)
from .writer import JSONDocument, render_document, write_document

__all__ = [
    "DEFAULT_SERVER_URL",
    "REGISTRATION_NAME",
    "TRANSPORT_SSE",
    "PROJECT_CONFIG_NAME",
    "InstallFailure",
    "InstallOutcome",
    "InstallScope",
    "InstallSettings",
    "InstallSuccess",
    "JSONDocument",
    "McpConfigDocument",
    "McpConfigRepository",
    "McpInstallError",
    "McpServerDescriptor",
    "NotifyError",
    "ProgressEvent",
    "ProjectConfig",
    "SettingsReadError",
    "ValidationError",
    "WriteError",
    "render_document",
    "validate_server_url",
    "write_document",
]
