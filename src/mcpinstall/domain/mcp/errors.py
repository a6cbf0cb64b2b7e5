"""Error taxonomy for MCP installation."""

from __future__ import annotations


class McpInstallError(RuntimeError):
    """Base class for installer errors."""


class SettingsReadError(McpInstallError):
    """A persisted preference could not be read; callers substitute the default."""


class ValidationError(McpInstallError, ValueError):
    """Input rejected before anything touches the filesystem."""


class WriteError(McpInstallError):
    """The configuration document could not be written."""


class NotifyError(McpInstallError):
    """The progress channel refused an event."""


__all__ = [
    "McpInstallError",
    "SettingsReadError",
    "ValidationError",
    "WriteError",
    "NotifyError",
]
