"""Value objects describing MCP installation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union
from urllib.parse import urlsplit

from .errors import ValidationError

REGISTRATION_NAME = "figma-dev-mode-mcp-server"
TRANSPORT_SSE = "sse"
DEFAULT_SERVER_URL = "http://127.0.0.1:3845/sse"
_URL_SCHEMES = {"http", "https"}


class InstallScope(str, Enum):
    PROJECT = "project"
    USER = "user"

    @classmethod
    def parse(cls, value: Any, default: "InstallScope") -> "InstallScope":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return default
        return default


@dataclass(frozen=True)
class InstallSettings:
    enabled: bool = True
    server_url: str = DEFAULT_SERVER_URL
    scope: InstallScope = InstallScope.PROJECT


@dataclass(frozen=True)
class ProjectConfig:
    """Caller-supplied project identity; only ``id`` and ``name`` are inspected."""

    id: str
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValidationError("Project id must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectConfig":
        return cls(id=str(data.get("id") or ""), name=str(data.get("name") or ""))


def validate_server_url(url: str) -> str:
    """Return ``url`` unchanged when it is an absolute http(s) URL."""

    if not isinstance(url, str) or not url.strip():
        raise ValidationError("Invalid MCP server URL: value is empty")
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError for a malformed port
    except ValueError as exc:
        raise ValidationError(f"Invalid MCP server URL: {url!r} ({exc})") from exc
    if parts.scheme.lower() not in _URL_SCHEMES or not parts.hostname:
        raise ValidationError(f"Invalid MCP server URL: {url!r} (expected http(s)://host[:port]/path)")
    if url != url.strip():
        raise ValidationError(f"Invalid MCP server URL: {url!r} (surrounding whitespace)")
    return url


@dataclass(frozen=True)
class McpServerDescriptor:
    """Transport and endpoint of one registrable MCP server."""

    url: str
    transport: str = TRANSPORT_SSE

    def __post_init__(self) -> None:
        validate_server_url(self.url)
        if self.transport != TRANSPORT_SSE:
            raise ValidationError(f"Unsupported MCP transport '{self.transport}'")

    def to_dict(self) -> Dict[str, str]:
        return {"transport": self.transport, "url": self.url}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "McpServerDescriptor":
        if not isinstance(data, Mapping):
            raise ValidationError("MCP server entry must be an object")
        return cls(url=data.get("url", ""), transport=data.get("transport", TRANSPORT_SSE))


@dataclass(frozen=True)
class McpConfigDocument:
    """The ``{"mcpServers": {...}}`` document written to disk."""

    servers: Mapping[str, McpServerDescriptor] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "servers", MappingProxyType(dict(self.servers)))

    @classmethod
    def single(cls, descriptor: McpServerDescriptor, name: str = REGISTRATION_NAME) -> "McpConfigDocument":
        return cls({name: descriptor})

    def to_dict(self) -> Dict[str, Any]:
        return {"mcpServers": {name: server.to_dict() for name, server in self.servers.items()}}

    @classmethod
    def from_dict(cls, data: Any) -> "McpConfigDocument":
        if not isinstance(data, Mapping) or not isinstance(data.get("mcpServers"), Mapping):
            raise ValidationError("MCP config document must contain an 'mcpServers' object")
        return cls({str(name): McpServerDescriptor.from_dict(entry) for name, entry in data["mcpServers"].items()})


@dataclass(frozen=True)
class InstallSuccess:
    """Install finished; ``installed`` is False when the feature is disabled."""

    installed: bool = False
    path: Path | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class InstallFailure:
    message: str

    @property
    def ok(self) -> bool:
        return False


InstallOutcome = Union[InstallSuccess, InstallFailure]


@dataclass(frozen=True)
class ProgressEvent:
    project_id: str
    mcp_installed: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "mcpInstalled": self.mcp_installed,
            "message": self.message,
        }
