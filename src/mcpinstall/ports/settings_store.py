"""Port definition for reading user preferences."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypeVar

T = TypeVar("T")

ENABLE_KEY = "enableFigmaMCP"
SERVER_URL_KEY = "figmaMCPUrl"
SCOPE_KEY = "mcpInstallScope"


class SettingsStore(ABC):
    """Read-only view over persisted preferences."""

    @abstractmethod
    def get(self, key: str, default: T) -> T:
        """Return the stored value for ``key`` or ``default`` when missing or unreadable."""


__all__ = ["SettingsStore", "ENABLE_KEY", "SERVER_URL_KEY", "SCOPE_KEY"]
