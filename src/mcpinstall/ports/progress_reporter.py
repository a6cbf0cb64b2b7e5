"""Port definition for the installer's progress channel."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mcpinstall.domain.mcp import ProgressEvent


class ProgressReporter(ABC):
    """Fire-and-forget notifications towards the UI process.

    Reporters that do I/O set ``offload = True``; the installer then calls
    ``notify`` from a worker thread instead of the event loop. Reporters bound
    to loop objects such as ``asyncio.Queue`` keep the default.
    """

    offload: bool = False

    @abstractmethod
    def notify(self, event: ProgressEvent) -> None:
        """Deliver ``event`` without waiting for an acknowledgement."""


__all__ = ["ProgressReporter"]
