"""In-process progress channel backed by an asyncio queue."""

from __future__ import annotations

import asyncio

from mcpinstall.domain.mcp import NotifyError, ProgressEvent
from mcpinstall.ports.progress_reporter import ProgressReporter


class QueueProgressReporter(ProgressReporter):
    def __init__(self, queue: "asyncio.Queue[ProgressEvent]") -> None:
        self._queue = queue

    def notify(self, event: ProgressEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull as exc:
            raise NotifyError("Progress queue is full") from exc
