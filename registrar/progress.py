"""Progress sinks: receive "N of M done" notifications from long loops."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ProgressSink(ABC):
    """Something that wants to hear about per-item progress."""

    @abstractmethod
    def update(self, processed: int, total: int) -> None:
        """Called once per processed item with a running count."""


class NullProgress(ProgressSink):
    """Discards every update."""

    def update(self, processed: int, total: int) -> None:
        return None


class RecordingProgress(ProgressSink):
    """Keeps every update, in order."""

    def __init__(self) -> None:
        self.updates: list[tuple[int, int]] = []

    def update(self, processed: int, total: int) -> None:
        self.updates.append((processed, total))
