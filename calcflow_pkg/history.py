"""Bounded evaluation history for the basic calculator."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from .config import HISTORY_LIMIT
from .types import HistoryEntry


class HistoryLog:
    """Sliding window over the most recent evaluations, oldest first."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen

    def record(self, entry: HistoryEntry) -> None:
        """Append ``entry``, evicting the oldest entry beyond the limit."""
        self._entries.append(entry)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def lines(self) -> list[str]:
        """Entries rendered as ``"{source} = {result}"``."""
        return [str(entry) for entry in self._entries]
