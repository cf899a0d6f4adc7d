# wordcount/table.py
"""
Bounded token -> count table.

One FrequencyTable is owned by whoever aggregates (the run builder while it
reads input, the merger while it drains the heap). The owner decides when to
flush; the table only refuses to grow past its capacity.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from wordcount import profkit


class FrequencyTable:
    """
    In-memory frequency table holding at most `capacity` distinct tokens.

    `peak` remembers the largest number of distinct tokens ever held, which
    is what the memory bound is about.
    """

    __slots__ = ("capacity", "_counts", "peak", "flushes")

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._counts: Dict[str, int] = {}
        self.peak = 0
        self.flushes = 0

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, token: str) -> bool:
        return token in self._counts

    def get(self, token: str, default: int = 0) -> int:
        return self._counts.get(token, default)

    def is_full(self) -> bool:
        return len(self._counts) >= self.capacity

    def needs_room(self, token: str) -> bool:
        """True if adding `token` would create a key past capacity."""
        return token not in self._counts and self.is_full()

    def add(self, token: str, count: int = 1) -> None:
        counts = self._counts
        if token in counts:
            counts[token] += count
            return
        if len(counts) >= self.capacity:
            raise OverflowError(f"frequency table full (capacity={self.capacity})")
        counts[token] = count
        if len(counts) > self.peak:
            self.peak = len(counts)

    def clear(self) -> None:
        """Drop all entries without counting a flush."""
        self._counts = {}

    def drain(self) -> List[Tuple[str, int]]:
        """Return all (token, count) pairs sorted by token and empty the table."""
        items = sorted(self._counts.items())
        self._counts = {}
        self.flushes += 1
        profkit.tick("flushes")
        return items


def spill(table: FrequencyTable, writer) -> int:
    """Flush `table` into `writer` in ascending token order. Returns records written."""
    return writer.write_sorted(table.drain())
