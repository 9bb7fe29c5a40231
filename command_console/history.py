"""
Command History Ring
====================

Fixed-capacity history of submitted command lines with up/down recall.

Two counters only ever grow:

    write_index   next slot to write (slot = write_index % capacity)
    browse_index  current recall position, write_index when not browsing

The first "recall previous" after an edit stashes the line being typed
into the slot at ``write_index``, so that walking forward again ends on
the unfinished line instead of a blank. Because that slot doubles as the
oldest retained entry, at most ``capacity - 1`` entries can be recalled.

    record("a"), record("b"), record("c")     write_index = 3
    recall_previous("ty")  → "c"              slot 3 holds "ty"
    recall_previous("")    → "b"
    recall_next()          → "c"
    recall_next()          → "ty"
    recall_next()          → ""               already live
"""

from __future__ import annotations

from typing import Optional

DEFAULT_CAPACITY = 50


class HistoryRing:
    """Ring buffer of past command lines with independent read/write cursors."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if not isinstance(capacity, int) or capacity < 2:
            raise ValueError(f"History capacity must be an integer of at least 2, got {capacity!r}")
        self.capacity = capacity
        self._entries = [""] * capacity
        self.write_index = 0
        self.browse_index = 0

    def __len__(self) -> int:
        """Number of entries that can still be recalled."""
        return min(self.write_index, self.capacity - 1)

    @property
    def is_browsing(self) -> bool:
        return self.browse_index != self.write_index

    def record(self, line: str) -> None:
        self._entries[self.write_index % self.capacity] = line
        self.write_index += 1
        self.browse_index = self.write_index

    def recall_previous(self, current: str = "") -> str:
        """Step one entry back.

        Returns "" without moving when there is no history or the oldest
        retained entry has already been reached.
        """
        if self.browse_index == 0 or self.write_index - self.browse_index >= self.capacity - 1:
            return ""

        if self.browse_index == self.write_index:
            self._entries[self.browse_index % self.capacity] = current

        self.browse_index -= 1
        return self._entries[self.browse_index % self.capacity]

    def recall_next(self) -> str:
        """Step one entry forward; returns "" when already at the live line."""
        if self.browse_index == self.write_index:
            return ""

        self.browse_index += 1
        return self._entries[self.browse_index % self.capacity]

    def recent(self, count: Optional[int] = None) -> list[str]:
        """Retained entries, newest first."""
        retained = len(self)
        if count is None or count > retained:
            count = retained
        return [self._entries[(self.write_index - 1 - i) % self.capacity]
                for i in range(count)]

    def clear(self) -> None:
        self._entries = [""] * self.capacity
        self.write_index = 0
        self.browse_index = 0
