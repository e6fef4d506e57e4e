"""Interval claims over a text, so no two redactions ever overlap."""

from __future__ import annotations
from bisect import bisect_left


class RangeTracker:
    """Sorted set of disjoint half-open ``[start, end)`` spans."""

    __slots__ = ("_starts", "_ends")

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []

    def try_claim(self, start: int, end: int) -> bool:
        """Claim ``[start, end)`` unless it intersects an existing claim."""
        if end <= start:
            return False
        i = bisect_left(self._starts, start)
        # Only the neighbours on either side can intersect.
        if i > 0 and self._ends[i - 1] > start:
            return False
        if i < len(self._starts) and self._starts[i] < end:
            return False
        self._starts.insert(i, start)
        self._ends.insert(i, end)
        return True

    def is_claimed(self, pos: int) -> bool:
        i = bisect_left(self._starts, pos + 1)
        return i > 0 and self._ends[i - 1] > pos

    def spans(self) -> list[tuple[int, int]]:
        return list(zip(self._starts, self._ends))

    def __len__(self) -> int:
        return len(self._starts)
