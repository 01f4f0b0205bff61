"""Map of disjoint half-open float ranges to values."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterator
from typing import Generic, TypeVar

V = TypeVar("V")


class IntervalMap(Generic[V]):
    """Disjoint half-open ranges `[start, end)` each tagged with one value.

    Entries are kept sorted in parallel lists, so lookups bisect on range
    starts. Inserting a range overwrites whatever previously occupied it, and
    touching ranges that carry equal values are merged into one.
    """

    def __init__(self) -> None:
        self._starts: list[float] = []
        self._ends: list[float] = []
        self._values: list[V] = []

    def __len__(self) -> int:
        return len(self._starts)

    def __iter__(self) -> Iterator[tuple[float, float, V]]:
        return iter(self.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalMap):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        body = ", ".join(f"[{s!r}, {e!r}): {v!r}" for s, e, v in self.items())
        return f"IntervalMap({{{body}}})"

    def items(self) -> list[tuple[float, float, V]]:
        """Return `(start, end, value)` entries in ascending order."""
        return list(zip(self._starts, self._ends, self._values, strict=True))

    def get(self, point: float) -> V | None:
        """Return the value whose range contains `point`, or None."""
        idx = bisect_right(self._starts, point) - 1
        if idx >= 0 and point < self._ends[idx]:
            return self._values[idx]
        return None

    def _overlap_bounds(self, start: float, end: float) -> tuple[int, int]:
        """Index window `[lo, hi)` of entries intersecting `[start, end)`."""
        lo = bisect_right(self._ends, start)
        hi = bisect_left(self._starts, end)
        return lo, max(lo, hi)

    def overlapping(self, start: float, end: float) -> list[tuple[float, float, V]]:
        """Return entries whose range intersects `[start, end)` with positive width."""
        if start >= end:
            return []
        lo, hi = self._overlap_bounds(start, end)
        return [(self._starts[i], self._ends[i], self._values[i]) for i in range(lo, hi)]

    def gaps(self, start: float, end: float) -> list[tuple[float, float]]:
        """Return the uncovered, non-empty sub-ranges of `[start, end)`."""
        result: list[tuple[float, float]] = []
        cursor = start
        for seg_start, seg_end, _ in self.overlapping(start, end):
            if seg_start > cursor:
                result.append((cursor, seg_start))
            cursor = max(cursor, seg_end)
        if cursor < end:
            result.append((cursor, end))
        return result

    def covers(self, start: float, end: float) -> bool:
        """Whether every point of `[start, end)` belongs to some entry."""
        return not self.gaps(start, end)

    def covered_length(self) -> float:
        """Total width of all stored ranges."""
        return sum(e - s for s, e in zip(self._starts, self._ends, strict=True))

    def insert(self, start: float, end: float, value: V) -> None:
        """Assign `value` to `[start, end)`, overwriting any previous occupant."""
        if not start < end:
            raise ValueError(f"range must be non-empty, got [{start!r}, {end!r})")

        lo, hi = self._overlap_bounds(start, end)
        replacement: list[tuple[float, float, V]] = []
        if lo < hi:
            first_start, first_value = self._starts[lo], self._values[lo]
            last_end, last_value = self._ends[hi - 1], self._values[hi - 1]
            if first_start < start:
                replacement.append((first_start, start, first_value))
            replacement.append((start, end, value))
            if last_end > end:
                replacement.append((end, last_end, last_value))
        else:
            replacement.append((start, end, value))

        # Merge with untouched neighbours that share the value and touch the new range.
        if lo > 0 and self._ends[lo - 1] == replacement[0][0] and self._values[lo - 1] == replacement[0][2]:
            lo -= 1
            replacement[0] = (self._starts[lo], replacement[0][1], replacement[0][2])
        if (
            hi < len(self._starts)
            and self._starts[hi] == replacement[-1][1]
            and self._values[hi] == replacement[-1][2]
        ):
            replacement[-1] = (replacement[-1][0], self._ends[hi], replacement[-1][2])
            hi += 1

        merged: list[tuple[float, float, V]] = []
        for entry in replacement:
            if merged and merged[-1][1] == entry[0] and merged[-1][2] == entry[2]:
                merged[-1] = (merged[-1][0], entry[1], entry[2])
            else:
                merged.append(entry)

        self._starts[lo:hi] = [s for s, _, _ in merged]
        self._ends[lo:hi] = [e for _, e, _ in merged]
        self._values[lo:hi] = [v for _, _, v in merged]
