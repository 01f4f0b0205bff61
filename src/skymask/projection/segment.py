"""Projected segment: a projected line bounded to an azimuth arc."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from math import atan2, pi

from skymask.contracts import Point3
from skymask.projection.line import ProjectedLine


@total_ordering
@dataclass(frozen=True, eq=False)
class ProjectedSegment:
    """A `ProjectedLine` restricted to an arc of the azimuth circle.

    If `start < end` the arc is `[start, end)`. If `start > end` the arc wraps
    through the seam and covers `[start, pi)` and `[-pi, end)`.

    Segments compare by `top_endpoint()` alone, so two segments with the same
    key are equal for ordering purposes whatever their lines and arcs are.
    """

    line: ProjectedLine
    start: float
    end: float

    @classmethod
    def from_domain(cls, line: ProjectedLine, domain: tuple[float, float]) -> ProjectedSegment | None:
        """Bound `line` to the shorter arc between the two domain endpoints.

        Returns None for antipodal (or identical) endpoints, whose arc
        orientation is ambiguous.
        """
        start, end = domain
        if not (-pi <= start <= pi and -pi <= end <= pi):
            raise ValueError("domain endpoints must lie within [-pi, pi]")

        delta = abs(start - end)
        if delta % pi == 0.0:
            return None
        swap = start < end if delta > pi else start > end
        if swap:
            start, end = end, start
        return cls(line=line, start=start, end=end)

    @classmethod
    def from_points(cls, p1: Point3, p2: Point3) -> ProjectedSegment | None:
        """Project the edge between two observer-relative points."""
        line = ProjectedLine.from_points(p1, p2)
        if line is None:
            return None
        return cls.from_domain(line, (atan2(p1[1], p1[0]), atan2(p2[1], p2[0])))

    @property
    def domain(self) -> tuple[float, float]:
        return (self.start, self.end)

    @property
    def wraps(self) -> bool:
        """Whether the arc passes through the +-pi seam."""
        return self.start > self.end

    def subranges(self) -> list[tuple[float, float]]:
        """Split the arc into contiguous, non-empty ranges inside `[-pi, pi)`."""
        if not self.wraps:
            return [(self.start, self.end)]
        return [(s, e) for s, e in ((self.start, pi), (-pi, self.end)) if s < e]

    def contains(self, theta: float) -> bool:
        """Whether azimuth `theta` lies in the half-open arc."""
        return any(s <= theta < e for s, e in self.subranges())

    def top_endpoint(self) -> float:
        """Highest elevation at the arc boundary, the sweep's priority key.

        Wrapping arcs are also evaluated at pi, where they are cut in two.
        This is not the maximum over the arc interior.
        """
        top = max(self.line.at(self.start), self.line.at(self.end))
        if self.wraps:
            top = max(top, self.line.at(pi))
        return top

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectedSegment):
            return NotImplemented
        return self.top_endpoint() == other.top_endpoint()

    def __lt__(self, other: ProjectedSegment) -> bool:
        if not isinstance(other, ProjectedSegment):
            return NotImplemented
        return self.top_endpoint() < other.top_endpoint()

    __hash__ = None  # type: ignore[assignment]
