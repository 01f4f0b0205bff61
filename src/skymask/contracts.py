"""Core data contracts for skymask results."""

from __future__ import annotations

from dataclasses import dataclass
from math import atan, cos, pi, sin
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from skymask.envelope.interval_map import IntervalMap
    from skymask.projection.line import ProjectedLine

Point3: TypeAlias = tuple[float, float, float]

FULL_CIRCLE = 2.0 * pi


@dataclass(frozen=True, slots=True)
class SkylineInterval:
    """One azimuth range `[start, end)` of the skyline and its dominant line."""

    start: float
    end: float
    a: float
    b: float

    def __post_init__(self) -> None:
        """Validate range bounds."""
        if not -pi <= self.start < self.end <= pi:
            raise ValueError("interval must satisfy -pi <= start < end <= pi")

    def elevation_at(self, theta: float) -> float:
        """Return elevation in radians of the dominant line at `theta`."""
        return atan(self.a * cos(theta) + self.b * sin(theta))

    def to_dict(self) -> dict[str, Any]:
        """Serialize the interval to a JSON-compatible dictionary."""
        return {"start": self.start, "end": self.end, "a": self.a, "b": self.b}


def skyline_intervals(rmap: IntervalMap[ProjectedLine]) -> list[SkylineInterval]:
    """Flatten a skymask into ordered `SkylineInterval` records."""
    return [SkylineInterval(start=s, end=e, a=line.a, b=line.b) for s, e, line in rmap.items()]


def covered_fraction(rmap: IntervalMap[Any]) -> float:
    """Return the share of the azimuth circle claimed by some line."""
    return rmap.covered_length() / FULL_CIRCLE
