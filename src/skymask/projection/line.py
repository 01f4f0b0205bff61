"""Projected line: the elevation trace of an infinite 3D line seen from the origin."""

from __future__ import annotations

from dataclasses import dataclass
from math import atan, copysign, cos, pi, sin
from typing import Protocol, Self

from skymask.contracts import Point3


def float_cmp(a: float, b: float, eps: float) -> int:
    """Compare two floats, treating values closer than `eps` as equal.

    Returns -1, 0 or 1 in the manner of a classic `cmp`.
    """
    if abs(a - b) < eps:
        return 0
    return (a > b) - (a < b)


class ProjectedCurve(Protocol):
    """Interface for elevation curves that the envelope sweep can merge."""

    def at(self, theta: float) -> float:
        """Return elevation in radians at azimuth `theta`."""

    def cross_point(self, other: Self, domain: tuple[float, float]) -> float | None:
        """Return the azimuth strictly inside `domain` where both curves meet."""


@dataclass(frozen=True, slots=True)
class ProjectedLine:
    """Elevation function `atan(a*cos(theta) + b*sin(theta))` of a line in space.

    Any two lines of this family meet at most twice on the circle, and the two
    meeting points are exactly pi apart.
    """

    a: float
    b: float

    @classmethod
    def from_points(cls, p1: Point3, p2: Point3) -> ProjectedLine | None:
        """Build the projection of the line through `p1` and `p2`.

        Returns None when both points lie on the same vertical plane through
        the observer, since that line has no azimuth extent.
        """
        x1, y1, z1 = p1
        x2, y2, z2 = p2
        denominator = x2 * y1 - x1 * y2
        if denominator == 0.0:
            return None
        return cls(
            a=(y1 * z2 - y2 * z1) / denominator,
            b=(x2 * z1 - x1 * z2) / denominator,
        )

    def at(self, theta: float) -> float:
        """Return elevation in radians at azimuth `theta`."""
        return atan(self.a * cos(theta) + self.b * sin(theta))

    def cross_point(self, other: ProjectedLine, domain: tuple[float, float]) -> float | None:
        """Return where this line meets `other` strictly inside `domain`, if anywhere."""
        start, end = domain
        numerator = self.a - other.a
        denominator = other.b - self.b
        if denominator == 0.0:
            if numerator == 0.0:
                # Identical curves meet everywhere, so there is no single crossing.
                return None
            cross = pi / 2.0
        else:
            cross = atan(numerator / denominator)
        if start < cross < end:
            return cross
        cross -= copysign(pi, cross)
        if start < cross < end:
            return cross
        return None
