"""In-memory building edge dataset."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeAlias

import numpy as np

from skymask.contracts import Point3

NDArray: TypeAlias = Any


@dataclass(frozen=True)
class BoundingBox:
    """Planar bounds of every loaded edge endpoint."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def center(self) -> tuple[float, float]:
        """Return `(x, y)` midpoint of the box."""
        return ((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)


@dataclass(frozen=True)
class EdgeDataset:
    """Building edges stored as rows `[x1, y1, z1, x2, y2, z2]`."""

    edges: NDArray
    bbox: BoundingBox

    @classmethod
    def from_edges(cls, edges: Iterable[Iterable[float]]) -> EdgeDataset:
        """Build a dataset from six-value edge rows."""
        arr = np.asarray([list(row) for row in edges], dtype=float).reshape(-1, 6)
        if arr.shape[0] == 0:
            raise ValueError("edges must not be empty")
        if not np.all(np.isfinite(arr)):
            raise ValueError("edge coordinates must be finite")

        xs = arr[:, [0, 3]]
        ys = arr[:, [1, 4]]
        bbox = BoundingBox(
            x_min=float(xs.min()),
            x_max=float(xs.max()),
            y_min=float(ys.min()),
            y_max=float(ys.max()),
        )
        return cls(edges=arr, bbox=bbox)

    def __len__(self) -> int:
        return int(self.edges.shape[0])

    def midpoints(self) -> NDArray:
        """Return an `(N, 2)` array of planar edge midpoints."""
        return (self.edges[:, 0:2] + self.edges[:, 3:5]) / 2.0

    def relative_edge(self, idx: int, observer: tuple[float, float]) -> tuple[Point3, Point3]:
        """Return edge `idx` shifted so the observer sits at the planar origin.

        Heights are kept as-is.
        """
        x1, y1, z1, x2, y2, z2 = (float(v) for v in self.edges[idx])
        ox, oy = observer
        return (x1 - ox, y1 - oy, z1), (x2 - ox, y2 - oy, z2)
