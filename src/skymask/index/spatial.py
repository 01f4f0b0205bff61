"""KD-tree proximity index over building edge midpoints."""

from __future__ import annotations

from scipy.spatial import cKDTree

from skymask.geo.edges import EdgeDataset


class EdgeIndex:
    """Find edges whose midpoint lies near a planar point."""

    def __init__(self, dataset: EdgeDataset) -> None:
        self._tree = cKDTree(dataset.midpoints())
        self.size = len(dataset)

    def within(self, point: tuple[float, float], radius: float) -> list[int]:
        """Return sorted indices of edges with midpoint at most `radius` away."""
        if radius < 0.0:
            raise ValueError("radius must be non-negative")
        return sorted(int(i) for i in self._tree.query_ball_point(point, r=radius))
