"""Compass-binned horizon profiles sampled from skymasks."""

from __future__ import annotations

from math import atan2, cos, degrees, pi, radians, sin
from typing import Any

from skymask.config import SkymaskConfig
from skymask.envelope.interval_map import IntervalMap
from skymask.geo.edges import EdgeDataset
from skymask.index.spatial import EdgeIndex
from skymask.index.store import SkymaskCacheKey, SkymaskEntry, SkymaskStore
from skymask.orchestrate.observer import build_observer_skymask
from skymask.projection.line import ProjectedLine


def compass_to_theta(az_deg: float) -> float:
    """Convert a compass azimuth (0° north, clockwise) to the skymask azimuth.

    Skymask azimuths follow `atan2(y, x)` with x east and y north, in `[-pi, pi)`.
    """
    az = radians(az_deg)
    theta = atan2(cos(az), sin(az))
    return -pi if theta >= pi else theta


def sample_horizon_deg(rmap: IntervalMap[ProjectedLine], az_bins: int) -> list[float]:
    """Sample a skymask at `az_bins` compass azimuths spread over [0, 360).

    Sectors that no line claims read as 0°, i.e. nothing blocks the view.
    """
    if az_bins <= 0:
        raise ValueError("az_bins must be positive")

    az_step = 360.0 / az_bins
    profile: list[float] = []
    for i in range(az_bins):
        theta = compass_to_theta(i * az_step)
        line = rmap.get(theta)
        profile.append(degrees(line.at(theta)) if line is not None else 0.0)
    return profile


class SkymaskHorizonModel:
    """Horizon profiles of one building dataset, cached per observer."""

    def __init__(
        self,
        dataset: EdgeDataset,
        index: EdgeIndex,
        cfg: SkymaskConfig | None = None,
        store: SkymaskStore | None = None,
        dataset_id: str = "default",
    ) -> None:
        self._dataset = dataset
        self._index = index
        self._cfg = cfg or SkymaskConfig()
        self._store = store or SkymaskStore(
            ttl_seconds=self._cfg.cache_ttl_seconds,
            max_entries=self._cfg.cache_max_entries,
        )
        self._dataset_id = dataset_id
        self.last_cache_hit = False

    @property
    def store(self) -> SkymaskStore:
        return self._store

    def entry_at(self, x: float, y: float) -> SkymaskEntry:
        """Return the cache entry for observer `(x, y)`, sweeping on a miss."""
        key = SkymaskCacheKey.for_observer(
            self._dataset_id, x, y, self._cfg.eps, self._cfg.max_distance_m
        )
        entry, was_built = self._store.get_or_build(
            key, lambda: build_observer_skymask(self._dataset, self._index, (x, y), self._cfg)
        )
        self.last_cache_hit = not was_built
        return entry

    def skymask_at(self, x: float, y: float) -> IntervalMap[ProjectedLine]:
        return self.entry_at(x, y).skymask

    def horizon_profile(self, x: float, y: float, az_bins: int) -> list[float]:
        """Return azimuth-binned horizon elevation profile in degrees."""
        if az_bins <= 0:
            raise ValueError("az_bins must be positive")
        return sample_horizon_deg(self.skymask_at(x, y), az_bins)

    def meta(self) -> dict[str, Any]:
        """Return metadata for skymask horizon model settings."""
        return {
            "model": "skymask",
            "dataset_id": self._dataset_id,
            "edges": len(self._dataset),
            "eps": self._cfg.eps,
            "max_distance_m": self._cfg.max_distance_m,
        }
