"""Runtime configuration for skymask computation and serving."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class SkymaskConfig:
    """Settings shared by the CLI, the API and the horizon model."""

    eps: float = 1e-6
    max_distance_m: float = 1000.0
    dataset_path: str | None = None
    cache_ttl_seconds: int = 600
    cache_max_entries: int = 16

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.eps < 0.0:
            raise ValueError("eps must be non-negative")
        if self.max_distance_m <= 0.0:
            raise ValueError("max_distance_m must be positive")
        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        if self.cache_max_entries <= 0:
            raise ValueError("cache_max_entries must be positive")


def config_from_env() -> SkymaskConfig:
    """
    Build SkymaskConfig from environment variables.

    Optional:
      - SKYMASK_EPS
      - SKYMASK_MAX_DISTANCE_M
      - SKYMASK_DATASET_PATH (building shapefile served by the API)
      - SKYMASK_CACHE_TTL_SECONDS
      - SKYMASK_CACHE_MAX_ENTRIES
    """
    return SkymaskConfig(
        eps=float(os.getenv("SKYMASK_EPS", "1e-6")),
        max_distance_m=float(os.getenv("SKYMASK_MAX_DISTANCE_M", "1000")),
        dataset_path=os.getenv("SKYMASK_DATASET_PATH") or None,
        cache_ttl_seconds=int(os.getenv("SKYMASK_CACHE_TTL_SECONDS", "600")),
        cache_max_entries=int(os.getenv("SKYMASK_CACHE_MAX_ENTRIES", "16")),
    )
