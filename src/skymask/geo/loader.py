"""
Building geometry loader (optional dependency).

- Reads PolygonZ building outlines with geopandas/shapely.
- Only import/use it when the `geo` extra is installed: pip install -e '.[geo]'
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from skymask.geo.edges import EdgeDataset

logger = logging.getLogger(__name__)


class GeometryBackendUnavailableError(RuntimeError):
    pass


class GeometrySourceError(ValueError):
    """Raised when a building dataset holds records the loader cannot use."""


def _import_geopandas() -> Any:
    try:
        import geopandas  # type: ignore
    except ImportError as exc:  # pragma: no cover
        raise GeometryBackendUnavailableError(
            "geopandas is not installed. Install with: pip install -e '.[geo]'"
        ) from exc
    return geopandas


def _ring_edges(geometry: Any, row: int) -> list[list[float]]:
    """Return consecutive vertex pairs of one single-ring 3D polygon."""
    if geometry is None or geometry.is_empty:
        raise GeometrySourceError(f"record {row} has no geometry")
    if geometry.geom_type != "Polygon":
        raise GeometrySourceError(f"record {row} is {geometry.geom_type}, expected PolygonZ")
    if not geometry.has_z:
        raise GeometrySourceError(f"record {row} has no Z coordinates")
    if len(geometry.interiors) > 0:
        raise GeometrySourceError(f"record {row} has more than one ring")

    coords = list(geometry.exterior.coords)
    return [[*p[:3], *q[:3]] for p, q in zip(coords, coords[1:])]


def read_building_edges(path: str | Path) -> EdgeDataset:
    """Read every ring edge of a PolygonZ building dataset.

    Raises:
        GeometrySourceError: if the source is unreadable or holds any
            record that is not a single-ring 3D polygon.
    """
    gpd = _import_geopandas()
    try:
        frame = gpd.read_file(str(path))
    except Exception as exc:
        raise GeometrySourceError(f"cannot read building dataset {path}: {exc}") from exc

    edges: list[list[float]] = []
    for row, geometry in enumerate(frame.geometry):
        edges.extend(_ring_edges(geometry, row))
    if not edges:
        raise GeometrySourceError(f"building dataset {path} contains no edges")

    dataset = EdgeDataset.from_edges(edges)
    logger.info("loaded %d building edges from %d records in %s", len(dataset), len(frame), path)
    return dataset
