"""Observer-level orchestration: nearby edges to a skymask."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from skymask.config import SkymaskConfig
from skymask.envelope.interval_map import IntervalMap
from skymask.envelope.sweep import EnvelopeBuilder
from skymask.geo.edges import EdgeDataset
from skymask.index.spatial import EdgeIndex
from skymask.projection.line import ProjectedLine
from skymask.projection.segment import ProjectedSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObserverGrid:
    """Planar grid of observer positions for batch skymask generation."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    step_m: float
    max_points: int | None = None


def _frange_inclusive(start: float, stop: float, step: float) -> list[float]:
    """Build an inclusive floating-point range with deterministic rounding."""
    if step <= 0.0:
        raise ValueError("step must be positive.")
    if start > stop:
        raise ValueError("start must be <= stop.")

    values: list[float] = []
    current = start
    while current <= stop + 1e-9:
        values.append(round(current, 6))
        current += step
    return values


def generate_observer_grid(grid: ObserverGrid) -> list[tuple[float, float]]:
    """Generate `(x, y)` observer positions covered by `grid`."""
    xs = _frange_inclusive(grid.x_min, grid.x_max, grid.step_m)
    ys = _frange_inclusive(grid.y_min, grid.y_max, grid.step_m)
    if grid.max_points is not None and len(xs) * len(ys) > grid.max_points:
        raise ValueError("grid points exceed max_points safety cap")
    return [(x, y) for x in xs for y in ys]


def candidate_segments(
    dataset: EdgeDataset,
    index: EdgeIndex,
    observer: tuple[float, float],
    max_distance_m: float,
) -> list[ProjectedSegment]:
    """Project every edge whose midpoint lies within range of the observer.

    Edges seen edge-on or with antipodal endpoints carry no angular extent
    and are skipped.
    """
    segments: list[ProjectedSegment] = []
    nearby = index.within(observer, max_distance_m)
    for idx in nearby:
        seg = ProjectedSegment.from_points(*dataset.relative_edge(idx, observer))
        if seg is not None:
            segments.append(seg)
    logger.debug(
        "observer=(%.3f, %.3f) nearby_edges=%d degenerate_skipped=%d",
        observer[0],
        observer[1],
        len(nearby),
        len(nearby) - len(segments),
    )
    return segments


@dataclass(frozen=True)
class SkymaskBuild:
    """One observer's skymask and the sweep statistics that produced it."""

    skymask: IntervalMap[ProjectedLine]
    segment_count: int
    processed: int
    pruned: int


def build_observer_skymask(
    dataset: EdgeDataset,
    index: EdgeIndex,
    observer: tuple[float, float] | None = None,
    cfg: SkymaskConfig | None = None,
) -> SkymaskBuild:
    """Sweep the edges around `observer` (default: bounding-box centre)."""
    cfg = cfg or SkymaskConfig()
    position = observer if observer is not None else dataset.bbox.center()
    segments = candidate_segments(dataset, index, position, cfg.max_distance_m)
    builder = EnvelopeBuilder(cfg.eps)
    rmap = builder.build(segments)
    return SkymaskBuild(
        skymask=rmap,
        segment_count=len(segments),
        processed=builder.processed,
        pruned=builder.pruned,
    )


def compute_skymask(
    dataset: EdgeDataset,
    index: EdgeIndex,
    observer: tuple[float, float] | None = None,
    cfg: SkymaskConfig | None = None,
) -> tuple[IntervalMap[ProjectedLine], int]:
    """Compute the skymask at `observer` (default: bounding-box centre).

    Returns the skymask and the number of segments fed to the sweep.
    """
    build = build_observer_skymask(dataset, index, observer, cfg)
    return build.skymask, build.segment_count


def build_skymasks(
    dataset: EdgeDataset,
    index: EdgeIndex,
    grid: ObserverGrid,
    cfg: SkymaskConfig | None = None,
) -> dict[str, IntervalMap[ProjectedLine]]:
    """Compute skymasks for every observer of a grid, keyed by position."""
    results: dict[str, IntervalMap[ProjectedLine]] = {}
    for x, y in generate_observer_grid(grid):
        rmap, _ = compute_skymask(dataset, index, (x, y), cfg)
        results[f"x={x:.3f},y={y:.3f}"] = rmap
    return results
