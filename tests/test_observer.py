"""Tests for observer-level skymask orchestration."""

from __future__ import annotations

from math import atan, isclose, pi

import pytest

from skymask.config import SkymaskConfig
from skymask.geo.edges import EdgeDataset
from skymask.index.spatial import EdgeIndex
from skymask.orchestrate.observer import (
    ObserverGrid,
    build_skymasks,
    candidate_segments,
    compute_skymask,
    generate_observer_grid,
)


def _box_edges(cx: float, cy: float, half: float, height: float) -> list[list[float]]:
    corners = [
        (cx + half, cy - half),
        (cx + half, cy + half),
        (cx - half, cy + half),
        (cx - half, cy - half),
    ]
    return [[*corners[i], height, *corners[(i + 1) % 4], height] for i in range(4)]


def _courtyard() -> EdgeDataset:
    """A square courtyard wall around (100, 200) plus one far tower."""
    edges = _box_edges(100.0, 200.0, 10.0, 20.0)
    edges += _box_edges(2100.0, 200.0, 5.0, 300.0)
    return EdgeDataset.from_edges(edges)


def test_candidate_segments_filters_by_distance() -> None:
    """Edges beyond the search radius are not projected."""
    dataset = _courtyard()
    index = EdgeIndex(dataset)

    near = candidate_segments(dataset, index, (100.0, 200.0), max_distance_m=50.0)
    everything = candidate_segments(dataset, index, (100.0, 200.0), max_distance_m=5000.0)

    assert len(near) == 4
    assert len(everything) == 8


def test_candidate_segments_skips_edge_on_edges() -> None:
    """An edge in line with the observer has no angular extent and is dropped."""
    dataset = EdgeDataset.from_edges(
        [
            [10.0, 0.0, 5.0, 20.0, 0.0, 5.0],
            [10.0, -5.0, 5.0, 10.0, 5.0, 5.0],
        ]
    )

    segments = candidate_segments(dataset, EdgeIndex(dataset), (0.0, 0.0), max_distance_m=100.0)

    assert len(segments) == 1


def test_compute_skymask_defaults_to_bbox_centre() -> None:
    """Without an observer the bounding-box centre is used."""
    dataset = EdgeDataset.from_edges(_box_edges(100.0, 200.0, 10.0, 20.0))

    rmap, count = compute_skymask(dataset, EdgeIndex(dataset), cfg=SkymaskConfig(eps=1e-9))

    assert count == 4
    assert rmap.gaps(-pi, pi) == []
    assert isclose(rmap.get(0.0).at(0.0), atan(2.0))


def test_compute_skymask_respects_config_distance() -> None:
    """The far tower only shows up when the search radius reaches it."""
    dataset = _courtyard()
    index = EdgeIndex(dataset)
    observer = (100.0, 200.0)

    _, near_count = compute_skymask(dataset, index, observer, SkymaskConfig(max_distance_m=100.0))
    _, far_count = compute_skymask(dataset, index, observer, SkymaskConfig(max_distance_m=3000.0))

    assert near_count == 4
    assert far_count == 8


def test_generate_observer_grid_and_cap() -> None:
    """Grid points are inclusive and bounded by the safety cap."""
    grid = ObserverGrid(x_min=0.0, x_max=10.0, y_min=0.0, y_max=5.0, step_m=5.0)

    assert generate_observer_grid(grid) == [
        (0.0, 0.0),
        (0.0, 5.0),
        (5.0, 0.0),
        (5.0, 5.0),
        (10.0, 0.0),
        (10.0, 5.0),
    ]
    with pytest.raises(ValueError):
        generate_observer_grid(
            ObserverGrid(x_min=0.0, x_max=10.0, y_min=0.0, y_max=5.0, step_m=5.0, max_points=3)
        )


def test_build_skymasks_keys_by_position() -> None:
    """Batch results are keyed by formatted observer position."""
    dataset = _courtyard()
    grid = ObserverGrid(x_min=98.0, x_max=102.0, y_min=200.0, y_max=200.0, step_m=4.0)

    results = build_skymasks(dataset, EdgeIndex(dataset), grid, SkymaskConfig(max_distance_m=100.0))

    assert sorted(results) == ["x=102.000,y=200.000", "x=98.000,y=200.000"]
    for rmap in results.values():
        assert rmap.gaps(-pi, pi) == []
