"""Demo: build skymasks over a synthetic city block and print a summary."""

from __future__ import annotations

import random
import sys
from math import degrees
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from skymask.config import SkymaskConfig  # noqa: E402
from skymask.contracts import covered_fraction  # noqa: E402
from skymask.geo.edges import EdgeDataset  # noqa: E402
from skymask.index.spatial import EdgeIndex  # noqa: E402
from skymask.orchestrate.observer import ObserverGrid, build_skymasks  # noqa: E402
from skymask.view.horizon import sample_horizon_deg  # noqa: E402


def _box_edges(cx: float, cy: float, half: float, height: float) -> list[list[float]]:
    """Return the four roof edges of a square building."""
    corners = [
        (cx - half, cy - half),
        (cx + half, cy - half),
        (cx + half, cy + half),
        (cx - half, cy + half),
    ]
    return [
        [*corners[i], height, *corners[(i + 1) % 4], height]
        for i in range(4)
    ]


def main() -> int:
    """Build a block of buildings and report skymasks on a street grid."""
    rng = random.Random(7)
    edges: list[list[float]] = []
    for bx in range(-3, 4):
        for by in range(-3, 4):
            edges.extend(_box_edges(bx * 40.0, by * 40.0, 12.0, rng.uniform(6.0, 60.0)))

    dataset = EdgeDataset.from_edges(edges)
    index = EdgeIndex(dataset)
    grid = ObserverGrid(x_min=-60.0, x_max=60.0, y_min=-20.0, y_max=-20.0, step_m=40.0)
    cfg = SkymaskConfig(eps=1e-6, max_distance_m=200.0)

    skymasks = build_skymasks(dataset, index, grid, cfg)

    print("=== Skymask Street Demo ===")
    print(f"buildings: {len(dataset) // 4}, edges: {len(dataset)}\n")
    print("observer              | intervals | covered | max elev")
    print("----------------------+-----------+---------+---------")
    for key, rmap in skymasks.items():
        profile = sample_horizon_deg(rmap, 360)
        print(
            f"{key:<21} | {len(rmap):>9} | {covered_fraction(rmap):>7.3f} | "
            f"{max(profile):>7.2f}"
        )

    sample = next(iter(skymasks.values()))
    highest = max(sample.items(), key=lambda item: item[2].at((item[0] + item[1]) / 2.0))
    print(f"\nhighest interval mid-elevation: {degrees(highest[2].at((highest[0] + highest[1]) / 2.0)):.2f} deg")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
