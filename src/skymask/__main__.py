"""Command-line entrypoint for skymask."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence

from skymask.config import SkymaskConfig
from skymask.contracts import covered_fraction, skyline_intervals


def setup_logging(verbose: bool = False) -> None:
    """Configure console logging for CLI runs."""
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    """Create and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="skymask",
        description="Building skyline (skymask) command-line interface.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command")
    compute = subparsers.add_parser(
        "compute",
        help="Compute the skymask of a PolygonZ building dataset at one observer.",
    )
    compute.add_argument("--shp", required=True, help="Path to the building dataset.")
    compute.add_argument("--x", type=float, default=None, help="Observer x (default: bbox centre).")
    compute.add_argument("--y", type=float, default=None, help="Observer y (default: bbox centre).")
    compute.add_argument("--max-distance", type=float, default=1000.0)
    compute.add_argument("--eps", type=float, default=1e-6)
    compute.add_argument(
        "--az-bins",
        type=int,
        default=None,
        help="Print a binned horizon profile in degrees instead of raw intervals.",
    )
    compute.add_argument("--verbose", action="store_true")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "compute":
        # Heavy geometry stack is only needed for this subcommand.
        from skymask.geo.loader import read_building_edges
        from skymask.index.spatial import EdgeIndex
        from skymask.orchestrate.observer import compute_skymask
        from skymask.view.horizon import sample_horizon_deg

        if (args.x is None) != (args.y is None):
            parser.error("--x and --y must be given together")
        if args.az_bins is not None and args.az_bins <= 0:
            parser.error("--az-bins must be positive")

        setup_logging(args.verbose)
        cfg = SkymaskConfig(eps=args.eps, max_distance_m=args.max_distance, dataset_path=args.shp)
        dataset = read_building_edges(args.shp)
        observer = (args.x, args.y) if args.x is not None else dataset.bbox.center()
        rmap, segment_count = compute_skymask(dataset, EdgeIndex(dataset), observer, cfg)

        payload: dict[str, object] = {
            "observer": list(observer),
            "segment_count": segment_count,
            "covered_fraction": covered_fraction(rmap),
        }
        if args.az_bins is not None:
            payload["az_step_deg"] = 360.0 / args.az_bins
            payload["horizon_profile_deg"] = sample_horizon_deg(rmap, args.az_bins)
        else:
            payload["intervals"] = [iv.to_dict() for iv in skyline_intervals(rmap)]
        print(json.dumps(payload, indent=2))
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
