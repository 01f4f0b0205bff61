"""Upper-envelope sweep that merges projected segments into a skymask."""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable
from math import inf, pi
from typing import TypeVar

from skymask.envelope.interval_map import IntervalMap
from skymask.projection.line import ProjectedCurve, ProjectedLine, float_cmp
from skymask.projection.segment import ProjectedSegment

logger = logging.getLogger(__name__)

_FULL_CIRCLE = (-pi, pi)

CurveT = TypeVar("CurveT", bound=ProjectedCurve)


class EnvelopeInvariantError(RuntimeError):
    """Raised when two curves change order inside a range but never cross there."""


def winning_ranges(
    curve: CurveT,
    entries: Iterable[tuple[float, float, CurveT]],
    domain: tuple[float, float],
    eps: float,
) -> list[tuple[float, float]]:
    """Return the parts of `domain` where `curve` beats the committed `entries`.

    Each entry is clipped to `domain` and compared at both ends: below or
    tied at both ends loses, above or tied at both wins the whole piece, and
    a sign change splits the piece at the crossing.
    """
    dom_s, dom_e = domain
    updates: list[tuple[float, float]] = []
    for entry_s, entry_e, entry_curve in entries:
        start, end = max(dom_s, entry_s), min(dom_e, entry_e)
        at_start = float_cmp(curve.at(start), entry_curve.at(start), eps)
        at_end = float_cmp(curve.at(end), entry_curve.at(end), eps)

        if at_start <= 0 and at_end <= 0:
            continue
        if at_start >= 0 and at_end >= 0:
            updates.append((start, end))
            continue

        cross = curve.cross_point(entry_curve, (start, end))
        if cross is None:
            raise EnvelopeInvariantError(
                f"{curve!r} changes order against {entry_curve!r} on "
                f"[{start!r}, {end!r}) but the curves do not cross there"
            )
        if at_start < 0:
            updates.append((cross, end))
        else:
            updates.append((start, cross))
    return updates


class EnvelopeBuilder:
    """Build the skymask: for every azimuth, the line with the highest elevation.

    Segments are processed from the highest `top_endpoint()` down. Until the
    whole circle is claimed, each segment also takes every gap it spans. Once
    it is, the sweep stops at the first segment whose top endpoint lies below
    the lowest boundary elevation committed so far.
    """

    def __init__(self, eps: float = 1e-6) -> None:
        """Initialize builder.

        Args:
            eps: Elevations closer than this are treated as equal.
        """
        if eps < 0.0:
            raise ValueError("eps must be non-negative")
        self.eps = eps
        self.processed = 0
        self.pruned = 0

    def build(self, segments: Iterable[ProjectedSegment]) -> IntervalMap[ProjectedLine]:
        """Sweep `segments` and return the dominant line per azimuth range."""
        # Input order breaks ties between equal keys.
        heap = [(-seg.top_endpoint(), order, seg) for order, seg in enumerate(segments)]
        heapq.heapify(heap)

        rmap: IntervalMap[ProjectedLine] = IntervalMap()
        lower = inf
        fill_all = False
        self.processed = 0
        self.pruned = 0

        while heap:
            neg_top, _, seg = heapq.heappop(heap)
            if fill_all:
                if -neg_top < lower:
                    self.pruned = len(heap) + 1
                    break
            elif rmap.covers(*_FULL_CIRCLE):
                fill_all = True

            self.processed += 1
            for dom_s, dom_e in seg.subranges():
                updates = winning_ranges(
                    seg.line, rmap.overlapping(dom_s, dom_e), (dom_s, dom_e), self.eps
                )
                if not fill_all:
                    updates.extend(rmap.gaps(dom_s, dom_e))
                for start, end in updates:
                    lower = min(lower, seg.line.at(start), seg.line.at(end))
                    rmap.insert(start, end, seg.line)

        logger.debug(
            "skymask sweep finished processed=%d pruned=%d intervals=%d",
            self.processed,
            self.pruned,
            len(rmap),
        )
        return rmap


def skymask(segments: Iterable[ProjectedSegment], eps: float = 1e-6) -> IntervalMap[ProjectedLine]:
    """Compute the skymask over `[-pi, pi)` from projected segments."""
    return EnvelopeBuilder(eps).build(segments)
