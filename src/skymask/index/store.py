"""Expiring in-memory cache of observer skymasks."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from skymask.envelope.interval_map import IntervalMap
from skymask.orchestrate.observer import SkymaskBuild
from skymask.projection.line import ProjectedLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkymaskCacheKey:
    """Identity of one observer skymask: dataset, position and sweep settings."""

    dataset_id: str
    x: float
    y: float
    eps: float
    max_distance_m: float

    @classmethod
    def for_observer(
        cls, dataset_id: str, x: float, y: float, eps: float, max_distance_m: float
    ) -> SkymaskCacheKey:
        """Build a key with observer coordinates quantized to millimetres."""
        return cls(dataset_id, round(x, 3), round(y, 3), eps, max_distance_m)


@dataclass
class SkymaskEntry:
    """A cached sweep result, its expiry deadline and how often it was reused."""

    build: SkymaskBuild
    expires_at: float
    hits: int = 0

    @property
    def skymask(self) -> IntervalMap[ProjectedLine]:
        return self.build.skymask

    def stats(self) -> dict[str, int]:
        """Sweep statistics of the build plus the reuse count."""
        return {
            "segments": self.build.segment_count,
            "processed": self.build.processed,
            "pruned": self.build.pruned,
            "hits": self.hits,
        }


class SkymaskStore:
    """Observer skymasks kept for `ttl_seconds`, at most `max_entries` at once.

    An expired entry is dropped when it is looked up or when room is needed
    for a new build; beyond that the least recently used entry gives way.
    """

    def __init__(
        self,
        ttl_seconds: float = 600,
        max_entries: int = 16,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = Lock()
        self._entries: OrderedDict[SkymaskCacheKey, SkymaskEntry] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def build_count(self) -> int:
        """Number of sweeps this store has run."""
        return self.misses

    def _live_entry(self, key: SkymaskCacheKey, now: float) -> SkymaskEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= now:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    def _make_room(self, now: float) -> None:
        for stale in [key for key, entry in self._entries.items() if entry.expires_at <= now]:
            del self._entries[stale]
        while len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted skymask %s", evicted)

    def get_or_build(
        self,
        key: SkymaskCacheKey,
        builder: Callable[[], SkymaskBuild],
    ) -> tuple[SkymaskEntry, bool]:
        """Return the live entry for `key`, running `builder` only on a miss.

        The flag is True when this call ran the sweep.
        """
        with self._lock:
            now = self._clock()
            entry = self._live_entry(key, now)
            if entry is not None:
                entry.hits += 1
                self.hits += 1
                return entry, False

            build = builder()
            self._make_room(now)
            entry = SkymaskEntry(build=build, expires_at=now + self.ttl_seconds)
            self._entries[key] = entry
            self.misses += 1
            logger.debug(
                "built skymask %s segments=%d processed=%d pruned=%d",
                key,
                build.segment_count,
                build.processed,
                build.pruned,
            )
            return entry, True

    def stats(self) -> dict[str, int]:
        """Entry count and lookup outcomes since the store was created."""
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}
