"""Time-bounded memo of route/corridor computations with single-flight misses."""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from shapely.geometry import LineString

from ...config import settings
from ...models.domain import Coordinate
from .builder import Corridor

logger = logging.getLogger(__name__)

CacheKey = tuple[float, float, float, float, float]


@dataclass(slots=True)
class CorridorResult:
    route: LineString
    corridor: Optional[Corridor]
    distance_miles: Optional[float]
    route_source: str = "pcmiler"


@dataclass(slots=True)
class CacheEntry:
    key: CacheKey
    data: CorridorResult
    width_miles: float
    created_at: float
    ttl: float


class CorridorCache:
    """Route/corridor cache keyed by rounded endpoints and corridor width.

    Entries expire ``ttl`` seconds after creation and are evicted lazily on the
    next lookup. Concurrent misses on one key share a single computation per
    event loop; entries are shared across threads.
    Only results that carry a corridor are stored.
    """

    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl if ttl is not None else settings.corridor_cache_ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._inflight: dict[tuple[asyncio.AbstractEventLoop, CacheKey], asyncio.Future] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(origin: Coordinate, destination: Coordinate, width_miles: float) -> CacheKey:
        return (
            round(origin.lat, 3),
            round(origin.lng, 3),
            round(destination.lat, 3),
            round(destination.lng, 3),
            float(width_miles),
        )

    def _is_fresh(self, entry: CacheEntry, width_miles: float) -> bool:
        return self._clock() - entry.created_at < entry.ttl and entry.width_miles == width_miles

    def get(self, origin: Coordinate, destination: Coordinate, width_miles: float) -> CorridorResult | None:
        key = self.make_key(origin, destination, width_miles)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_fresh(entry, width_miles):
                del self._entries[key]
                return None
            return entry.data

    async def get_or_compute(
        self,
        origin: Coordinate,
        destination: Coordinate,
        width_miles: float,
        compute: Callable[[], Awaitable[CorridorResult | None]],
    ) -> CorridorResult | None:
        key = self.make_key(origin, destination, width_miles)
        loop = asyncio.get_running_loop()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if self._is_fresh(entry, width_miles):
                    logger.debug(f"Corridor cache hit for {key}")
                    return entry.data
                del self._entries[key]

            task = self._inflight.get((loop, key))
            if task is None:
                logger.debug(f"Corridor cache miss for {key}")
                task = asyncio.ensure_future(compute())
                self._inflight[(loop, key)] = task
                task.add_done_callback(functools.partial(self._store, loop, key, width_miles))
            else:
                logger.debug(f"Joining in-flight corridor computation for {key}")

        # A cancelled waiter leaves the shared computation running for the others.
        return await asyncio.shield(task)

    def _store(
        self, loop: asyncio.AbstractEventLoop, key: CacheKey, width_miles: float, task: asyncio.Future
    ) -> None:
        with self._lock:
            self._inflight.pop((loop, key), None)
            if task.cancelled() or task.exception() is not None:
                return
            result = task.result()
            if result is None or result.corridor is None:
                return
            self._entries[key] = CacheEntry(
                key=key, data=result, width_miles=width_miles, created_at=self._clock(), ttl=self.ttl
            )
        logger.debug(f"Route and corridor cached for {key}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.debug("Corridor cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
