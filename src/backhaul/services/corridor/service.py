"""Route-with-corridor orchestration on top of the routing client and cache."""

from __future__ import annotations

import functools
import logging

from shapely.geometry import mapping

from ...config import settings
from ...models.domain import Coordinate
from ..routing.pcmiler_client import PCMilerClient, straight_line
from .builder import build_corridor
from .cache import CorridorCache, CorridorResult

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=2)
def get_corridor_cache(clipped: bool = False) -> CorridorCache:
    """Process-wide cache used when callers do not inject their own.

    Clipped and unclipped corridors live in separate caches since the key
    carries only endpoints and width.
    """
    return CorridorCache()


@functools.lru_cache(maxsize=1)
def get_routing_client() -> PCMilerClient | None:
    """Process-wide routing client, ``None`` when no API key is configured."""
    if not settings.pcmiler_api_key:
        logger.warning("PC*Miler API key not configured, routes fall back to straight lines")
        return None
    return PCMilerClient()


async def compute_route_with_corridor(
    origin: Coordinate,
    destination: Coordinate,
    width_miles: float,
    *,
    client: PCMilerClient | None,
    clip_to_land: bool = False,
    timeout: float | None = None,
) -> CorridorResult:
    """Fetch the driving route and buffer it.

    When no geometry is available the route is a straight line kept for
    display only and the corridor is ``None``.
    """
    route = await client.fetch_route([origin, destination], timeout=timeout) if client is not None else None
    distance = route.distance_miles if route is not None else None

    if route is None or route.geometry is None:
        logger.warning("Failed to fetch route geometry, using straight line for display")
        return CorridorResult(
            route=straight_line([origin, destination]),
            corridor=None,
            distance_miles=distance,
            route_source="straight_line",
        )

    corridor = build_corridor(route.geometry, width_miles, clip=clip_to_land)
    if corridor is None:
        logger.warning("Failed to create corridor, returning route only")
    return CorridorResult(route=route.geometry, corridor=corridor, distance_miles=distance)


async def get_route_with_corridor(
    origin: Coordinate,
    destination: Coordinate,
    width_miles: float | None = None,
    *,
    client: PCMilerClient | None = None,
    cache: CorridorCache | None = None,
    clip_to_land: bool = False,
    timeout: float | None = None,
) -> CorridorResult:
    """Cached route and corridor between ``origin`` and ``destination``."""
    width = width_miles if width_miles is not None else settings.default_corridor_width_miles
    cache = cache if cache is not None else get_corridor_cache(clip_to_land)
    if client is None:
        client = get_routing_client()

    async def compute() -> CorridorResult:
        return await compute_route_with_corridor(
            origin, destination, width, client=client, clip_to_land=clip_to_land, timeout=timeout
        )

    return await cache.get_or_compute(origin, destination, width, compute)


def corridor_result_to_geojson(result: CorridorResult) -> dict:
    return {
        "route": mapping(result.route),
        "corridor": mapping(result.corridor) if result.corridor is not None else None,
        "distance_miles": result.distance_miles,
        "route_source": result.route_source,
    }
