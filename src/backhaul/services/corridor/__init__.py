"""Corridor construction, caching and orchestration exports."""

from .builder import Corridor, build_corridor, clip_to_land, point_in_corridor
from .cache import CacheEntry, CorridorCache, CorridorResult
from .land import LAND_POLYGON
from .service import get_corridor_cache, get_route_with_corridor

__all__ = [
    "CacheEntry",
    "Corridor",
    "CorridorCache",
    "CorridorResult",
    "LAND_POLYGON",
    "build_corridor",
    "clip_to_land",
    "get_corridor_cache",
    "get_route_with_corridor",
    "point_in_corridor",
]
