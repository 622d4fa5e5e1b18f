"""Buffer route lines into search corridors and test points against them."""

from __future__ import annotations

import logging
import math
from typing import Union

import shapely
from shapely.errors import GEOSException
from shapely.geometry import LineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry

from ..geospatial import KM_PER_MILE
from .land import LAND_POLYGON

KM_PER_DEGREE_LAT = 111.32

Corridor = Union[Polygon, MultiPolygon]

logger = logging.getLogger(__name__)


def _local_projection(line: LineString):
    """Equirectangular projection to kilometres centred on the line, and its inverse."""
    centroid = line.centroid
    lng0, lat0 = centroid.x, centroid.y
    kx = KM_PER_DEGREE_LAT * math.cos(math.radians(lat0))
    ky = KM_PER_DEGREE_LAT

    def forward(coords):
        projected = coords.copy()
        projected[:, 0] = (coords[:, 0] - lng0) * kx
        projected[:, 1] = (coords[:, 1] - lat0) * ky
        return projected

    def inverse(coords):
        lnglat = coords.copy()
        lnglat[:, 0] = coords[:, 0] / kx + lng0
        lnglat[:, 1] = coords[:, 1] / ky + lat0
        return lnglat

    return forward, inverse


def _polygonal_part(geometry: BaseGeometry) -> Corridor | None:
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    polygons: list[Polygon] = []
    for part in getattr(geometry, "geoms", ()):
        if isinstance(part, Polygon):
            polygons.append(part)
        elif isinstance(part, MultiPolygon):
            polygons.extend(part.geoms)
    if not polygons:
        return None
    return polygons[0] if len(polygons) == 1 else MultiPolygon(polygons)


def buffer_route(route: LineString, width_miles: float) -> Polygon | None:
    """Buffer ``route`` by ``width_miles`` on each side."""
    width_km = width_miles * KM_PER_MILE
    forward, inverse = _local_projection(route)
    try:
        buffered = shapely.transform(shapely.transform(route, forward).buffer(width_km), inverse)
    except (GEOSException, ValueError) as exc:
        logger.error(f"Error buffering route into corridor: {exc}")
        return None
    if buffered.is_empty or not buffered.is_valid:
        logger.warning("Route buffer produced an empty or invalid polygon")
        return None
    return buffered


def clip_to_land(corridor: Corridor, land: Polygon = LAND_POLYGON) -> Corridor | None:
    """Intersect ``corridor`` with the landmass. ``None`` when nothing usable remains."""
    try:
        clipped = corridor.intersection(land)
    except GEOSException as exc:
        logger.warning(f"Land clipping failed: {exc}")
        return None
    if clipped.is_empty:
        logger.warning("Land clipping removed the whole corridor")
        return None
    polygonal = _polygonal_part(clipped)
    if polygonal is None or not polygonal.is_valid:
        logger.warning(f"Land clipping produced a non-polygonal or invalid {clipped.geom_type}")
        return None
    return polygonal


def build_corridor(route: LineString | None, width_miles: float, clip: bool = False) -> Corridor | None:
    """Buffer ``route`` into a corridor, optionally clipped to land.

    Degrades instead of raising: a failed buffer yields ``None`` and a failed
    clip yields the unclipped buffer.
    """
    if route is None or not isinstance(route, LineString) or route.is_empty or len(route.coords) < 2:
        logger.warning("Invalid route line for corridor creation")
        return None
    if width_miles <= 0:
        logger.warning(f"Corridor width must be positive, got {width_miles}")
        return None

    corridor = buffer_route(route, width_miles)
    if corridor is None:
        return None
    logger.debug(f"Corridor created: {width_miles}-mile buffer")

    if clip:
        clipped = clip_to_land(corridor)
        if clipped is None:
            logger.warning("Falling back to unclipped corridor")
            return corridor
        return clipped
    return corridor


def point_in_corridor(lat: float, lng: float, corridor: Corridor | None) -> bool:
    """Point-in-polygon test for single or multi-polygon corridors; boundary counts as inside."""
    if corridor is None or corridor.is_empty:
        return False
    return corridor.covers(Point(lng, lat))
