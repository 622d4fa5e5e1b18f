"""Reference landmass used to clip corridors: a coarse outline of the contiguous US.

Built once at import as an immutable shapely polygon. Coordinates are (lng, lat).
"""

from __future__ import annotations

import logging

from shapely.geometry import Polygon
from shapely.validation import explain_validity

logger = logging.getLogger(__name__)

CONTIGUOUS_US_OUTLINE: tuple[tuple[float, float], ...] = (
    # Canadian border, west to east
    (-124.7, 48.4), (-123.3, 49.0), (-95.15, 49.0), (-95.15, 49.38), (-89.6, 48.0),
    (-84.8, 46.5), (-82.4, 45.3), (-83.0, 42.0), (-79.0, 42.9), (-76.0, 44.2),
    (-74.7, 45.0), (-71.5, 45.0), (-70.0, 46.7), (-69.2, 47.45), (-67.8, 47.1),
    # Atlantic coast, north to south
    (-67.0, 44.8), (-68.8, 44.0), (-70.6, 42.6), (-70.0, 41.9), (-71.0, 41.4),
    (-72.0, 41.0), (-74.0, 40.5), (-74.0, 39.6), (-74.9, 38.9), (-75.1, 38.3),
    (-75.5, 37.6), (-76.0, 36.9), (-75.5, 35.3), (-76.5, 34.7), (-77.9, 33.9),
    (-79.2, 33.2), (-80.8, 32.1), (-81.4, 30.7), (-81.3, 29.9), (-80.6, 28.4),
    (-80.0, 26.7), (-80.1, 25.8), (-80.4, 25.2), (-81.1, 25.1),
    # Gulf coast, east to west
    (-81.8, 26.1), (-82.7, 27.5), (-82.8, 28.9), (-83.7, 29.9), (-85.3, 29.7),
    (-86.5, 30.4), (-88.0, 30.3), (-89.6, 30.2), (-89.4, 29.0), (-90.2, 29.1),
    (-91.8, 29.5), (-93.8, 29.7), (-94.8, 29.3), (-96.5, 28.3), (-97.2, 27.6),
    (-97.2, 25.9),
    # Mexican border, east to west
    (-99.1, 26.4), (-100.3, 28.2), (-101.4, 29.8), (-103.1, 29.0), (-104.5, 29.6),
    (-106.5, 31.8), (-108.2, 31.8), (-108.2, 31.33), (-111.0, 31.33), (-114.8, 32.5),
    (-117.1, 32.5),
    # Pacific coast, south to north
    (-117.3, 33.2), (-118.4, 33.8), (-120.6, 34.5), (-120.9, 35.4), (-121.9, 36.6),
    (-122.5, 37.8), (-123.7, 38.9), (-124.4, 40.4), (-124.2, 42.0), (-124.6, 42.8),
    (-124.0, 46.2),
)


def _build_land_polygon() -> Polygon:
    polygon = Polygon(CONTIGUOUS_US_OUTLINE)
    if not polygon.is_valid:
        logger.warning(f"Land outline is not a valid polygon, repairing: {explain_validity(polygon)}")
        polygon = polygon.buffer(0)
    return polygon


LAND_POLYGON = _build_land_polygon()
