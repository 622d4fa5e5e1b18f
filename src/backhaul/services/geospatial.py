"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import Coordinate

EARTH_RADIUS_MILES = 3959.0
KM_PER_MILE = 1.60934


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in miles between two coordinates."""

    return haversine_miles(a.lat, a.lng, b.lat, b.lng)


def is_along_route(point: Coordinate, start: Coordinate, end: Coordinate, max_deviation_miles: float) -> bool:
    """Return True if detouring through ``point`` adds at most ``max_deviation_miles``.

    Straight-line stand-in for a corridor test when no route geometry is available.
    """

    direct = distance_miles(start, end)
    detour = distance_miles(start, point) + distance_miles(point, end)
    return detour - direct <= max_deviation_miles
