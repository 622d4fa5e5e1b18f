"""Geocoding exports."""

from .fallback import CITY_TABLE, ZIP_TABLE, lookup_static
from .mapbox import MapboxGeocoder
from .service import Geocoder, StaticTableStrategy, build_geocoder, geocode, get_geocoder

__all__ = [
    "CITY_TABLE",
    "ZIP_TABLE",
    "Geocoder",
    "MapboxGeocoder",
    "StaticTableStrategy",
    "build_geocoder",
    "geocode",
    "get_geocoder",
    "lookup_static",
]
