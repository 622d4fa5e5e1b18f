"""Static city and ZIP lookup tables used when the geocoding provider is unavailable."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional

from ...models.domain import Coordinate, Stop

logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r"\b(\d{5})\b")


def _stop(lat: float, lng: float, label: str) -> Stop:
    return Stop(coordinate=Coordinate(lat=lat, lng=lng), label=label)


# Matched as substrings of the lowercased query, in insertion order.
CITY_TABLE: Mapping[str, Stop] = MappingProxyType(
    {
        "davidson": _stop(35.4993, -80.8487, "Davidson, NC"),
        "charlotte": _stop(35.2271, -80.8431, "Charlotte, NC"),
        "raleigh": _stop(35.7796, -78.6382, "Raleigh, NC"),
        "greensboro": _stop(36.0726, -79.7920, "Greensboro, NC"),
        "durham": _stop(35.9940, -78.8986, "Durham, NC"),
        "winston-salem": _stop(36.0999, -80.2442, "Winston-Salem, NC"),
        "fayetteville": _stop(35.0527, -78.8784, "Fayetteville, NC"),
        "cary": _stop(35.7915, -78.7811, "Cary, NC"),
        "wilmington": _stop(34.2257, -77.9447, "Wilmington, NC"),
        "high point": _stop(35.9557, -80.0053, "High Point, NC"),
        "concord": _stop(35.4087, -80.5795, "Concord, NC"),
        "gastonia": _stop(35.2621, -81.1873, "Gastonia, NC"),
        "monroe": _stop(34.9854, -80.5495, "Monroe, NC"),
        "mooresville": _stop(35.5849, -80.8101, "Mooresville, NC"),
        "huntersville": _stop(35.4107, -80.8428, "Huntersville, NC"),
        "kannapolis": _stop(35.4873, -80.6217, "Kannapolis, NC"),
        "cornelius": _stop(35.4862, -80.8590, "Cornelius, NC"),
        "matthews": _stop(35.1168, -80.7237, "Matthews, NC"),
        "burlington": _stop(36.0957, -79.4378, "Burlington, NC"),
        "alachua": _stop(29.7377, -82.4248, "Alachua, FL"),
        "gainesville": _stop(29.6516, -82.3248, "Gainesville, FL"),
        "jacksonville": _stop(30.3322, -81.6557, "Jacksonville, FL"),
        "tampa": _stop(27.9506, -82.4572, "Tampa, FL"),
        "orlando": _stop(28.5383, -81.3792, "Orlando, FL"),
        "lakeland": _stop(28.0395, -81.9498, "Lakeland, FL"),
        "ocala": _stop(29.1872, -82.1401, "Ocala, FL"),
        "palatka": _stop(29.6486, -81.6373, "Palatka, FL"),
        "lake city": _stop(30.1896, -82.6393, "Lake City, FL"),
        "st. augustine": _stop(29.9012, -81.3124, "St. Augustine, FL"),
    }
)

ZIP_TABLE: Mapping[str, Stop] = MappingProxyType(
    {
        "28036": CITY_TABLE["davidson"],
        "28216": CITY_TABLE["charlotte"],
        "27601": CITY_TABLE["raleigh"],
        "27401": CITY_TABLE["greensboro"],
        "32615": CITY_TABLE["alachua"],
        "32601": CITY_TABLE["gainesville"],
        "32099": CITY_TABLE["jacksonville"],
    }
)


def lookup_static(text: Optional[str]) -> Stop | None:
    """Resolve ``text`` against the city table, then the ZIP table."""

    if not text:
        return None
    cleaned = text.lower().strip()

    for key, stop in CITY_TABLE.items():
        if key in cleaned:
            logger.debug(f"Matched city via fallback table: {key}")
            return stop

    zip_match = ZIP_PATTERN.search(cleaned)
    if zip_match:
        stop = ZIP_TABLE.get(zip_match.group(1))
        if stop is not None:
            logger.debug(f"Matched ZIP via fallback table: {zip_match.group(1)}")
            return stop

    logger.warning(f"Could not geocode '{text}' from the fallback tables")
    return None
