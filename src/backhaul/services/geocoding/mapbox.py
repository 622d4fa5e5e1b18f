"""Async client for the Mapbox geocoding API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ...config import settings
from ...models.domain import Coordinate, Stop

logger = logging.getLogger(__name__)


class MapboxGeocoder:
    """Forward and reverse geocoding against ``mapbox.places``.

    Every method absorbs provider failures (transport errors, non-2xx status,
    malformed payloads, empty result sets) and returns ``None``.
    """

    name = "mapbox"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        proximity: tuple[float, float] | None = None,
        country: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.token = token or settings.mapbox_token
        if not self.token:
            raise ValueError("Mapbox token is not configured.")
        self.base_url = (base_url or settings.mapbox_geocoding_url).rstrip("/")
        self.proximity = proximity or settings.geocoding_proximity
        self.country = country or settings.geocoding_country
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._client = client

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        if self._client is not None:
            response = await self._client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0)) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def resolve(self, text: str) -> Stop | None:
        """Return the single best match for ``text`` or ``None``."""
        query = text.strip()
        if not query:
            return None

        lng, lat = self.proximity
        params = {
            "access_token": self.token,
            "proximity": f"{lng},{lat}",
            "country": self.country,
            "limit": 1,
        }
        url = f"{self.base_url}/{quote(query, safe='')}.json"
        logger.debug(f"Geocoding with Mapbox: {query}")
        try:
            data = await self._get_json(url, params)
        except httpx.HTTPError as exc:
            logger.warning(f"Mapbox geocoding request failed for '{query}': {exc}")
            return None
        except ValueError as exc:
            logger.warning(f"Mapbox geocoding returned invalid JSON for '{query}': {exc}")
            return None

        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, list) or not features:
            logger.warning(f"No results from Mapbox for '{query}'")
            return None

        try:
            feature = features[0]
            lng, lat = feature["center"]
            stop = Stop(coordinate=Coordinate(lat=float(lat), lng=float(lng)), label=feature.get("place_name") or query)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Malformed Mapbox feature for '{query}': {exc}")
            return None
        logger.info(f"Geocoded '{query}' to {stop.lat}, {stop.lng} ({stop.label})")
        return stop

    async def reverse(self, lat: float, lng: float) -> str | None:
        """Return the place name nearest to ``(lat, lng)`` or ``None``."""
        url = f"{self.base_url}/{lng},{lat}.json"
        try:
            data = await self._get_json(url, {"access_token": self.token, "limit": 1})
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Mapbox reverse geocoding failed for {lat},{lng}: {exc}")
            return None

        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, list) or not features:
            return None
        first = features[0]
        place_name = first.get("place_name") if isinstance(first, dict) else None
        return place_name if isinstance(place_name, str) else None
