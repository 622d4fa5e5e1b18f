"""Best-effort geocoding: an ordered chain of resolution strategies."""

from __future__ import annotations

import asyncio
import functools
import logging
import re
from typing import Iterable, Optional, Protocol, Sequence

from ...config import settings
from ...models.domain import Coordinate, Stop
from .fallback import lookup_static
from .mapbox import MapboxGeocoder

logger = logging.getLogger(__name__)

# "..., City, ST" or "..., City ST 28036"
CITY_STATE_PATTERN = re.compile(r",\s*([A-Za-z\s]+),?\s*([A-Z]{2})")
BATCH_DELAY_SECONDS = 0.05


class GeocodingStrategy(Protocol):
    name: str

    async def resolve(self, text: str) -> Stop | None:
        ...


class StaticTableStrategy:
    """Resolve against the bundled city and ZIP tables."""

    name = "static"

    async def resolve(self, text: str) -> Stop | None:
        return lookup_static(text)


class Geocoder:
    """Run strategies in order and return the first resolved stop.

    Provider strategies are expected to swallow their own failures. A strategy
    that exceeds ``timeout`` is abandoned and the next one is tried. The chain
    never raises for an unresolvable location; it returns ``None`` and the
    caller substitutes a default such as fleet home.
    """

    def __init__(
        self,
        strategies: Sequence[GeocodingStrategy],
        provider: MapboxGeocoder | None = None,
        timeout: float | None = None,
    ) -> None:
        self.strategies = tuple(strategies)
        self.provider = provider
        self.timeout = timeout

    async def geocode(self, text: Optional[str], timeout: float | None = None) -> Stop | None:
        if not text or not text.strip():
            return None
        limit = timeout if timeout is not None else self.timeout
        for strategy in self.strategies:
            try:
                result = await asyncio.wait_for(strategy.resolve(text), limit)
            except asyncio.TimeoutError:
                logger.warning(f"Geocoding strategy '{strategy.name}' timed out after {limit}s for '{text}'")
                continue
            except Exception:
                # CancelledError is a BaseException and still propagates
                logger.exception(f"Geocoding strategy '{strategy.name}' failed for '{text}'")
                continue
            if result is not None:
                return result
            logger.debug(f"Geocoding strategy '{strategy.name}' did not resolve '{text}'")
        return None

    async def reverse_geocode(self, lat: float, lng: float, timeout: float | None = None) -> str | None:
        if self.provider is None:
            logger.warning("Geocoding provider not configured, cannot reverse geocode")
            return None
        limit = timeout if timeout is not None else self.timeout
        try:
            return await asyncio.wait_for(self.provider.reverse(lat, lng), limit)
        except asyncio.TimeoutError:
            logger.warning(f"Reverse geocoding timed out for {lat},{lng}")
            return None
        except Exception:
            logger.exception(f"Reverse geocoding failed for {lat},{lng}")
            return None

    async def batch_geocode(
        self, texts: Iterable[str], delay_seconds: float = BATCH_DELAY_SECONDS
    ) -> list[tuple[str, Stop | None]]:
        """Geocode sequentially, pausing between calls to respect provider rate limits."""
        results: list[tuple[str, Stop | None]] = []
        for text in texts:
            results.append((text, await self.geocode(text)))
            if self.provider is not None and delay_seconds > 0:
                await asyncio.sleep(delay_seconds)
        return results

    async def geocode_fleet_address(self, address: Optional[str]) -> Coordinate | None:
        """Geocode a full street address, trying its "City, ST" part first."""
        if not address:
            logger.error("No address provided to geocode")
            return None

        match = CITY_STATE_PATTERN.search(address)
        if match:
            search = f"{match.group(1).strip()}, {match.group(2).strip()}"
            logger.info(f"Geocoding fleet address '{address}' as '{search}'")
            result = await self.geocode(search)
            if result is not None:
                return result.coordinate

        result = await self.geocode(address)
        if result is not None:
            return result.coordinate
        logger.error(f"Failed to geocode fleet address '{address}'")
        return None


def build_geocoder(provider: MapboxGeocoder | None = None, timeout: float | None = None) -> Geocoder:
    """Provider first (when configured), then the static tables."""
    if provider is None and settings.geocoding_configured:
        provider = MapboxGeocoder()
    if provider is None:
        logger.warning("Mapbox token not configured, using fallback geocoding")
    strategies: list[GeocodingStrategy] = [provider] if provider is not None else []
    strategies.append(StaticTableStrategy())
    return Geocoder(
        strategies, provider=provider, timeout=timeout if timeout is not None else settings.http_timeout_seconds
    )


@functools.lru_cache(maxsize=1)
def get_geocoder() -> Geocoder:
    return build_geocoder()


async def geocode(text: Optional[str], timeout: float | None = None) -> Stop | None:
    return await get_geocoder().geocode(text, timeout=timeout)
