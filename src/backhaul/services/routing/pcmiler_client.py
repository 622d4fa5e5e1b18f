"""Async HTTP client for PC*Miler truck routing reports."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Sequence

import httpx
from shapely.geometry import LineString

from ...config import settings
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RouteResult:
    """Driving route for an ordered list of waypoints.

    Either field may be ``None`` when the corresponding report failed.
    """

    geometry: LineString | None
    distance_miles: float | None


def format_stops(points: Sequence[Coordinate]) -> str:
    """Serialize waypoints as ``lng,lat`` pairs joined by ``;`` in visit order."""
    return ";".join(f"{point.lng},{point.lat}" for point in points)


def _total_miles(lines: Any) -> float | None:
    if isinstance(lines, list) and lines:
        total_line = lines[-1]
        if isinstance(total_line, dict) and total_line.get("TMiles") is not None:
            return float(total_line["TMiles"])
    return None


def extract_total_miles(data: Any) -> float | None:
    """Pull the total mileage out of a mileage report.

    Accepts a list of report sets carrying ``ReportLines`` or a nested
    ``MileageReport``, or a flat object with ``TMiles``.
    """
    if isinstance(data, list) and data:
        report_set = data[0]
        if isinstance(report_set, dict):
            if "ReportLines" in report_set:
                miles = _total_miles(report_set["ReportLines"])
                if miles is not None:
                    return miles
            mileage_report = report_set.get("MileageReport")
            if mileage_report is not None:
                lines = mileage_report.get("ReportLines", mileage_report) if isinstance(mileage_report, dict) else mileage_report
                miles = _total_miles(lines)
                if miles is not None:
                    return miles

    if isinstance(data, dict) and data.get("TMiles") is not None:
        return float(data["TMiles"])
    return None


def extract_line_geometry(data: Any) -> LineString | None:
    """Pull a single line out of a GeoJSON route path.

    Accepts a FeatureCollection (first feature), a Feature, or a bare geometry.
    A MultiLineString is flattened by concatenating its parts in order.
    """
    if not isinstance(data, dict):
        return None

    geometry = None
    kind = data.get("type")
    if kind == "FeatureCollection" and data.get("features"):
        geometry = data["features"][0].get("geometry")
    elif kind == "Feature" and data.get("geometry"):
        geometry = data["geometry"]
    elif kind in ("MultiLineString", "LineString") or data.get("coordinates"):
        geometry = data

    if not isinstance(geometry, dict):
        return None

    coordinates = geometry.get("coordinates") or []
    if geometry.get("type") == "MultiLineString":
        coordinates = [point for part in coordinates for point in part]
    points = [(float(point[0]), float(point[1])) for point in coordinates]
    if len(points) < 2:
        return None
    return LineString(points)


def straight_line(points: Sequence[Coordinate]) -> LineString:
    """Display-only stand-in for a route whose geometry could not be fetched."""
    return LineString([point.as_lng_lat() for point in points])


class PCMilerClient:
    """Mileage and route-path reports from the PC*Miler REST service.

    Failures never propagate: each report resolves to ``None`` on transport
    errors, non-2xx responses, unrecognized payloads or timeouts.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or settings.pcmiler_api_key
        if not self.api_key:
            raise ValueError("PC*Miler API key is not configured.")
        self.base_url = (base_url or settings.pcmiler_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._client = client

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        params = {**params, "authToken": self.api_key}
        if self._client is not None:
            response = await self._client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0)) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    def _limit(self, timeout: float | None) -> float:
        return timeout if timeout is not None else self.timeout

    async def _report(self, path: str, params: dict[str, Any], timeout: float | None) -> Any:
        try:
            return await asyncio.wait_for(self._get_json(path, params), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"PC*Miler {path} request timed out after {timeout}s")
        except httpx.HTTPStatusError as exc:
            logger.warning(f"PC*Miler {path} returned {exc.response.status_code}")
        except httpx.HTTPError as exc:
            logger.warning(f"PC*Miler {path} request failed: {exc}")
        except ValueError as exc:
            logger.warning(f"PC*Miler {path} returned invalid JSON: {exc}")
        return None

    async def get_driving_distance(self, points: Sequence[Coordinate], timeout: float | None = None) -> float | None:
        """Total truck driving distance in miles, or ``None``."""
        data = await self._report(
            "route/routeReports", {"stops": format_stops(points), "reports": "Mileage"}, self._limit(timeout)
        )
        if data is None:
            return None
        try:
            miles = extract_total_miles(data)
        except (TypeError, ValueError) as exc:
            logger.warning(f"Unreadable PC*Miler mileage report: {exc}")
            return None
        if miles is None:
            logger.warning(f"Could not extract miles from PC*Miler response: {json.dumps(data)[:500]}")
        return miles

    async def get_route_geometry(self, points: Sequence[Coordinate], timeout: float | None = None) -> LineString | None:
        """Truck route path as a single line, or ``None``."""
        data = await self._report("route/routePath", {"stops": format_stops(points)}, self._limit(timeout))
        if data is None:
            return None
        try:
            geometry = extract_line_geometry(data)
        except (AttributeError, IndexError, TypeError, ValueError) as exc:
            logger.warning(f"Unreadable PC*Miler route path: {exc}")
            return None
        if geometry is None:
            logger.warning(f"Could not extract geometry from PC*Miler response: {json.dumps(data)[:500]}")
        return geometry

    async def fetch_route(self, points: Sequence[Coordinate], timeout: float | None = None) -> RouteResult | None:
        """Fetch mileage and geometry concurrently. ``None`` when both fail."""
        if len(points) < 2:
            raise ValueError("At least two waypoints are required for a route.")
        distance, geometry = await asyncio.gather(
            self.get_driving_distance(points, timeout),
            self.get_route_geometry(points, timeout),
        )
        if distance is None and geometry is None:
            return None
        return RouteResult(geometry=geometry, distance_miles=distance)


def check_health(client: PCMilerClient | None = None) -> bool:
    """Whether a routing provider is configured."""
    if client is not None:
        return bool(client.api_key)
    return bool(settings.pcmiler_api_key)
