"""Routing and corridor endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status
from shapely.geometry import mapping

from ...models.domain import Coordinate
from ...schemas.routing import CorridorRequest, CorridorResponse, RouteResponse
from ...services.corridor.service import corridor_result_to_geojson, get_route_with_corridor, get_routing_client
from ...services.routing.pcmiler_client import straight_line

router = APIRouter(prefix="/routing", tags=["routing"])


def _parse_stops(stops: str) -> list[Coordinate]:
    points: list[Coordinate] = []
    for pair in stops.split(";"):
        lng, lat = (float(value) for value in pair.split(","))
        points.append(Coordinate(lat=lat, lng=lng))
    if len(points) < 2:
        raise ValueError("At least two stops are required.")
    return points


@router.get("/route", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def route(stops: str = Query(..., description="lng,lat pairs separated by ';' in visit order.")) -> RouteResponse:
    try:
        points = _parse_stops(stops)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid stops: {exc}") from exc

    client = get_routing_client()
    result = await client.fetch_route(points) if client is not None else None
    if result is None or result.geometry is None:
        return RouteResponse(
            stops=stops,
            geometry=mapping(straight_line(points)),
            distance_miles=result.distance_miles if result is not None else None,
            fallback=True,
        )
    return RouteResponse(stops=stops, geometry=mapping(result.geometry), distance_miles=result.distance_miles)


@router.post("/corridor", response_model=CorridorResponse, status_code=status.HTTP_200_OK)
async def corridor(payload: CorridorRequest) -> CorridorResponse:
    origin = Coordinate(lat=payload.origin.lat, lng=payload.origin.lng)
    destination = Coordinate(lat=payload.destination.lat, lng=payload.destination.lng)
    result = await get_route_with_corridor(
        origin, destination, payload.width_miles, clip_to_land=payload.clip_to_land
    )
    return CorridorResponse(**corridor_result_to_geojson(result))
