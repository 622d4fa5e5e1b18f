"""Backhaul search orchestration: resolve the datum, load candidates, match."""

from __future__ import annotations

import logging

from ...data.loads_repository import get_available_loads, parse_loads
from ...models.domain import CandidateLoad, Coordinate, EquipmentProfile, RateConfig, Stop
from ...schemas.backhaul import (
    BackhaulSearchRequest,
    BackhaulSearchResponse,
    RouteHomeRequest,
    RouteHomeResponse,
    _DatumRequest,
)
from ..corridor.service import corridor_result_to_geojson
from ..geocoding.service import get_geocoder
from ..outputs.formatter import opportunity_to_model, route_home_opportunity_to_model, stop_to_location
from .engine import find_opportunities
from .markers import route_map_markers
from .route_home import find_route_home_backhauls

logger = logging.getLogger(__name__)


async def resolve_datum(payload: _DatumRequest) -> tuple[Stop, str]:
    """Explicit coordinates, else the geocoded datum point, else fleet home."""
    home = Stop(coordinate=Coordinate(lat=payload.fleet_home.lat, lng=payload.fleet_home.lng), label="Fleet Home")
    if payload.final_stop is not None:
        coordinate = Coordinate(lat=payload.final_stop.lat, lng=payload.final_stop.lng)
        return Stop(coordinate=coordinate, label=payload.datum_point or "Final Stop"), "coordinates"
    if payload.datum_point:
        resolved = await get_geocoder().geocode(payload.datum_point)
        if resolved is not None:
            return resolved, "geocoded"
        logger.warning(f"Could not resolve datum point '{payload.datum_point}', using fleet home")
    return home, "fleet_home"


def _candidate_loads(payload: _DatumRequest) -> list[CandidateLoad]:
    if payload.loads is not None:
        return list(parse_loads(payload.loads))
    return get_available_loads()


def _profile(payload: _DatumRequest) -> EquipmentProfile:
    return EquipmentProfile(
        trailer_type=payload.equipment.trailer_type,
        trailer_length_ft=payload.equipment.trailer_length_ft,
        weight_limit_lbs=payload.equipment.weight_limit_lbs,
    )


async def search_backhauls(payload: BackhaulSearchRequest) -> BackhaulSearchResponse:
    datum, datum_source = await resolve_datum(payload)
    home = Coordinate(lat=payload.fleet_home.lat, lng=payload.fleet_home.lng)
    loads = _candidate_loads(payload)

    opportunities = find_opportunities(
        datum.coordinate,
        home,
        _profile(payload),
        payload.search_radius_miles,
        payload.relay_mode,
        loads,
    )
    return BackhaulSearchResponse(
        datum=stop_to_location(datum),
        opportunities=[opportunity_to_model(opportunity) for opportunity in opportunities],
        metadata={
            "datum_source": datum_source,
            "candidate_count": len(loads),
            "relay_mode": payload.relay_mode,
            "search_radius_miles": payload.search_radius_miles,
        },
    )


async def search_route_home(payload: RouteHomeRequest) -> RouteHomeResponse:
    datum, datum_source = await resolve_datum(payload)
    home = Coordinate(lat=payload.fleet_home.lat, lng=payload.fleet_home.lng)
    loads = _candidate_loads(payload)
    rate_config = RateConfig(**payload.rate_config.model_dump()) if payload.rate_config else None

    opportunities, route_data = await find_route_home_backhauls(
        datum.coordinate,
        home,
        _profile(payload),
        loads,
        home_radius_miles=payload.home_radius_miles,
        corridor_width_miles=payload.corridor_width_miles,
        rate_config=rate_config,
        clip_to_land=payload.clip_to_land,
    )
    geojson = corridor_result_to_geojson(route_data) if route_data is not None else {}
    return RouteHomeResponse(
        datum=stop_to_location(datum),
        opportunities=[route_home_opportunity_to_model(opportunity) for opportunity in opportunities],
        route=geojson.get("route"),
        corridor=geojson.get("corridor"),
        markers=route_map_markers(datum.coordinate, home, opportunities),
        metadata={
            "datum_source": datum_source,
            "candidate_count": len(loads),
            "route_source": geojson.get("route_source"),
            "direct_return_miles": geojson.get("distance_miles"),
            "uses_corridor": geojson.get("corridor") is not None,
        },
    )
