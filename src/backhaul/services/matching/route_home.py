"""Find backhauls along the corridor between the datum point and fleet home."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import (
    AVAILABLE_STATUS,
    CandidateLoad,
    Coordinate,
    EquipmentProfile,
    RateConfig,
    RouteHomeOpportunity,
)
from ..corridor.builder import Corridor, point_in_corridor
from ..corridor.cache import CorridorCache, CorridorResult
from ..corridor.service import get_route_with_corridor, get_routing_client
from ..geospatial import distance_miles, is_along_route
from ..routing.pcmiler_client import PCMilerClient
from .engine import InvalidMatchingInputError, compute_total_revenue, is_equipment_compatible
from .net_revenue import calculate_net_revenue

logger = logging.getLogger(__name__)

# Haversine understates driving distance; pre-filter loosely, re-check with driving miles.
HOME_RADIUS_PREFILTER_FACTOR = 1.5
NO_DETOUR_RPAM_MULTIPLIER = 100


async def _leg_distances(
    client: PCMilerClient | None,
    datum: Coordinate,
    home: Coordinate,
    load: CandidateLoad,
) -> tuple[float | None, float | None, float | None]:
    if client is None:
        return None, None, None
    pickup, delivery = load.pickup.coordinate, load.delivery.coordinate
    results = await asyncio.gather(
        client.get_driving_distance([datum, pickup]),
        client.get_driving_distance([pickup, delivery]),
        client.get_driving_distance([delivery, home]),
        return_exceptions=True,
    )
    legs: list[float | None] = []
    for result in results:
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            logger.warning(f"Driving distance failed for load {load.load_id}: {result}")
            legs.append(None)
        else:
            legs.append(result)
    return legs[0], legs[1], legs[2]


def _is_candidate(
    load: CandidateLoad,
    profile: EquipmentProfile,
    datum: Coordinate,
    home: Coordinate,
    home_radius_miles: float,
    width_miles: float,
    corridor: Corridor | None,
) -> bool:
    """Cheap haversine and geometry checks run before any driving-distance call."""
    if load.status != AVAILABLE_STATUS or not is_equipment_compatible(load, profile):
        return False
    if distance_miles(load.delivery.coordinate, home) > home_radius_miles * HOME_RADIUS_PREFILTER_FACTOR:
        return False
    if corridor is not None:
        return point_in_corridor(load.pickup.lat, load.pickup.lng, corridor)
    return is_along_route(load.pickup.coordinate, datum, home, width_miles)


def _quality_flags(efficiency_score: float, additional_miles: float) -> dict[str, bool]:
    return {
        "is_excellent": efficiency_score > 50 and additional_miles < 50,
        "is_good": efficiency_score > 30 and additional_miles < 100,
        "is_acceptable": efficiency_score > 15,
    }


def _score(
    load: CandidateLoad,
    legs: tuple[float | None, float | None, float | None],
    datum: Coordinate,
    home: Coordinate,
    direct_return_miles: float,
    home_radius_miles: float,
    rate_config: RateConfig | None,
) -> RouteHomeOpportunity | None:
    dtp, ptd, dth = legs
    pickup, delivery = load.pickup.coordinate, load.delivery.coordinate
    datum_to_pickup = dtp if dtp is not None else distance_miles(datum, pickup)
    pickup_to_delivery = ptd if ptd is not None else (load.distance_miles or distance_miles(pickup, delivery))
    delivery_to_home = dth if dth is not None else distance_miles(delivery, home)

    if delivery_to_home > home_radius_miles:
        return None
    if not all(math.isfinite(value) for value in (datum_to_pickup, pickup_to_delivery, delivery_to_home)):
        logger.warning(f"Skipping load {load.load_id}: invalid distance ({datum_to_pickup}, {pickup_to_delivery}, {delivery_to_home})")
        return None

    total_miles = datum_to_pickup + pickup_to_delivery + delivery_to_home
    additional_miles = max(0.0, total_miles - direct_return_miles)
    try:
        total_revenue = compute_total_revenue(load)
    except ValueError:
        total_revenue = 0.0

    revenue_per_mile = total_revenue / total_miles if total_miles > 0 else 0.0
    if additional_miles > 0:
        revenue_per_additional_mile = total_revenue / additional_miles
    else:
        revenue_per_additional_mile = total_revenue * NO_DETOUR_RPAM_MULTIPLIER
    efficiency_score = revenue_per_mile * (direct_return_miles / total_miles) * 100 if total_miles > 0 else 0.0

    return RouteHomeOpportunity(
        load=load,
        datum_to_pickup_miles=datum_to_pickup,
        pickup_to_delivery_miles=pickup_to_delivery,
        delivery_to_home_miles=delivery_to_home,
        total_miles=total_miles,
        direct_return_miles=direct_return_miles,
        additional_miles=additional_miles,
        total_revenue=total_revenue,
        revenue_per_mile=revenue_per_mile,
        revenue_per_additional_mile=revenue_per_additional_mile,
        efficiency_score=efficiency_score,
        distance_source="pcmiler" if None not in legs else "haversine",
        net_revenue=calculate_net_revenue(total_revenue, additional_miles, rate_config) if rate_config else None,
        flags=_quality_flags(efficiency_score, additional_miles),
    )


async def find_route_home_backhauls(
    datum: Coordinate,
    home: Coordinate,
    profile: EquipmentProfile,
    loads: Sequence[CandidateLoad],
    home_radius_miles: float | None = None,
    corridor_width_miles: float | None = None,
    rate_config: Optional[RateConfig] = None,
    *,
    client: PCMilerClient | None = None,
    cache: CorridorCache | None = None,
    clip_to_land: bool = False,
    max_candidates: int | None = None,
    batch_size: int | None = None,
) -> tuple[list[RouteHomeOpportunity], CorridorResult | None]:
    """Rank loads whose pickup lies along the way home and whose delivery lands near home.

    Uses the routing corridor when one is available and a straight-line
    detour test otherwise. Per-leg driving distances come from the routing
    provider in small batches, each leg falling back to haversine.
    """
    if datum is None or home is None or profile is None:
        raise InvalidMatchingInputError("Datum point, fleet home and equipment profile are required.")
    home_radius = home_radius_miles if home_radius_miles is not None else settings.default_home_radius_miles
    width = corridor_width_miles if corridor_width_miles is not None else settings.default_corridor_width_miles
    if home_radius < 0 or width <= 0:
        raise InvalidMatchingInputError("Home radius must be non-negative and corridor width positive.")
    max_candidates = max_candidates or settings.max_route_home_candidates
    batch_size = batch_size or settings.route_home_batch_size
    if client is None:
        client = get_routing_client()

    route_data = await get_route_with_corridor(
        datum, home, width, client=client, cache=cache, clip_to_land=clip_to_land
    )
    corridor = route_data.corridor
    if corridor is None:
        logger.warning("Corridor unavailable, falling back to straight-line along-route test")

    direct_return_miles = route_data.distance_miles
    if direct_return_miles is None:
        direct_return_miles = distance_miles(datum, home)

    candidates: list[CandidateLoad] = []
    for load in loads:
        try:
            if _is_candidate(load, profile, datum, home, home_radius, width, corridor):
                candidates.append(load)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning(f"Skipping malformed load {getattr(load, 'load_id', '?')}: {exc}")
    logger.info(f"Corridor filter: {len(candidates)} candidates from {len(loads)} loads")

    if len(candidates) > max_candidates:
        candidates.sort(key=lambda load: distance_miles(load.delivery.coordinate, home))
        candidates = candidates[:max_candidates]
        logger.info(f"Capped to {max_candidates} candidates for driving distance calls")

    opportunities: list[RouteHomeOpportunity] = []
    for start in range(0, len(candidates), batch_size):
        batch = candidates[start : start + batch_size]
        batch_legs = await asyncio.gather(*(_leg_distances(client, datum, home, load) for load in batch))
        for load, legs in zip(batch, batch_legs):
            try:
                opportunity = _score(load, legs, datum, home, direct_return_miles, home_radius, rate_config)
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping load {load.load_id} after scoring failed: {exc}")
                continue
            if opportunity is not None:
                opportunities.append(opportunity)

    if rate_config is not None:
        opportunities.sort(
            key=lambda item: (item.net_revenue.customer_net_credit, item.net_revenue.carrier_revenue),
            reverse=True,
        )
    else:
        opportunities.sort(key=lambda item: item.efficiency_score, reverse=True)

    logger.info(f"Route-home matching complete: {len(opportunities)} opportunities found")
    return opportunities, route_data
