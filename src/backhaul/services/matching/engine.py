"""Backhaul opportunity scoring and ranking."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from ...models.domain import (
    AVAILABLE_STATUS,
    CandidateLoad,
    Coordinate,
    EquipmentProfile,
    Opportunity,
    RateType,
)
from ..geospatial import distance_miles

logger = logging.getLogger(__name__)


class InvalidMatchingInputError(ValueError):
    """Raised when matching is called with inputs that would mask a caller bug."""


def compute_total_revenue(load: CandidateLoad) -> float:
    """Precomputed revenue when present, otherwise derived from the rate structure."""
    if load.total_revenue is not None:
        return float(load.total_revenue)
    if load.rate is None:
        raise ValueError(f"Load {load.load_id} has neither a total revenue nor a rate.")
    if RateType(load.rate_type) is RateType.PER_MILE:
        return (load.rate + load.fuel_surcharge) * load.distance_miles
    return load.rate + load.fuel_surcharge


def is_equipment_compatible(load: CandidateLoad, profile: EquipmentProfile) -> bool:
    return (
        load.equipment_type == profile.trailer_type
        and load.trailer_length_ft <= profile.trailer_length_ft
        and load.weight_lbs <= profile.weight_limit_lbs
    )


def out_of_route_miles(
    load: CandidateLoad, final_to_pickup: float, fleet_home: Coordinate, relay_mode: bool
) -> float:
    """Miles driven to run the backhaul and get home.

    Direct: final -> pickup -> delivery -> home, using the load's linehaul.
    Relay: final -> pickup -> home -> delivery -> home.
    """
    delivery_to_home = distance_miles(load.delivery.coordinate, fleet_home)
    if relay_mode:
        pickup_to_home = distance_miles(load.pickup.coordinate, fleet_home)
        home_to_delivery = distance_miles(fleet_home, load.delivery.coordinate)
        return final_to_pickup + pickup_to_home + home_to_delivery + delivery_to_home
    return final_to_pickup + load.distance_miles + delivery_to_home


def _validate_inputs(
    final_stop: Optional[Coordinate],
    fleet_home: Optional[Coordinate],
    profile: Optional[EquipmentProfile],
    search_radius_miles: Optional[float],
    candidates: Optional[Iterable[CandidateLoad]],
) -> None:
    if final_stop is None:
        raise InvalidMatchingInputError("Final stop coordinates are required.")
    if fleet_home is None:
        raise InvalidMatchingInputError("Fleet home coordinates are required.")
    if profile is None:
        raise InvalidMatchingInputError("An equipment profile is required.")
    if search_radius_miles is None or not math.isfinite(search_radius_miles) or search_radius_miles < 0:
        raise InvalidMatchingInputError(f"Search radius must be a non-negative number, got {search_radius_miles!r}.")
    if candidates is None:
        raise InvalidMatchingInputError("A candidate load list is required.")


def _evaluate(
    load: CandidateLoad,
    final_stop: Coordinate,
    fleet_home: Coordinate,
    profile: EquipmentProfile,
    search_radius_miles: float,
    relay_mode: bool,
    direct_return_miles: float,
) -> Opportunity | None:
    if load.status != AVAILABLE_STATUS:
        return None
    if not is_equipment_compatible(load, profile):
        return None

    final_to_pickup = distance_miles(final_stop, load.pickup.coordinate)
    if final_to_pickup > search_radius_miles:
        return None

    total_revenue = compute_total_revenue(load)
    oor_miles = out_of_route_miles(load, final_to_pickup, fleet_home, relay_mode)
    if oor_miles == 0 or not math.isfinite(oor_miles) or not math.isfinite(total_revenue):
        logger.debug(f"Excluding load {load.load_id}: degenerate route ({oor_miles} mi, ${total_revenue})")
        return None

    revenue_per_mile = total_revenue / oor_miles
    return Opportunity(
        load=load,
        final_to_pickup_miles=final_to_pickup,
        out_of_route_miles=oor_miles,
        direct_return_miles=direct_return_miles,
        additional_miles=oor_miles - direct_return_miles,
        total_revenue=total_revenue,
        revenue_per_mile=revenue_per_mile,
        # Rewards efficiency and absolute payout together.
        score=revenue_per_mile * total_revenue,
    )


def find_opportunities(
    final_stop: Coordinate,
    fleet_home: Coordinate,
    profile: EquipmentProfile,
    search_radius_miles: float,
    relay_mode: bool,
    candidates: Iterable[CandidateLoad],
) -> list[Opportunity]:
    """Filter and rank backhaul candidates for a truck at ``final_stop``.

    Pure and deterministic. Candidates that are unavailable, incompatible with
    the equipment profile, outside the search radius, or malformed are skipped.
    Results are ordered by descending score; ties keep input order.

    Raises:
        InvalidMatchingInputError: on missing coordinates, profile or candidates,
            or a negative search radius.
    """
    _validate_inputs(final_stop, fleet_home, profile, search_radius_miles, candidates)
    direct_return_miles = distance_miles(final_stop, fleet_home)

    opportunities: list[Opportunity] = []
    for load in candidates:
        try:
            opportunity = _evaluate(
                load, final_stop, fleet_home, profile, search_radius_miles, relay_mode, direct_return_miles
            )
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning(f"Skipping malformed load {getattr(load, 'load_id', '?')}: {exc}")
            continue
        if opportunity is not None:
            opportunities.append(opportunity)

    opportunities.sort(key=lambda item: item.score, reverse=True)
    logger.info(f"Matching complete: {len(opportunities)} opportunities found")
    return opportunities
