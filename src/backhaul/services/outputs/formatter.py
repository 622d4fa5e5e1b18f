"""Serializers from matching results to API models."""

from __future__ import annotations

from dataclasses import asdict

from ...models.domain import CandidateLoad, Opportunity, RouteHomeOpportunity, Stop
from ...schemas.backhaul import (
    LocationModel,
    NetRevenueModel,
    OpportunityModel,
    RouteHomeOpportunityModel,
)


def stop_to_location(stop: Stop) -> LocationModel:
    return LocationModel(address=stop.label, lat=stop.lat, lng=stop.lng)


def _load_details(load: CandidateLoad) -> dict:
    return {
        "load_id": load.load_id,
        "origin": stop_to_location(load.pickup),
        "destination": stop_to_location(load.delivery),
        "equipment_type": load.equipment_type,
        "trailer_length_ft": load.trailer_length_ft,
        "weight_lbs": load.weight_lbs,
        "distance_miles": load.distance_miles,
        "pickup_date": load.pickup_date,
        "delivery_date": load.delivery_date,
        "broker": load.broker,
        "shipper": load.shipper,
        "receiver": load.receiver,
        "freight_type": load.freight_type,
    }


def opportunity_to_model(opportunity: Opportunity) -> OpportunityModel:
    return OpportunityModel(
        **_load_details(opportunity.load),
        total_revenue=opportunity.total_revenue,
        final_to_pickup_miles=opportunity.final_to_pickup_miles,
        oor_miles=opportunity.out_of_route_miles,
        direct_return_miles=opportunity.direct_return_miles,
        additional_miles=opportunity.additional_miles,
        revenue_per_mile=opportunity.revenue_per_mile,
        score=opportunity.score,
    )


def route_home_opportunity_to_model(opportunity: RouteHomeOpportunity) -> RouteHomeOpportunityModel:
    net_revenue = NetRevenueModel(**asdict(opportunity.net_revenue)) if opportunity.net_revenue else None
    return RouteHomeOpportunityModel(
        **_load_details(opportunity.load),
        total_revenue=opportunity.total_revenue,
        datum_to_pickup_miles=opportunity.datum_to_pickup_miles,
        pickup_to_delivery_miles=opportunity.pickup_to_delivery_miles,
        delivery_to_home_miles=opportunity.delivery_to_home_miles,
        total_miles=opportunity.total_miles,
        direct_return_miles=opportunity.direct_return_miles,
        additional_miles=opportunity.additional_miles,
        revenue_per_mile=opportunity.revenue_per_mile,
        revenue_per_additional_mile=opportunity.revenue_per_additional_mile,
        efficiency_score=opportunity.efficiency_score,
        distance_source=opportunity.distance_source,
        net_revenue=net_revenue,
        **opportunity.flags,
    )
