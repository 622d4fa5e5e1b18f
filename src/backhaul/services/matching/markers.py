"""Map markers for the route-home view."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Coordinate, RouteHomeOpportunity

MAX_NUMBERED_LOADS = 10


def route_map_markers(
    datum: Coordinate, home: Coordinate, opportunities: Sequence[RouteHomeOpportunity]
) -> list[dict]:
    markers = [
        {"id": "datum", "type": "datum", "lat": datum.lat, "lng": datum.lng, "label": "A", "title": "Current Location (Datum)"},
        {"id": "home", "type": "home", "lat": home.lat, "lng": home.lng, "label": "B", "title": "Fleet Home"},
    ]
    for number, opportunity in enumerate(opportunities[:MAX_NUMBERED_LOADS], start=1):
        load = opportunity.load
        markers.append(
            {
                "id": f"pickup-{load.load_id}",
                "type": "pickup",
                "lat": load.pickup.lat,
                "lng": load.pickup.lng,
                "label": f"{number}P",
                "title": f"#{number} Pickup: {load.pickup.label}",
                "load_number": number,
            }
        )
        markers.append(
            {
                "id": f"delivery-{load.load_id}",
                "type": "delivery",
                "lat": load.delivery.lat,
                "lng": load.delivery.lng,
                "label": f"{number}D",
                "title": f"#{number} Delivery: {load.delivery.label}",
                "load_number": number,
            }
        )
    return markers
