import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backhaul.main import create_app

LOAD_RECORDS = [
    {
        "load_id": "MOORESVILLE-CHARLOTTE",
        "pickup_city": "Mooresville",
        "pickup_state": "NC",
        "pickup_lat": 35.5849,
        "pickup_lng": -80.8101,
        "delivery_city": "Charlotte",
        "delivery_state": "NC",
        "delivery_lat": 35.2271,
        "delivery_lng": -80.8431,
        "equipment_type": "Dry Van",
        "trailer_length": 53,
        "weight_lbs": 30000,
        "distance_miles": 28,
        "rate_type": "flat",
        "rate": 400,
        "fuel_surcharge": 20,
        "status": "available",
    },
    {
        "load_id": "CONCORD-CARY",
        "pickup_city": "Concord",
        "pickup_state": "NC",
        "pickup_lat": 35.4087,
        "pickup_lng": -80.5795,
        "delivery_city": "Cary",
        "delivery_state": "NC",
        "delivery_lat": 35.7915,
        "delivery_lng": -78.7811,
        "equipment_type": "Dry Van",
        "trailer_length": 53,
        "weight_lbs": 30000,
        "distance_miles": 125,
        "rate_type": "per_mile",
        "rate": 2.5,
        "fuel_surcharge": 0.4,
        "status": "available",
    },
]

EQUIPMENT = {"trailer_type": "Dry Van", "trailer_length_ft": 53, "weight_limit_lbs": 45000}
CHARLOTTE = {"lat": 35.2271, "lng": -80.8431}
RALEIGH = {"lat": 35.7796, "lng": -78.6382}


@pytest.fixture(autouse=True)
def offline_providers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from backhaul.config import settings
    from backhaul.data.loads_repository import load_loads
    from backhaul.services.corridor.service import get_corridor_cache, get_routing_client
    from backhaul.services.geocoding.service import get_geocoder

    loads_file = tmp_path / "loads.json"
    loads_file.write_text(json.dumps(LOAD_RECORDS), encoding="utf-8")
    monkeypatch.setattr(settings, "mapbox_token", None)
    monkeypatch.setattr(settings, "pcmiler_api_key", None)
    monkeypatch.setattr(settings, "loads_file", loads_file)

    for cached in (load_loads, get_corridor_cache, get_geocoder, get_routing_client):
        cached.cache_clear()
    yield
    for cached in (load_loads, get_corridor_cache, get_geocoder, get_routing_client):
        cached.cache_clear()


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoints(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}

    providers = api_client.get("/api/health/providers").json()
    assert providers["geocoding"]["configured"] is False
    assert providers["routing"]["configured"] is False
    assert providers["corridor_cache"]["entries"] == 0


def test_backhaul_search_geocodes_datum_from_fallback_table(api_client: TestClient):
    payload = {
        "datum_point": "Davidson",
        "fleet_home": CHARLOTTE,
        "equipment": EQUIPMENT,
        "search_radius_miles": 10,
    }

    response = api_client.post("/api/backhauls/search", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["datum"] == {"address": "Davidson, NC", "lat": 35.4993, "lng": -80.8487}
    assert body["metadata"]["datum_source"] == "geocoded"
    assert [item["load_id"] for item in body["opportunities"]] == ["MOORESVILLE-CHARLOTTE"]
    assert body["opportunities"][0]["total_revenue"] == 420.0


def test_backhaul_search_with_inline_loads_and_final_stop(api_client: TestClient):
    payload = {
        "final_stop": {"lat": 35.5, "lng": -80.85},
        "fleet_home": CHARLOTTE,
        "equipment": EQUIPMENT,
        "search_radius_miles": 25,
        "relay_mode": True,
        "loads": LOAD_RECORDS[:1],
    }

    body = api_client.post("/api/backhauls/search", json=payload).json()

    assert body["metadata"]["datum_source"] == "coordinates"
    assert body["metadata"]["candidate_count"] == 1
    assert len(body["opportunities"]) == 1


def test_unresolvable_datum_falls_back_to_fleet_home(api_client: TestClient):
    payload = {
        "datum_point": "Atlantis",
        "fleet_home": CHARLOTTE,
        "equipment": EQUIPMENT,
        "search_radius_miles": 50,
    }

    body = api_client.post("/api/backhauls/search", json=payload).json()

    assert body["metadata"]["datum_source"] == "fleet_home"
    assert body["datum"]["address"] == "Fleet Home"


def test_negative_search_radius_is_rejected(api_client: TestClient):
    payload = {"final_stop": CHARLOTTE, "fleet_home": CHARLOTTE, "equipment": EQUIPMENT, "search_radius_miles": -5}

    response = api_client.post("/api/backhauls/search", json=payload)

    assert response.status_code == 400


def test_route_home_without_routing_provider_uses_straight_line(api_client: TestClient):
    payload = {
        "final_stop": CHARLOTTE,
        "fleet_home": RALEIGH,
        "equipment": EQUIPMENT,
        "rate_config": {"revenue_split_carrier_pct": 20, "mileage_rate": 1.2, "stop_rate": 25},
    }

    response = api_client.post("/api/backhauls/route-home", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["corridor"] is None
    assert body["route"]["type"] == "LineString"
    assert body["metadata"]["route_source"] == "straight_line"
    assert body["metadata"]["uses_corridor"] is False
    [opportunity] = body["opportunities"]
    assert opportunity["load_id"] == "CONCORD-CARY"
    assert opportunity["distance_source"] == "haversine"
    assert opportunity["net_revenue"]["stop_count"] == 2
    assert [marker["label"] for marker in body["markers"]] == ["A", "B", "1P", "1D"]


def test_geocode_endpoints(api_client: TestClient):
    body = api_client.get("/api/geocode", params={"q": "28036"}).json()
    assert body["resolved"] is True
    assert body["label"] == "Davidson, NC"

    assert api_client.get("/api/geocode", params={"q": "Atlantis"}).json()["resolved"] is False
    assert api_client.get("/api/geocode/reverse", params={"lat": 35.2, "lng": -80.8}).json()["place_name"] is None


def test_route_endpoint_returns_display_fallback(api_client: TestClient):
    response = api_client.get("/api/routing/route", params={"stops": "-80.8431,35.2271;-78.6382,35.7796"})

    assert response.status_code == 200
    body = response.json()
    assert body["fallback"] is True
    assert body["geometry"]["coordinates"] == [[-80.8431, 35.2271], [-78.6382, 35.7796]]


def test_route_endpoint_rejects_bad_stops(api_client: TestClient):
    assert api_client.get("/api/routing/route", params={"stops": "-80.8431,35.2271"}).status_code == 400
    assert api_client.get("/api/routing/route", params={"stops": "abc;def"}).status_code == 400


def test_corridor_endpoint(api_client: TestClient):
    payload = {"origin": CHARLOTTE, "destination": RALEIGH, "width_miles": 30}

    body = api_client.post("/api/routing/corridor", json=payload).json()

    assert body["route_source"] == "straight_line"
    assert body["corridor"] is None
