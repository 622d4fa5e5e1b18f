import json
from pathlib import Path

import pytest

from backhaul.data.loads_repository import get_available_loads, load_from_record, load_loads, parse_loads
from backhaul.models.domain import RateType

RECORD = {
    "load_id": "LOAD-1",
    "pickup_city": "Concord",
    "pickup_state": "NC",
    "pickup_lat": 35.4087,
    "pickup_lng": -80.5795,
    "delivery_city": "Raleigh",
    "delivery_state": "NC",
    "delivery_lat": "35.7796",
    "delivery_lng": "-78.6382",
    "equipment_type": "Reefer",
    "trailer_length": 53,
    "weight_lbs": 41000,
    "distance_miles": 150,
    "revenue_per_mile": "$3.10",
    "status": "Available",
}


@pytest.fixture(autouse=True)
def clear_loads_cache():
    load_loads.cache_clear()
    yield
    load_loads.cache_clear()


def test_load_from_record_normalizes_fields():
    load = load_from_record(RECORD)

    assert load.pickup.label == "Concord, NC"
    assert load.delivery.lat == pytest.approx(35.7796)
    assert load.rate_type is RateType.PER_MILE
    assert load.rate == pytest.approx(3.10)
    assert load.fuel_surcharge == 0.0
    assert load.total_revenue is None
    assert load.status == "available"


def test_parse_loads_skips_invalid_records():
    missing_coordinates = {**RECORD, "load_id": "NO_COORDS", "pickup_lat": None}
    bad_rate_type = {**RECORD, "load_id": "BAD_RATE", "rate_type": "hourly"}

    loads = parse_loads([RECORD, missing_coordinates, bad_rate_type, "not a record"])

    assert [load.load_id for load in loads] == ["LOAD-1"]


def test_load_loads_reads_json_and_filters_available(tmp_path: Path):
    source = tmp_path / "loads.json"
    source.write_text(json.dumps([RECORD, {**RECORD, "load_id": "LOAD-2", "status": "booked"}]), encoding="utf-8")

    assert len(load_loads(source)) == 2
    assert [load.load_id for load in get_available_loads(source)] == ["LOAD-1"]


def test_load_loads_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_loads(tmp_path / "missing.json")


def test_load_loads_rejects_non_list_payload(tmp_path: Path):
    source = tmp_path / "loads.json"
    source.write_text(json.dumps({"loads": []}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_loads(source)
