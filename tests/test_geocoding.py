import asyncio

import httpx
import pytest

from backhaul.models.domain import Coordinate, Stop
from backhaul.services.geocoding import (
    CITY_TABLE,
    Geocoder,
    MapboxGeocoder,
    StaticTableStrategy,
    build_geocoder,
    lookup_static,
)

DAVIDSON = (35.4993, -80.8487)


def _mapbox(handler) -> MapboxGeocoder:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MapboxGeocoder(token="test-token", client=client)


def _no_provider_geocoder(monkeypatch: pytest.MonkeyPatch) -> Geocoder:
    from backhaul.config import settings

    monkeypatch.setattr(settings, "mapbox_token", None)
    return build_geocoder()


def test_lookup_static_matches_city_case_insensitively():
    stop = lookup_static("  DAVIDSON  ")

    assert stop is not None
    assert (stop.lat, stop.lng) == DAVIDSON
    assert stop.label == "Davidson, NC"


def test_lookup_static_matches_zip_when_no_city_matches():
    stop = lookup_static("Somewhere 28036")

    assert stop is CITY_TABLE["davidson"]


def test_lookup_static_returns_none_for_unknown_text():
    assert lookup_static("Nowhere, ZZ") is None
    assert lookup_static("") is None


@pytest.mark.asyncio
async def test_davidson_resolves_from_fallback_without_provider(monkeypatch: pytest.MonkeyPatch):
    geocoder = _no_provider_geocoder(monkeypatch)

    stop = await geocoder.geocode("Davidson")

    assert geocoder.provider is None
    assert stop is not None
    assert (stop.lat, stop.lng) == DAVIDSON


@pytest.mark.asyncio
async def test_davidson_resolves_from_fallback_when_provider_returns_nothing():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"type": "FeatureCollection", "features": []})

    geocoder = build_geocoder(provider=_mapbox(handler))
    stop = await geocoder.geocode("Davidson")

    assert len(requests) == 1
    assert stop is not None
    assert (stop.lat, stop.lng) == DAVIDSON


@pytest.mark.asyncio
async def test_provider_result_wins_and_request_carries_bias():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["access_token"] == "test-token"
        assert request.url.params["proximity"] == "-80.8431,35.2271"
        assert request.url.params["country"] == "US"
        assert request.url.params["limit"] == "1"
        assert request.url.path.endswith("/Davidson, NC.json")
        return httpx.Response(
            200,
            json={"features": [{"center": [-80.85, 35.5], "place_name": "Davidson, North Carolina, United States"}]},
        )

    geocoder = build_geocoder(provider=_mapbox(handler))
    stop = await geocoder.geocode("Davidson, NC")

    assert stop == Stop(coordinate=Coordinate(lat=35.5, lng=-80.85), label="Davidson, North Carolina, United States")


@pytest.mark.asyncio
async def test_provider_errors_fall_through_to_static_tables():
    geocoder = build_geocoder(provider=_mapbox(lambda request: httpx.Response(503)))

    stop = await geocoder.geocode("Raleigh")

    assert stop is CITY_TABLE["raleigh"]


@pytest.mark.asyncio
async def test_malformed_provider_feature_is_ignored():
    provider = _mapbox(lambda request: httpx.Response(200, json={"features": [{"center": "bad"}]}))

    assert await provider.resolve("Charlotte") is None


@pytest.mark.asyncio
async def test_slow_strategy_times_out_and_next_strategy_runs():
    class SlowStrategy:
        name = "slow"

        async def resolve(self, text):
            await asyncio.sleep(5)
            return Stop(coordinate=Coordinate(lat=0.0, lng=0.0), label="never")

    geocoder = Geocoder([SlowStrategy(), StaticTableStrategy()], timeout=0.01)

    stop = await geocoder.geocode("Concord")

    assert stop is CITY_TABLE["concord"]


@pytest.mark.asyncio
async def test_unresolvable_text_returns_none(monkeypatch: pytest.MonkeyPatch):
    geocoder = _no_provider_geocoder(monkeypatch)

    assert await geocoder.geocode("Atlantis") is None
    assert await geocoder.geocode("   ") is None


@pytest.mark.asyncio
async def test_reverse_geocode_uses_provider_place_name():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/-80.8431,35.2271.json")
        return httpx.Response(200, json={"features": [{"place_name": "Charlotte, North Carolina"}]})

    geocoder = build_geocoder(provider=_mapbox(handler))

    assert await geocoder.reverse_geocode(35.2271, -80.8431) == "Charlotte, North Carolina"


@pytest.mark.asyncio
async def test_reverse_geocode_without_provider_returns_none(monkeypatch: pytest.MonkeyPatch):
    geocoder = _no_provider_geocoder(monkeypatch)

    assert await geocoder.reverse_geocode(35.2271, -80.8431) is None


@pytest.mark.asyncio
async def test_batch_geocode_keeps_input_order(monkeypatch: pytest.MonkeyPatch):
    geocoder = _no_provider_geocoder(monkeypatch)

    results = await geocoder.batch_geocode(["Tampa", "Atlantis", "27601"])

    assert [text for text, _ in results] == ["Tampa", "Atlantis", "27601"]
    assert results[0][1] is CITY_TABLE["tampa"]
    assert results[1][1] is None
    assert results[2][1] is CITY_TABLE["raleigh"]


@pytest.mark.asyncio
async def test_fleet_address_geocodes_city_and_state_part():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"features": [{"center": [-82.42, 29.74], "place_name": "Alachua, Florida"}]})

    geocoder = build_geocoder(provider=_mapbox(handler))
    coordinate = await geocoder.geocode_fleet_address("14500 NW 126th Ter, Alachua, FL 32615")

    assert coordinate == Coordinate(lat=29.74, lng=-82.42)
    assert seen[0].endswith("/Alachua, FL.json")


def test_mapbox_requires_token(monkeypatch: pytest.MonkeyPatch):
    from backhaul.config import settings

    monkeypatch.setattr(settings, "mapbox_token", None)
    with pytest.raises(ValueError):
        MapboxGeocoder()


@pytest.mark.asyncio
async def test_malformed_feature_list_falls_back_to_static_tables():
    provider = _mapbox(lambda request: httpx.Response(200, json={"features": {"bad": 1}}))

    stop = await Geocoder([provider, StaticTableStrategy()]).geocode("Davidson")

    assert stop is CITY_TABLE["davidson"]


@pytest.mark.asyncio
async def test_reverse_geocode_ignores_malformed_feature_list():
    geocoder = build_geocoder(provider=_mapbox(lambda request: httpx.Response(200, json={"features": {"bad": 1}})))

    assert await geocoder.reverse_geocode(35.2271, -80.8431) is None


@pytest.mark.asyncio
async def test_raising_strategy_is_skipped():
    class BrokenStrategy:
        name = "broken"

        async def resolve(self, text):
            raise KeyError(0)

    stop = await Geocoder([BrokenStrategy(), StaticTableStrategy()]).geocode("Gastonia")

    assert stop is CITY_TABLE["gastonia"]


@pytest.mark.asyncio
async def test_cancellation_propagates_out_of_geocode():
    class HangingStrategy:
        name = "hanging"

        async def resolve(self, text):
            await asyncio.sleep(10)

    geocoder = Geocoder([HangingStrategy(), StaticTableStrategy()], timeout=30)
    task = asyncio.create_task(geocoder.geocode("Davidson"))
    await asyncio.sleep(0.01)

    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


def test_build_geocoder_keeps_explicit_zero_timeout():
    assert build_geocoder(provider=_mapbox(lambda request: httpx.Response(200)), timeout=0).timeout == 0
