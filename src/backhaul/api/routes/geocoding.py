"""Geocoding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from ...schemas.geocoding import GeocodeResponse, ReverseGeocodeResponse
from ...services.geocoding.service import get_geocoder

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.get("", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
async def geocode(q: str = Query(..., description="City, address or ZIP code.")) -> GeocodeResponse:
    result = await get_geocoder().geocode(q)
    if result is None:
        return GeocodeResponse(query=q, resolved=False)
    return GeocodeResponse(query=q, resolved=True, lat=result.lat, lng=result.lng, label=result.label)


@router.get("/reverse", response_model=ReverseGeocodeResponse, status_code=status.HTTP_200_OK)
async def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> ReverseGeocodeResponse:
    place_name = await get_geocoder().reverse_geocode(lat, lng)
    return ReverseGeocodeResponse(lat=lat, lng=lng, place_name=place_name)
