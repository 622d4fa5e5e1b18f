"""Geocoding response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class GeocodeResponse(BaseModel):
    query: str
    resolved: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    label: Optional[str] = None


class ReverseGeocodeResponse(BaseModel):
    lat: float
    lng: float
    place_name: Optional[str] = None
