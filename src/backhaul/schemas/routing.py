"""Routing request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .backhaul import CoordinateModel


class RouteResponse(BaseModel):
    stops: str
    geometry: Optional[dict] = Field(default=None, description="GeoJSON LineString of the driving route.")
    distance_miles: Optional[float] = None
    fallback: bool = Field(default=False, description="True when geometry is a straight line for display only.")


class CorridorRequest(BaseModel):
    origin: CoordinateModel
    destination: CoordinateModel
    width_miles: Optional[float] = Field(default=None, gt=0)
    clip_to_land: bool = False


class CorridorResponse(BaseModel):
    route: dict
    corridor: Optional[dict] = None
    distance_miles: Optional[float] = None
    route_source: str
