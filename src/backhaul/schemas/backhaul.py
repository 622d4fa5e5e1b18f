"""Backhaul search request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class LocationModel(BaseModel):
    address: str
    lat: float
    lng: float


class EquipmentProfileModel(BaseModel):
    trailer_type: str = Field(..., description="Trailer type, e.g. 'Dry Van', 'Reefer', 'Flatbed'.")
    trailer_length_ft: int = Field(..., ge=1)
    weight_limit_lbs: int = Field(..., ge=1)


class RateConfigModel(BaseModel):
    revenue_split_carrier_pct: float = Field(20.0, ge=0, le=100)
    mileage_rate: float = Field(0.0, ge=0)
    stop_rate: float = Field(0.0, ge=0)
    fuel_peg: float = Field(0.0, ge=0)
    fuel_mpg: float = Field(6.0, gt=0)
    doe_padd_rate: float = Field(0.0, ge=0)
    other_charge_1: float = 0.0
    other_charge_2: float = 0.0


class _DatumRequest(BaseModel):
    datum_point: Optional[str] = Field(
        default=None, description="Free-text location (city, address or ZIP) where the truck becomes available."
    )
    final_stop: Optional[CoordinateModel] = Field(
        default=None, description="Coordinates of the final stop. Takes precedence over datum_point."
    )
    fleet_home: CoordinateModel
    equipment: EquipmentProfileModel
    loads: Optional[List[Dict[str, Any]]] = Field(
        default=None, description="Load records to match against. Defaults to the load repository."
    )


class BackhaulSearchRequest(_DatumRequest):
    search_radius_miles: float = Field(..., description="Maximum final-stop-to-pickup distance.")
    relay_mode: bool = Field(default=False, description="Route through fleet home before and after the backhaul.")


class RouteHomeRequest(_DatumRequest):
    home_radius_miles: Optional[float] = Field(default=None, ge=0)
    corridor_width_miles: Optional[float] = Field(default=None, gt=0)
    clip_to_land: bool = False
    rate_config: Optional[RateConfigModel] = None


class LoadDetailsModel(BaseModel):
    load_id: str
    origin: LocationModel
    destination: LocationModel
    equipment_type: str
    trailer_length_ft: int
    weight_lbs: int
    distance_miles: float
    pickup_date: Optional[str] = None
    delivery_date: Optional[str] = None
    broker: Optional[str] = None
    shipper: Optional[str] = None
    receiver: Optional[str] = None
    freight_type: Optional[str] = None


class OpportunityModel(LoadDetailsModel):
    total_revenue: float
    final_to_pickup_miles: float
    oor_miles: float
    direct_return_miles: float
    additional_miles: float
    revenue_per_mile: float
    score: float


class NetRevenueModel(BaseModel):
    fsc_per_mile: float
    customer_share: float
    carrier_revenue: float
    mileage_expense: float
    stop_expense: float
    stop_count: int
    fuel_surcharge: float
    other_charges: float
    customer_net_credit: float


class RouteHomeOpportunityModel(LoadDetailsModel):
    total_revenue: float
    datum_to_pickup_miles: float
    pickup_to_delivery_miles: float
    delivery_to_home_miles: float
    total_miles: float
    direct_return_miles: float
    additional_miles: float
    revenue_per_mile: float
    revenue_per_additional_mile: float
    efficiency_score: float
    distance_source: str
    net_revenue: Optional[NetRevenueModel] = None
    is_excellent: bool = False
    is_good: bool = False
    is_acceptable: bool = False


class BackhaulSearchResponse(BaseModel):
    datum: LocationModel
    opportunities: List[OpportunityModel]
    metadata: dict


class RouteHomeResponse(BaseModel):
    datum: LocationModel
    opportunities: List[RouteHomeOpportunityModel]
    route: Optional[dict] = None
    corridor: Optional[dict] = None
    markers: List[dict]
    metadata: dict
