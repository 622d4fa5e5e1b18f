"""Domain models for locations, equipment, loads and matching results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

AVAILABLE_STATUS = "available"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 point. Construction rejects out-of-range values."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} is outside [-180, 180].")

    def as_lng_lat(self) -> tuple[float, float]:
        return (self.lng, self.lat)


@dataclass(frozen=True, slots=True)
class Stop:
    """A coordinate with the free-text label it was resolved from."""

    coordinate: Coordinate
    label: str

    @property
    def lat(self) -> float:
        return self.coordinate.lat

    @property
    def lng(self) -> float:
        return self.coordinate.lng


class RateType(str, Enum):
    PER_MILE = "per_mile"
    FLAT = "flat"


@dataclass(frozen=True, slots=True)
class EquipmentProfile:
    """Trailer constraints of the truck looking for a backhaul."""

    trailer_type: str
    trailer_length_ft: int
    weight_limit_lbs: int


@dataclass(frozen=True, slots=True)
class CandidateLoad:
    """A freight record supplied by the load repository."""

    load_id: str
    pickup: Stop
    delivery: Stop
    equipment_type: str
    trailer_length_ft: int
    weight_lbs: int
    distance_miles: float
    rate_type: RateType = RateType.PER_MILE
    rate: Optional[float] = None
    fuel_surcharge: float = 0.0
    total_revenue: Optional[float] = None
    status: str = AVAILABLE_STATUS
    pickup_date: Optional[str] = None
    delivery_date: Optional[str] = None
    broker: Optional[str] = None
    shipper: Optional[str] = None
    receiver: Optional[str] = None
    freight_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Opportunity:
    """A candidate load that passed matching, with its computed economics."""

    load: CandidateLoad
    final_to_pickup_miles: float
    out_of_route_miles: float
    direct_return_miles: float
    additional_miles: float
    total_revenue: float
    revenue_per_mile: float
    score: float


@dataclass(slots=True)
class RateConfig:
    """Fleet rate agreement used to compute net revenue for route-home matches."""

    revenue_split_carrier_pct: float = 20.0
    mileage_rate: float = 0.0
    stop_rate: float = 0.0
    fuel_peg: float = 0.0
    fuel_mpg: float = 6.0
    doe_padd_rate: float = 0.0
    other_charge_1: float = 0.0
    other_charge_2: float = 0.0


@dataclass(frozen=True, slots=True)
class NetRevenue:
    fsc_per_mile: float
    customer_share: float
    carrier_revenue: float
    mileage_expense: float
    stop_expense: float
    stop_count: int
    fuel_surcharge: float
    other_charges: float
    customer_net_credit: float


@dataclass(slots=True)
class RouteHomeOpportunity:
    """A load found along the corridor between the datum point and fleet home."""

    load: CandidateLoad
    datum_to_pickup_miles: float
    pickup_to_delivery_miles: float
    delivery_to_home_miles: float
    total_miles: float
    direct_return_miles: float
    additional_miles: float
    total_revenue: float
    revenue_per_mile: float
    revenue_per_additional_mile: float
    efficiency_score: float
    distance_source: str
    net_revenue: Optional[NetRevenue] = None
    flags: dict[str, bool] = field(default_factory=dict)
