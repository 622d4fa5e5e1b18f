"""Data access helpers for loading candidate backhaul loads."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..config import settings
from ..models.domain import AVAILABLE_STATUS, CandidateLoad, Coordinate, RateType, Stop

logger = logging.getLogger(__name__)


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "")
    return float(value)


def _label(row: Mapping[str, Any], prefix: str) -> str:
    city = (row.get(f"{prefix}_city") or "").strip()
    state = (row.get(f"{prefix}_state") or "").strip()
    return ", ".join(part for part in (city, state) if part) or "Unknown"


def _stop(row: Mapping[str, Any], prefix: str) -> Stop:
    lat = _coerce_float(row.get(f"{prefix}_lat"))
    lng = _coerce_float(row.get(f"{prefix}_lng"))
    if lat is None or lng is None:
        raise ValueError(f"missing {prefix} coordinates")
    return Stop(coordinate=Coordinate(lat=lat, lng=lng), label=_label(row, prefix))


def load_from_record(row: Mapping[str, Any]) -> CandidateLoad:
    """Build a ``CandidateLoad`` from a repository record."""
    rate = _coerce_float(row.get("rate"))
    if rate is None:
        rate = _coerce_float(row.get("revenue_per_mile"))
    return CandidateLoad(
        load_id=str(row["load_id"]),
        pickup=_stop(row, "pickup"),
        delivery=_stop(row, "delivery"),
        equipment_type=str(row["equipment_type"]),
        trailer_length_ft=int(row["trailer_length"]),
        weight_lbs=int(row["weight_lbs"]),
        distance_miles=float(row["distance_miles"]),
        rate_type=RateType(row.get("rate_type") or RateType.PER_MILE.value),
        rate=rate,
        fuel_surcharge=_coerce_float(row.get("fuel_surcharge")) or 0.0,
        total_revenue=_coerce_float(row.get("total_revenue")),
        status=(row.get("status") or AVAILABLE_STATUS).strip().lower(),
        pickup_date=row.get("pickup_date"),
        delivery_date=row.get("delivery_date"),
        broker=row.get("broker"),
        shipper=row.get("shipper"),
        receiver=row.get("receiver"),
        freight_type=row.get("freight_type"),
    )


def parse_loads(records: Iterable[Mapping[str, Any]]) -> tuple[CandidateLoad, ...]:
    loads: list[CandidateLoad] = []
    for row in records:
        try:
            loads.append(load_from_record(row))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Skipping invalid load record {row.get('load_id', '?') if isinstance(row, Mapping) else '?'}: {exc}")
    return tuple(loads)


@functools.lru_cache(maxsize=1)
def load_loads(source: Optional[Path] = None) -> tuple[CandidateLoad, ...]:
    """Load candidate loads from the configured JSON file."""

    json_path = source or settings.loads_file
    if not json_path.exists():
        raise FileNotFoundError(f"Loads file not found: {json_path}")

    with json_path.open(mode="r", encoding="utf-8") as handle:
        records = json.load(handle)
    if not isinstance(records, list):
        raise ValueError(f"Loads file '{json_path}' must contain a JSON list.")
    loads = parse_loads(records)
    logger.info(f"Loaded {len(loads)} loads from {json_path}")
    return loads


def get_available_loads(source: Optional[Path] = None) -> list[CandidateLoad]:
    return [load for load in load_loads(source) if load.status == AVAILABLE_STATUS]
