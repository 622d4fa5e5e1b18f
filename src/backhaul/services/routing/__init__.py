"""Routing provider exports."""

from .pcmiler_client import (
    PCMilerClient,
    RouteResult,
    extract_line_geometry,
    extract_total_miles,
    format_stops,
    straight_line,
)

__all__ = [
    "PCMilerClient",
    "RouteResult",
    "extract_line_geometry",
    "extract_total_miles",
    "format_stops",
    "straight_line",
]
