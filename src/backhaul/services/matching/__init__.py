"""Backhaul matching exports."""

from .engine import InvalidMatchingInputError, compute_total_revenue, find_opportunities
from .markers import route_map_markers
from .net_revenue import calculate_net_revenue
from .route_home import find_route_home_backhauls
from .service import search_backhauls, search_route_home

__all__ = [
    "InvalidMatchingInputError",
    "calculate_net_revenue",
    "compute_total_revenue",
    "find_opportunities",
    "find_route_home_backhauls",
    "route_map_markers",
    "search_backhauls",
    "search_route_home",
]
