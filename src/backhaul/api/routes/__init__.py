"""Route group exports."""

from . import backhauls, geocoding, health, routing

__all__ = ["backhauls", "geocoding", "health", "routing"]
