"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...services.corridor.service import get_corridor_cache
from ...services.routing.pcmiler_client import check_health as routing_configured

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/providers", status_code=status.HTTP_200_OK)
def health_providers() -> dict:
    """Report which external providers are configured and how warm the corridor caches are."""
    return {
        "geocoding": {"provider": "mapbox", "configured": settings.geocoding_configured},
        "routing": {"provider": "pcmiler", "configured": routing_configured()},
        "corridor_cache": {
            "entries": len(get_corridor_cache(False)),
            "clipped_entries": len(get_corridor_cache(True)),
            "ttl_seconds": settings.corridor_cache_ttl_seconds,
        },
    }
