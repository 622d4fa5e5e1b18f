"""Backhaul search endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.backhaul import BackhaulSearchRequest, BackhaulSearchResponse, RouteHomeRequest, RouteHomeResponse
from ...services.matching.service import search_backhauls, search_route_home

router = APIRouter(prefix="/backhauls", tags=["backhauls"])


@router.post("/search", response_model=BackhaulSearchResponse, status_code=status.HTTP_200_OK)
async def search(payload: BackhaulSearchRequest) -> BackhaulSearchResponse:
    try:
        return await search_backhauls(payload)
    except (ValueError, FileNotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error searching backhauls: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to search backhauls: {str(exc)}",
        ) from exc


@router.post("/route-home", response_model=RouteHomeResponse, status_code=status.HTTP_200_OK)
async def route_home(payload: RouteHomeRequest) -> RouteHomeResponse:
    try:
        return await search_route_home(payload)
    except (ValueError, FileNotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error finding route-home backhauls: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to find route-home backhauls: {str(exc)}",
        ) from exc
