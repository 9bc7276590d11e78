"""Route planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...core.exceptions import RouteValidationError
from ...schemas.routing import MapUrlRequest, MapUrlResponse, RoutePlanRequest, RoutePlanResponse
from ...services.routing.service import build_map_url, plan_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=RoutePlanResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RoutePlanRequest) -> RoutePlanResponse:
    try:
        return plan_route(payload)
    except RouteValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


@router.post("/map-url", response_model=MapUrlResponse, status_code=status.HTTP_200_OK)
def map_url(payload: MapUrlRequest) -> MapUrlResponse:
    try:
        return build_map_url(payload)
    except RouteValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error building map link: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build map link: {str(exc)}",
        ) from exc
