"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from ...models.domain import Coordinate
from ...schemas.routing import RouteRequest, RouteResponse
from ...services.outputs.routing_formatter import route_to_csv
from ...services.routing.service import plan_route, plan_route_for_courier

router = APIRouter(prefix="/routes", tags=["routes"])
logger = logging.getLogger(__name__)


def _origin(latitude: float | None, longitude: float | None) -> Coordinate | None:
    if latitude is None or longitude is None:
        return None
    return Coordinate(latitude=latitude, longitude=longitude)


@router.post("/optimize", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RouteRequest) -> RouteResponse:
    try:
        route = plan_route(
            [delivery.to_domain() for delivery in payload.deliveries],
            payload.origin.to_domain() if payload.origin else None,
            minutes_per_km=payload.minutes_per_km,
            minutes_per_stop=payload.minutes_per_stop,
        )
        return RouteResponse.from_route(route)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc


@router.get("/courier/{courier_id}", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def courier_route(
    courier_id: str,
    latitude: float | None = Query(default=None, ge=-90, le=90, description="Courier latitude"),
    longitude: float | None = Query(default=None, ge=-180, le=180, description="Courier longitude"),
) -> RouteResponse:
    """Plan a route over the courier's assigned and in-transit deliveries."""
    try:
        route = plan_route_for_courier(courier_id, _origin(latitude, longitude))
        return RouteResponse.from_route(route)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error planning route for courier {courier_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan route: {str(exc)}",
        ) from exc


@router.get("/courier/{courier_id}/export.csv", response_class=PlainTextResponse)
def courier_route_csv(
    courier_id: str,
    latitude: float | None = Query(default=None, ge=-90, le=90),
    longitude: float | None = Query(default=None, ge=-180, le=180),
) -> PlainTextResponse:
    try:
        route = plan_route_for_courier(courier_id, _origin(latitude, longitude))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error exporting route for courier {courier_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export route: {str(exc)}",
        ) from exc
    return PlainTextResponse(route_to_csv(route), media_type="text/csv")
