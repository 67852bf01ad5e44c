"""Route planning orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Coordinate, DeliveryAggregate, Route
from ...persistence.deliveries import fetch_active_deliveries
from .metrics import compute_metrics
from .optimizer import order_stops
from .stops import extract_stops

logger = logging.getLogger(__name__)


def default_origin() -> Coordinate:
    return Coordinate(
        latitude=settings.default_origin_latitude,
        longitude=settings.default_origin_longitude,
    )


def plan_route(
    aggregates: Sequence[DeliveryAggregate],
    origin: Coordinate | None = None,
    *,
    minutes_per_km: float | None = None,
    minutes_per_stop: float | None = None,
) -> Route:
    """Extract stops, order them from ``origin`` and estimate the trip.

    Each call returns a fresh ``Route``; nothing is cached between calls.
    """
    origin = origin if origin is not None and origin.is_known else default_origin()

    stops = extract_stops(aggregates)
    ordering = order_stops(stops, origin)
    ordered = ordering.stops
    metrics = compute_metrics(
        ordered,
        origin,
        minutes_per_km=minutes_per_km,
        minutes_per_stop=minutes_per_stop,
    )

    logger.info(
        f"Planned route of {len(ordered)} stops for {len(aggregates)} deliveries: "
        f"{metrics.total_distance_km} km, ~{metrics.estimated_minutes} min"
    )
    if ordering.dropped:
        logger.warning(f"Dropped {len(ordering.dropped)} stops that could not be sequenced")

    return Route(
        ordered_stops=ordered,
        total_distance_km=metrics.total_distance_km,
        estimated_minutes=metrics.estimated_minutes,
        legs=metrics.legs,
        unranked_stop_ids=[stop.id for stop in ordering.unranked],
        dropped_stop_ids=[stop.id for stop in ordering.dropped],
        rankable=ordering.rankable,
    )


def plan_route_for_courier(courier_id: str, origin: Coordinate | None = None) -> Route:
    aggregates = fetch_active_deliveries(courier_id)
    return plan_route(aggregates, origin)
