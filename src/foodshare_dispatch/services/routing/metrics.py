"""Distance and time estimates for an ordered stop sequence.

The time estimate is a fixed approximation (transit minutes per km plus a
dwell time per stop), not a model of real travel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from ...config import settings
from ...models.domain import Coordinate, RouteLeg, Stop
from ..geospatial import distance_km


@dataclass(slots=True)
class RouteMetrics:
    total_distance_km: float
    estimated_minutes: int
    legs: List[RouteLeg] = field(default_factory=list)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def estimate_minutes(
    distance: float,
    stop_count: int,
    *,
    minutes_per_km: float | None = None,
    minutes_per_stop: float | None = None,
) -> int:
    per_km = settings.minutes_per_km if minutes_per_km is None else minutes_per_km
    per_stop = settings.minutes_per_stop if minutes_per_stop is None else minutes_per_stop
    return int(round_half_up(distance * per_km + stop_count * per_stop))


def compute_metrics(
    route: Sequence[Stop],
    origin: Coordinate,
    *,
    minutes_per_km: float | None = None,
    minutes_per_stop: float | None = None,
) -> RouteMetrics:
    """Sum great-circle legs from ``origin`` through every stop with a coordinate.

    Stops without coordinates do not break the chain: the running position
    only advances on stops that have one. Every stop still counts towards the
    dwell time.
    """
    if not origin.is_known:
        raise ValueError("Route origin must have both latitude and longitude.")

    total = 0.0
    previous = origin
    legs: list[RouteLeg] = []
    for sequence, stop in enumerate(route, start=1):
        step = 0.0
        if stop.coordinate.is_known:
            step = distance_km(previous, stop.coordinate)
            total += step
            previous = stop.coordinate
        legs.append(
            RouteLeg(
                stop_id=stop.id,
                sequence=sequence,
                distance_from_prev_km=round_half_up(step, 2),
                cumulative_km=round_half_up(total, 2),
            )
        )

    return RouteMetrics(
        total_distance_km=round_half_up(total, 1),
        estimated_minutes=estimate_minutes(
            total,
            len(route),
            minutes_per_km=minutes_per_km,
            minutes_per_stop=minutes_per_stop,
        ),
        legs=legs,
    )
