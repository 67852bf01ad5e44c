"""Nearest-neighbour stop ordering with pickup-before-dropoff precedence.

Stop counts per courier are small (tens), so a greedy heuristic is enough.
Precedence is a hard rule: a dropoff is only ever a candidate once the pickup
of the same delivery has been placed, whatever the distance savings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ...models.domain import Coordinate, Stop, StopKind
from ..geospatial import distance_km

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StopOrdering:
    """Result of ordering a stop list.

    ``ordered`` holds the ranked stops in visit order, ``unranked`` the stops
    without a coordinate (in input order) and ``dropped`` the ranked stops that
    could never become eligible.
    """

    ordered: list[Stop] = field(default_factory=list)
    unranked: list[Stop] = field(default_factory=list)
    dropped: list[Stop] = field(default_factory=list)
    rankable: bool = True

    @property
    def stops(self) -> list[Stop]:
        return [*self.ordered, *self.unranked]


@dataclass(slots=True)
class _WorkingState:
    current: Coordinate
    remaining: list[Stop]
    picked: set[str] = field(default_factory=set)
    ordered: list[Stop] = field(default_factory=list)


def _is_candidate(stop: Stop, picked: set[str]) -> bool:
    return stop.kind is StopKind.PICKUP or stop.delivery_id in picked


def _nearest_candidate(state: _WorkingState) -> int | None:
    nearest_index: int | None = None
    nearest_distance = float("inf")
    for index, stop in enumerate(state.remaining):
        if not _is_candidate(stop, state.picked):
            continue
        distance = distance_km(state.current, stop.coordinate)
        # Strict comparison keeps the earliest stop on ties
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_index = index
    return nearest_index


def order_stops(stops: Sequence[Stop], origin: Coordinate) -> StopOrdering:
    """Order stops greedily from ``origin`` and report what could not be ranked."""

    ranked = [stop for stop in stops if stop.is_ranked]
    unranked = [stop for stop in stops if not stop.is_ranked]
    if not ranked:
        if stops:
            logger.info(f"None of the {len(stops)} stops has coordinates; returning input order")
        return StopOrdering(ordered=[], unranked=list(stops), rankable=not stops)

    if not origin.is_known:
        raise ValueError("Route origin must have both latitude and longitude.")

    state = _WorkingState(current=origin, remaining=list(ranked))
    while state.remaining:
        index = _nearest_candidate(state)
        if index is None:
            break
        stop = state.remaining.pop(index)
        state.ordered.append(stop)
        if stop.kind is StopKind.PICKUP:
            state.picked.add(stop.delivery_id)
        state.current = stop.coordinate

    for orphan in state.remaining:
        logger.warning(
            f"Data inconsistency: stop {orphan.id} waits on a pickup for delivery "
            f"{orphan.delivery_id} that is not routable; dropping it from the route"
        )

    return StopOrdering(ordered=state.ordered, unranked=unranked, dropped=state.remaining)


def optimize_route(stops: Sequence[Stop], origin: Coordinate) -> list[Stop]:
    """Return stops in visit order, unranked stops last.

    If no stop has coordinates the input order is returned unchanged.
    """
    return order_stops(stops, origin).stops
