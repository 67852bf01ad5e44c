"""Serializers for planned routes."""

from __future__ import annotations

import csv
import io

from ...models.domain import Route, Stop


def stop_to_json(stop: Stop) -> dict:
    return {
        "id": stop.id,
        "kind": stop.kind.value,
        "delivery_id": stop.delivery_id,
        "address": stop.address,
        "latitude": stop.coordinate.latitude,
        "longitude": stop.coordinate.longitude,
        "contact_name": stop.contact_name,
        "contact_phone": stop.contact_phone,
        "subject_title": stop.subject_title,
    }


def route_to_json(route: Route) -> dict:
    return {
        "total_distance_km": route.total_distance_km,
        "estimated_minutes": route.estimated_minutes,
        "rankable": route.rankable,
        "unranked_stop_ids": list(route.unranked_stop_ids),
        "dropped_stop_ids": list(route.dropped_stop_ids),
        "stops": [stop_to_json(stop) for stop in route.ordered_stops],
        "legs": [
            {
                "stop_id": leg.stop_id,
                "sequence": leg.sequence,
                "distance_from_prev_km": leg.distance_from_prev_km,
                "cumulative_km": leg.cumulative_km,
            }
            for leg in route.legs
        ],
    }


def route_to_csv(route: Route) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "stop_id",
        "kind",
        "delivery_id",
        "subject_title",
        "address",
        "latitude",
        "longitude",
        "contact_name",
        "contact_phone",
        "distance_from_prev_km",
        "cumulative_km",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    legs = {leg.stop_id: leg for leg in route.legs}
    for sequence, stop in enumerate(route.ordered_stops, start=1):
        leg = legs.get(stop.id)
        writer.writerow(
            {
                "sequence": sequence,
                "stop_id": stop.id,
                "kind": stop.kind.value,
                "delivery_id": stop.delivery_id,
                "subject_title": stop.subject_title,
                "address": stop.address,
                "latitude": stop.coordinate.latitude,
                "longitude": stop.coordinate.longitude,
                "contact_name": stop.contact_name,
                "contact_phone": stop.contact_phone or "",
                "distance_from_prev_km": leg.distance_from_prev_km if leg else "",
                "cumulative_km": leg.cumulative_km if leg else "",
            }
        )
    return buffer.getvalue()
