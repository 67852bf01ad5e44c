"""Supabase persistence for deliveries and the profiles around them."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from pydantic import TypeAdapter

from ..db.supabase import get_supabase_client
from ..errors import DeliveryNotFound, StaleDeliveryState
from ..models.domain import (
    Coordinate,
    Delivery,
    DeliveryAggregate,
    DeliveryStatus,
    Donation,
    Profile,
)

logger = logging.getLogger(__name__)

_TIMESTAMP = TypeAdapter(datetime)

ACTIVE_STATUSES = (DeliveryStatus.ASSIGNED, DeliveryStatus.IN_TRANSIT)

DELIVERY_COLUMNS = (
    "id, status, pickup_time, delivery_time, delivery_notes, donation_id, request_id, delivery_person_id"
)
DELIVERY_AGGREGATE_COLUMNS = (
    f"{DELIVERY_COLUMNS}, "
    "donation:food_donations (id, title, pickup_location, pickup_latitude, pickup_longitude, donor_id), "
    "request:donation_requests (id, receiver_id)"
)
PROFILE_COLUMNS = "id, full_name, phone, address, latitude, longitude, email"


def _require_client():
    client = get_supabase_client()
    if client is None:
        raise RuntimeError("Supabase is not configured. Set FOODSHARE_SUPABASE_URL and FOODSHARE_SUPABASE_KEY.")
    return client


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return _TIMESTAMP.validate_python(value)


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def delivery_from_row(row: dict[str, Any]) -> Delivery:
    return Delivery(
        id=str(row["id"]),
        status=DeliveryStatus(row["status"]),
        donation_ref=str(row.get("donation_id") or ""),
        request_ref=str(row.get("request_id") or ""),
        pickup_time=_parse_timestamp(row.get("pickup_time")),
        delivery_time=_parse_timestamp(row.get("delivery_time")),
        notes=row.get("delivery_notes"),
        assigned_courier_id=row.get("delivery_person_id"),
    )


def delivery_to_update(delivery: Delivery) -> dict[str, Any]:
    """Columns written back after a status transition."""
    payload: dict[str, Any] = {"status": delivery.status.value}
    if delivery.pickup_time is not None:
        payload["pickup_time"] = delivery.pickup_time.isoformat()
    if delivery.delivery_time is not None:
        payload["delivery_time"] = delivery.delivery_time.isoformat()
    return payload


def donation_from_row(row: Optional[dict[str, Any]]) -> Optional[Donation]:
    if not row:
        return None
    return Donation(
        id=str(row["id"]),
        title=row.get("title") or "",
        pickup_location=row.get("pickup_location") or "",
        pickup_coordinate=Coordinate(
            latitude=_coerce_float(row.get("pickup_latitude")),
            longitude=_coerce_float(row.get("pickup_longitude")),
        ),
    )


def profile_from_row(row: Optional[dict[str, Any]]) -> Optional[Profile]:
    if not row:
        return None
    return Profile(
        full_name=row.get("full_name"),
        phone=row.get("phone"),
        address=row.get("address"),
        coordinate=Coordinate(
            latitude=_coerce_float(row.get("latitude")),
            longitude=_coerce_float(row.get("longitude")),
        ),
        email=row.get("email"),
    )


def _fetch_profiles(client, profile_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
    ids = sorted({pid for pid in profile_ids if pid})
    if not ids:
        return {}
    response = client.table("profiles").select(PROFILE_COLUMNS).in_("id", ids).execute()
    return {str(row["id"]): row for row in (response.data or [])}


def fetch_active_deliveries(courier_id: str) -> list[DeliveryAggregate]:
    """Load the courier's in-flight deliveries with donation and both profiles."""

    client = _require_client()
    response = (
        client.table("deliveries")
        .select(DELIVERY_AGGREGATE_COLUMNS)
        .eq("delivery_person_id", courier_id)
        .in_("status", [status.value for status in ACTIVE_STATUSES])
        .order("created_at", desc=True)
        .execute()
    )
    rows = response.data or []

    donor_ids = [(row.get("donation") or {}).get("donor_id") for row in rows]
    receiver_ids = [(row.get("request") or {}).get("receiver_id") for row in rows]
    profiles = _fetch_profiles(client, [*donor_ids, *receiver_ids])

    aggregates: list[DeliveryAggregate] = []
    for row in rows:
        donation_row = row.get("donation") or {}
        request_row = row.get("request") or {}
        aggregates.append(
            DeliveryAggregate(
                delivery=delivery_from_row(row),
                donation=donation_from_row(donation_row),
                donor_profile=profile_from_row(profiles.get(str(donation_row.get("donor_id")))),
                receiver_profile=profile_from_row(profiles.get(str(request_row.get("receiver_id")))),
            )
        )
    logger.info(f"Loaded {len(aggregates)} active deliveries for courier {courier_id}")
    return aggregates


def get_delivery_aggregate(delivery_id: str) -> DeliveryAggregate:
    """Load one delivery with its donation and receiver profile."""

    client = _require_client()
    response = (
        client.table("deliveries")
        .select(DELIVERY_AGGREGATE_COLUMNS)
        .eq("id", delivery_id)
        .limit(1)
        .execute()
    )
    rows = response.data or []
    if not rows:
        raise DeliveryNotFound(f"Delivery '{delivery_id}' not found.")
    row = rows[0]
    donation_row = row.get("donation") or {}
    request_row = row.get("request") or {}
    profiles = _fetch_profiles(client, [donation_row.get("donor_id"), request_row.get("receiver_id")])
    return DeliveryAggregate(
        delivery=delivery_from_row(row),
        donation=donation_from_row(donation_row),
        donor_profile=profile_from_row(profiles.get(str(donation_row.get("donor_id")))),
        receiver_profile=profile_from_row(profiles.get(str(request_row.get("receiver_id")))),
    )


def save_status_transition(updated: Delivery, expected_status: DeliveryStatus) -> Delivery:
    """Persist a transition only if the stored status still equals ``expected_status``.

    The status filter turns the update into a compare-and-swap, so at most one
    of two concurrent transitions on the same delivery is committed.
    """
    client = _require_client()
    response = (
        client.table("deliveries")
        .update(delivery_to_update(updated))
        .eq("id", updated.id)
        .eq("status", expected_status.value)
        .execute()
    )
    rows = response.data or []
    if not rows:
        raise StaleDeliveryState(
            f"Delivery '{updated.id}' is no longer '{expected_status.value}'; reload and retry."
        )
    return delivery_from_row(rows[0])
