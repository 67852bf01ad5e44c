"""Turn active deliveries into discrete pickup and dropoff stops."""

from __future__ import annotations

import logging
from typing import Iterable

from ...models.domain import DeliveryAggregate, Stop, StopKind

logger = logging.getLogger(__name__)

DEFAULT_DONOR_NAME = "Donor"
DEFAULT_RECEIVER_NAME = "Receiver"
MISSING_ADDRESS = "Address not specified"


def pickup_stop_id(delivery_id: str) -> str:
    return f"pickup-{delivery_id}"


def dropoff_stop_id(delivery_id: str) -> str:
    return f"dropoff-{delivery_id}"


def extract_stops(aggregates: Iterable[DeliveryAggregate]) -> list[Stop]:
    """Emit a pickup (and, with a receiver, a dropoff) stop per delivery.

    Stops come out in input order with each pickup immediately followed by its
    dropoff. Deliveries whose donation cannot be resolved are skipped.
    """
    stops: list[Stop] = []
    for aggregate in aggregates:
        delivery = aggregate.delivery
        donation = aggregate.donation
        if donation is None:
            logger.warning(f"Delivery {delivery.id} has no resolvable donation; skipping its stops")
            continue

        donor = aggregate.donor_profile
        stops.append(
            Stop(
                id=pickup_stop_id(delivery.id),
                kind=StopKind.PICKUP,
                delivery_id=delivery.id,
                address=donation.pickup_location,
                coordinate=donation.pickup_coordinate,
                contact_name=(donor.full_name if donor else None) or DEFAULT_DONOR_NAME,
                contact_phone=(donor.phone if donor else None) or None,
                subject_title=donation.title,
            )
        )

        receiver = aggregate.receiver_profile
        if receiver is None:
            continue
        stops.append(
            Stop(
                id=dropoff_stop_id(delivery.id),
                kind=StopKind.DROPOFF,
                delivery_id=delivery.id,
                address=receiver.address or MISSING_ADDRESS,
                coordinate=receiver.coordinate,
                contact_name=receiver.full_name or DEFAULT_RECEIVER_NAME,
                contact_phone=receiver.phone or None,
                subject_title=donation.title,
            )
        )
    return stops
