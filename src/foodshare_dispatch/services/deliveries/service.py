"""Status update orchestration: validate, persist, then notify."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...models.domain import Delivery, DeliveryAggregate, DeliveryStatus
from ...persistence.deliveries import get_delivery_aggregate, save_status_transition
from ..notifications import NotificationScheduler, dispatch_safely
from ..notifications.dispatcher import NotificationDispatcher
from .state_machine import apply_transition

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_TITLE = "Food Donation"
DEFAULT_RECIPIENT_NAME = "Valued User"


def _notify_receiver(
    aggregate: DeliveryAggregate,
    new_status: DeliveryStatus,
    dispatcher: Optional[NotificationDispatcher],
    scheduler: Optional[NotificationScheduler],
) -> None:
    receiver = aggregate.receiver_profile
    if receiver is None or not receiver.email:
        logger.info(f"Delivery {aggregate.delivery.id} has no receiver e-mail; skipping notification")
        return

    title = (aggregate.donation.title if aggregate.donation else None) or DEFAULT_SUBJECT_TITLE
    args = (
        aggregate.delivery.id,
        new_status.value,
        title,
        receiver.email,
        receiver.full_name or DEFAULT_RECIPIENT_NAME,
    )
    if scheduler is not None:
        scheduler.submit(*args)
    elif dispatcher is not None:
        dispatch_safely(dispatcher, *args)
    else:
        logger.info(
            f"No notification channel for delivery {aggregate.delivery.id}; "
            f"skipping {new_status.value} notification"
        )


def update_delivery_status(
    delivery_id: str,
    target: DeliveryStatus | str,
    *,
    dispatcher: Optional[NotificationDispatcher] = None,
    scheduler: Optional[NotificationScheduler] = None,
    now: datetime | None = None,
) -> Delivery:
    """Move a stored delivery to ``target`` and tell the receiver.

    The write is conditional on the status read here, so a concurrent
    transition on the same delivery raises ``StaleDeliveryState`` instead of
    being overwritten. Notification happens only after the write succeeded and
    its failure never affects the returned delivery.
    """
    aggregate = get_delivery_aggregate(delivery_id)
    current = aggregate.delivery
    result = apply_transition(current, target, now=now)
    saved = save_status_transition(result.delivery, expected_status=current.status)

    logger.info(
        f"Delivery {delivery_id} moved from {result.change.previous_status.value} "
        f"to {result.change.new_status.value}"
    )
    _notify_receiver(aggregate, result.change.new_status, dispatcher, scheduler)
    return saved
