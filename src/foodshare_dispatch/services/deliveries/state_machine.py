"""Delivery status lifecycle.

    assigned -> in_transit -> delivered
    assigned | in_transit -> failed

``delivered`` and ``failed`` are terminal. Who may request a transition is
decided by the caller; this module only enforces the lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from ...errors import InvalidTransition
from ...models.domain import Delivery, DeliveryStatus, StatusChange

TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.ASSIGNED: frozenset({DeliveryStatus.IN_TRANSIT, DeliveryStatus.FAILED}),
    DeliveryStatus.IN_TRANSIT: frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.FAILED}),
    DeliveryStatus.DELIVERED: frozenset(),
    DeliveryStatus.FAILED: frozenset(),
}

# Display order of the progress bar; failed sits off the bar
PROGRESS_STEPS = (DeliveryStatus.ASSIGNED, DeliveryStatus.IN_TRANSIT, DeliveryStatus.DELIVERED)


@dataclass(frozen=True, slots=True)
class TransitionResult:
    delivery: Delivery
    change: StatusChange


def allowed_targets(status: DeliveryStatus) -> list[DeliveryStatus]:
    return [target for target in DeliveryStatus if target in TRANSITIONS[status]]


def is_terminal(status: DeliveryStatus) -> bool:
    return not TRANSITIONS[status]


def progress_index(status: DeliveryStatus) -> int:
    if status is DeliveryStatus.FAILED:
        return -1
    return PROGRESS_STEPS.index(status)


def apply_transition(
    delivery: Delivery,
    target: DeliveryStatus | str,
    *,
    now: datetime | None = None,
) -> TransitionResult:
    """Validate and apply ``delivery.status -> target``.

    Returns a new ``Delivery`` together with the ``StatusChange`` to notify
    about. The caller's delivery is left untouched.

    Raises:
        InvalidTransition: the lifecycle has no edge from the current status
            to ``target`` (including unknown targets and same-status requests).
    """
    try:
        target_status = DeliveryStatus(target)
    except ValueError as exc:
        raise InvalidTransition(delivery.status.value, str(target)) from exc

    if target_status not in TRANSITIONS[delivery.status]:
        raise InvalidTransition(delivery.status.value, target_status.value)

    changed_at = now or datetime.now(timezone.utc)
    if target_status is DeliveryStatus.IN_TRANSIT:
        updated = replace(delivery, status=target_status, pickup_time=changed_at)
    elif target_status is DeliveryStatus.DELIVERED:
        updated = replace(delivery, status=target_status, delivery_time=changed_at)
    else:
        updated = replace(delivery, status=target_status)

    return TransitionResult(
        delivery=updated,
        change=StatusChange(
            delivery_id=delivery.id,
            previous_status=delivery.status,
            new_status=target_status,
            changed_at=changed_at,
        ),
    )
