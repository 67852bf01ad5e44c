from datetime import datetime, timedelta, timezone

import pytest

from foodshare_dispatch.errors import InvalidTransition
from foodshare_dispatch.models.domain import Delivery, DeliveryStatus
from foodshare_dispatch.services.deliveries.state_machine import (
    allowed_targets,
    apply_transition,
    is_terminal,
    progress_index,
)

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


def _delivery(status: DeliveryStatus = DeliveryStatus.ASSIGNED) -> Delivery:
    return Delivery(id="D1", status=status, donation_ref="don-1", request_ref="req-1", assigned_courier_id="courier-1")


def test_pickup_sets_pickup_time_only():
    result = apply_transition(_delivery(), DeliveryStatus.IN_TRANSIT, now=NOW)

    assert result.delivery.status is DeliveryStatus.IN_TRANSIT
    assert result.delivery.pickup_time == NOW
    assert result.delivery.delivery_time is None
    assert result.change.delivery_id == "D1"
    assert result.change.previous_status is DeliveryStatus.ASSIGNED
    assert result.change.new_status is DeliveryStatus.IN_TRANSIT


def test_pickup_time_defaults_to_call_time():
    before = datetime.now(timezone.utc)
    result = apply_transition(_delivery(), "in_transit")
    after = datetime.now(timezone.utc)

    assert before <= result.delivery.pickup_time <= after


def test_full_lifecycle_then_terminal():
    picked = apply_transition(_delivery(), DeliveryStatus.IN_TRANSIT, now=NOW).delivery
    delivered = apply_transition(picked, DeliveryStatus.DELIVERED, now=NOW + timedelta(minutes=40)).delivery

    assert delivered.status is DeliveryStatus.DELIVERED
    assert delivered.pickup_time == NOW
    assert delivered.delivery_time == NOW + timedelta(minutes=40)
    for target in DeliveryStatus:
        with pytest.raises(InvalidTransition):
            apply_transition(delivered, target)


@pytest.mark.parametrize("status", [DeliveryStatus.ASSIGNED, DeliveryStatus.IN_TRANSIT])
def test_failure_allowed_from_active_states(status):
    result = apply_transition(_delivery(status), DeliveryStatus.FAILED, now=NOW)

    assert result.delivery.status is DeliveryStatus.FAILED
    assert result.delivery.pickup_time is None
    assert result.delivery.delivery_time is None


def test_cannot_skip_in_transit():
    with pytest.raises(InvalidTransition) as excinfo:
        apply_transition(_delivery(), DeliveryStatus.DELIVERED)

    assert excinfo.value.current == "assigned"
    assert excinfo.value.target == "delivered"


@pytest.mark.parametrize("target", list(DeliveryStatus))
def test_failed_is_terminal(target):
    with pytest.raises(InvalidTransition):
        apply_transition(_delivery(DeliveryStatus.FAILED), target)


def test_same_status_and_unknown_targets_are_rejected():
    with pytest.raises(InvalidTransition):
        apply_transition(_delivery(), DeliveryStatus.ASSIGNED)
    with pytest.raises(InvalidTransition):
        apply_transition(_delivery(), "picked_up")


def test_callers_copy_is_not_mutated():
    original = _delivery()

    apply_transition(original, DeliveryStatus.IN_TRANSIT, now=NOW)

    assert original.status is DeliveryStatus.ASSIGNED
    assert original.pickup_time is None


def test_lifecycle_helpers():
    assert allowed_targets(DeliveryStatus.ASSIGNED) == [DeliveryStatus.IN_TRANSIT, DeliveryStatus.FAILED]
    assert allowed_targets(DeliveryStatus.DELIVERED) == []
    assert is_terminal(DeliveryStatus.FAILED)
    assert not is_terminal(DeliveryStatus.IN_TRANSIT)
    assert [progress_index(status) for status in DeliveryStatus] == [0, 1, 2, -1]
