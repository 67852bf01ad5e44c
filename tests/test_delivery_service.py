from dataclasses import replace
from datetime import datetime, timezone

import pytest

from foodshare_dispatch.errors import InvalidTransition, StaleDeliveryState
from foodshare_dispatch.models.domain import (
    Delivery,
    DeliveryAggregate,
    DeliveryStatus,
    Donation,
    Profile,
)
from foodshare_dispatch.services.deliveries import service as delivery_service
from foodshare_dispatch.services.notifications import NotificationScheduler

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


class RecordingDispatcher:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def notify(self, delivery_id, new_status, subject_title, recipient_email, recipient_name) -> None:
        self.calls.append((delivery_id, new_status, subject_title, recipient_email, recipient_name))


class BrokenDispatcher:
    def notify(self, *args) -> None:
        raise ConnectionError("email provider unreachable")


class InMemoryDeliveries:
    """Stands in for the Supabase table, including the status compare-and-swap."""

    def __init__(self, aggregate: DeliveryAggregate) -> None:
        self.aggregate = aggregate
        self.writes: list[Delivery] = []

    def get(self, delivery_id: str) -> DeliveryAggregate:
        return self.aggregate

    def save(self, updated: Delivery, expected_status: DeliveryStatus) -> Delivery:
        if self.aggregate.delivery.status is not expected_status:
            raise StaleDeliveryState(f"Delivery '{updated.id}' is no longer '{expected_status.value}'")
        self.aggregate = replace(self.aggregate, delivery=updated)
        self.writes.append(updated)
        return updated


def _aggregate(status=DeliveryStatus.ASSIGNED, receiver: Profile | None = None, title: str | None = "Vegetable crate"):
    return DeliveryAggregate(
        delivery=Delivery(id="D1", status=status, donation_ref="don-1", request_ref="req-1"),
        donation=Donation(id="don-1", title=title, pickup_location="Market") if title is not None else None,
        receiver_profile=receiver,
    )


@pytest.fixture
def store(monkeypatch):
    receiver = Profile(full_name="Hope Shelter", email="shelter@example.org")
    memory = InMemoryDeliveries(_aggregate(receiver=receiver))
    monkeypatch.setattr(delivery_service, "get_delivery_aggregate", memory.get)
    monkeypatch.setattr(delivery_service, "save_status_transition", memory.save)
    return memory


def test_status_update_persists_and_notifies_receiver(store):
    dispatcher = RecordingDispatcher()

    updated = delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, dispatcher=dispatcher, now=NOW)

    assert updated.status is DeliveryStatus.IN_TRANSIT
    assert updated.pickup_time == NOW
    assert store.writes == [updated]
    assert dispatcher.calls == [("D1", "in_transit", "Vegetable crate", "shelter@example.org", "Hope Shelter")]


def test_notification_failure_does_not_block_the_update(store):
    updated = delivery_service.update_delivery_status("D1", "failed", dispatcher=BrokenDispatcher(), now=NOW)

    assert updated.status is DeliveryStatus.FAILED
    assert store.aggregate.delivery.status is DeliveryStatus.FAILED


def test_invalid_transition_writes_and_sends_nothing(store):
    dispatcher = RecordingDispatcher()

    with pytest.raises(InvalidTransition):
        delivery_service.update_delivery_status("D1", DeliveryStatus.DELIVERED, dispatcher=dispatcher)

    assert store.writes == []
    assert dispatcher.calls == []


def test_lost_race_surfaces_as_stale_state(store, monkeypatch):
    stale_read = _aggregate(status=DeliveryStatus.ASSIGNED)
    store.aggregate = replace(store.aggregate, delivery=replace(store.aggregate.delivery, status=DeliveryStatus.FAILED))
    monkeypatch.setattr(delivery_service, "get_delivery_aggregate", lambda delivery_id: stale_read)
    dispatcher = RecordingDispatcher()

    with pytest.raises(StaleDeliveryState):
        delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, dispatcher=dispatcher)

    assert dispatcher.calls == []


def test_missing_email_skips_notification_and_defaults_fill_gaps(monkeypatch):
    dispatcher = RecordingDispatcher()

    no_email = InMemoryDeliveries(_aggregate(receiver=Profile(full_name="Hope Shelter")))
    monkeypatch.setattr(delivery_service, "get_delivery_aggregate", no_email.get)
    monkeypatch.setattr(delivery_service, "save_status_transition", no_email.save)
    delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, dispatcher=dispatcher)
    assert dispatcher.calls == []

    anonymous = InMemoryDeliveries(_aggregate(receiver=Profile(email="shelter@example.org"), title=None))
    monkeypatch.setattr(delivery_service, "get_delivery_aggregate", anonymous.get)
    monkeypatch.setattr(delivery_service, "save_status_transition", anonymous.save)
    delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, dispatcher=dispatcher)
    assert dispatcher.calls == [("D1", "in_transit", "Food Donation", "shelter@example.org", "Valued User")]


def test_scheduled_notification_runs_in_background(store):
    dispatcher = RecordingDispatcher()
    scheduler = NotificationScheduler(dispatcher, max_workers=1)

    delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, scheduler=scheduler)
    scheduler.shutdown(wait=True)

    assert [call[1] for call in dispatcher.calls] == ["in_transit"]


def test_two_step_lifecycle_sets_both_timestamps(store):
    delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, now=NOW)
    final = delivery_service.update_delivery_status("D1", DeliveryStatus.DELIVERED, now=NOW)

    assert final.status is DeliveryStatus.DELIVERED
    assert final.pickup_time == NOW
    assert final.delivery_time == NOW
    with pytest.raises(InvalidTransition):
        delivery_service.update_delivery_status("D1", DeliveryStatus.FAILED)


def test_missing_notification_channel_is_logged(store, caplog):
    with caplog.at_level("INFO"):
        delivery_service.update_delivery_status("D1", DeliveryStatus.IN_TRANSIT, now=NOW)

    assert "No notification channel for delivery D1" in caplog.text
