from foodshare_dispatch.models.domain import (
    Coordinate,
    Delivery,
    DeliveryAggregate,
    DeliveryStatus,
    Donation,
    Profile,
    StopKind,
)
from foodshare_dispatch.services.routing.stops import extract_stops


def _aggregate(delivery_id: str, *, donation: bool = True, receiver: Profile | None = None, donor: Profile | None = None):
    return DeliveryAggregate(
        delivery=Delivery(id=delivery_id, status=DeliveryStatus.ASSIGNED, donation_ref=f"don-{delivery_id}", request_ref=f"req-{delivery_id}"),
        donation=Donation(
            id=f"don-{delivery_id}",
            title=f"Bread {delivery_id}",
            pickup_location="12 Market St",
            pickup_coordinate=Coordinate(0.0, 1.0),
        )
        if donation
        else None,
        donor_profile=donor,
        receiver_profile=receiver,
    )


def test_pickup_is_followed_by_its_dropoff_in_input_order():
    receiver = Profile(full_name="Shelter", phone="0700", address="1 Hope Rd", coordinate=Coordinate(0.0, 2.0))
    donor = Profile(full_name="Bakery", phone="0711")
    stops = extract_stops([_aggregate("A", receiver=receiver, donor=donor), _aggregate("B", receiver=receiver)])

    assert [stop.id for stop in stops] == ["pickup-A", "dropoff-A", "pickup-B", "dropoff-B"]
    pickup, dropoff = stops[0], stops[1]
    assert pickup.kind is StopKind.PICKUP
    assert pickup.contact_name == "Bakery"
    assert pickup.contact_phone == "0711"
    assert pickup.address == "12 Market St"
    assert dropoff.kind is StopKind.DROPOFF
    assert dropoff.address == "1 Hope Rd"
    assert dropoff.coordinate == Coordinate(0.0, 2.0)
    assert dropoff.subject_title == "Bread A"


def test_delivery_without_receiver_has_only_a_pickup():
    stops = extract_stops([_aggregate("A")])

    assert [stop.id for stop in stops] == ["pickup-A"]
    assert stops[0].contact_name == "Donor"
    assert stops[0].contact_phone is None


def test_delivery_without_donation_is_skipped(caplog):
    receiver = Profile(full_name="Shelter", coordinate=Coordinate(0.0, 2.0))
    with caplog.at_level("WARNING"):
        stops = extract_stops([_aggregate("A", donation=False, receiver=receiver), _aggregate("B")])

    assert [stop.id for stop in stops] == ["pickup-B"]
    assert "A" in caplog.text


def test_receiver_without_address_gets_placeholder():
    stops = extract_stops([_aggregate("A", receiver=Profile(full_name="Shelter", phone=""))])

    dropoff = stops[1]
    assert dropoff.address == "Address not specified"
    assert dropoff.contact_phone is None
    assert not dropoff.is_ranked
