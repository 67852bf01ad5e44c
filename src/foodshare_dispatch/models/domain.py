"""Domain models for deliveries, stops and computed routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A geographic point; either component may be unknown."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def is_known(self) -> bool:
        return self.latitude is not None and self.longitude is not None


UNKNOWN_LOCATION = Coordinate()


class StopKind(str, Enum):
    PICKUP = "pickup"
    DROPOFF = "dropoff"


class DeliveryStatus(str, Enum):
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Stop:
    """A single pickup or dropoff point generated from an active delivery."""

    id: str
    kind: StopKind
    delivery_id: str
    address: str
    coordinate: Coordinate
    contact_name: str
    contact_phone: Optional[str]
    subject_title: str

    @property
    def is_ranked(self) -> bool:
        return self.coordinate.is_known


@dataclass(frozen=True, slots=True)
class Delivery:
    """Delivery record as owned by the backing store."""

    id: str
    status: DeliveryStatus
    donation_ref: str
    request_ref: str
    pickup_time: Optional[datetime] = None
    delivery_time: Optional[datetime] = None
    notes: Optional[str] = None
    assigned_courier_id: Optional[str] = None


@dataclass(slots=True)
class Donation:
    id: str
    title: str
    pickup_location: str
    pickup_coordinate: Coordinate = UNKNOWN_LOCATION


@dataclass(slots=True)
class Profile:
    """Contact details of a donor or receiver."""

    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    coordinate: Coordinate = UNKNOWN_LOCATION
    email: Optional[str] = None


@dataclass(slots=True)
class DeliveryAggregate:
    """A delivery joined with its donation and the two parties' profiles."""

    delivery: Delivery
    donation: Optional[Donation] = None
    donor_profile: Optional[Profile] = None
    receiver_profile: Optional[Profile] = None


@dataclass(frozen=True, slots=True)
class RouteLeg:
    stop_id: str
    sequence: int
    distance_from_prev_km: float
    cumulative_km: float


@dataclass(frozen=True, slots=True)
class Route:
    """Ordered stop sequence with its distance and time estimate."""

    ordered_stops: List[Stop]
    total_distance_km: float
    estimated_minutes: int
    legs: List[RouteLeg] = field(default_factory=list)
    unranked_stop_ids: List[str] = field(default_factory=list)
    dropped_stop_ids: List[str] = field(default_factory=list)
    rankable: bool = True


@dataclass(frozen=True, slots=True)
class StatusChange:
    """Signal that a delivery changed status and its parties should be told."""

    delivery_id: str
    previous_status: DeliveryStatus
    new_status: DeliveryStatus
    changed_at: datetime
