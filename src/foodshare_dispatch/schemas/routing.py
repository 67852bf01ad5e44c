"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    Coordinate,
    Delivery,
    DeliveryAggregate,
    DeliveryStatus,
    Donation,
    Profile,
    Route,
    StopKind,
)
from ..services.outputs.routing_formatter import route_to_json


class CoordinateModel(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    def to_domain(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class DonationModel(BaseModel):
    id: str
    title: str
    pickup_location: str
    pickup_latitude: Optional[float] = Field(None, ge=-90, le=90)
    pickup_longitude: Optional[float] = Field(None, ge=-180, le=180)


class ProfileModel(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    def to_domain(self) -> Profile:
        return Profile(
            full_name=self.full_name,
            phone=self.phone,
            address=self.address,
            coordinate=Coordinate(latitude=self.latitude, longitude=self.longitude),
        )


class DeliveryInputModel(BaseModel):
    """A delivery as supplied by the client, joined with its parties."""

    id: str
    status: DeliveryStatus = DeliveryStatus.ASSIGNED
    donation: Optional[DonationModel] = None
    donor_profile: Optional[ProfileModel] = None
    receiver_profile: Optional[ProfileModel] = None

    def to_domain(self) -> DeliveryAggregate:
        donation = None
        if self.donation is not None:
            donation = Donation(
                id=self.donation.id,
                title=self.donation.title,
                pickup_location=self.donation.pickup_location,
                pickup_coordinate=Coordinate(
                    latitude=self.donation.pickup_latitude,
                    longitude=self.donation.pickup_longitude,
                ),
            )
        return DeliveryAggregate(
            delivery=Delivery(
                id=self.id,
                status=self.status,
                donation_ref=self.donation.id if self.donation else "",
                request_ref="",
            ),
            donation=donation,
            donor_profile=self.donor_profile.to_domain() if self.donor_profile else None,
            receiver_profile=self.receiver_profile.to_domain() if self.receiver_profile else None,
        )


class RouteRequest(BaseModel):
    deliveries: List[DeliveryInputModel]
    origin: Optional[CoordinateModel] = Field(
        default=None,
        description="Courier position. Falls back to the configured default origin.",
    )
    minutes_per_km: Optional[float] = Field(None, ge=0)
    minutes_per_stop: Optional[float] = Field(None, ge=0)


class RouteStopModel(BaseModel):
    id: str
    kind: StopKind
    delivery_id: str
    address: str
    latitude: Optional[float]
    longitude: Optional[float]
    contact_name: str
    contact_phone: Optional[str]
    subject_title: str


class RouteLegModel(BaseModel):
    stop_id: str
    sequence: int
    distance_from_prev_km: float
    cumulative_km: float


class RouteResponse(BaseModel):
    total_distance_km: float
    estimated_minutes: int
    rankable: bool
    unranked_stop_ids: List[str]
    dropped_stop_ids: List[str]
    stops: List[RouteStopModel]
    legs: List[RouteLegModel]

    @classmethod
    def from_route(cls, route: Route) -> "RouteResponse":
        return cls.model_validate(route_to_json(route))
