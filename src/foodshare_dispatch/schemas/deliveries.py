"""Delivery status request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ..models.domain import Delivery, DeliveryStatus


class StatusUpdateRequest(BaseModel):
    status: DeliveryStatus


class DeliveryModel(BaseModel):
    id: str
    status: DeliveryStatus
    pickup_time: Optional[datetime] = None
    delivery_time: Optional[datetime] = None
    notes: Optional[str] = None
    donation_id: str
    request_id: str
    delivery_person_id: Optional[str] = None

    @classmethod
    def from_domain(cls, delivery: Delivery) -> "DeliveryModel":
        return cls(
            id=delivery.id,
            status=delivery.status,
            pickup_time=delivery.pickup_time,
            delivery_time=delivery.delivery_time,
            notes=delivery.notes,
            donation_id=delivery.donation_ref,
            request_id=delivery.request_ref,
            delivery_person_id=delivery.assigned_courier_id,
        )


class TransitionsResponse(BaseModel):
    delivery_id: str
    status: DeliveryStatus
    progress_index: int
    terminal: bool
    allowed: List[DeliveryStatus]
