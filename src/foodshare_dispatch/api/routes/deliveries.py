"""Delivery status endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException, status

from ...errors import DeliveryNotFound, InvalidTransition, StaleDeliveryState
from ...persistence.deliveries import get_delivery_aggregate
from ...schemas.deliveries import DeliveryModel, StatusUpdateRequest, TransitionsResponse
from ...services.deliveries.service import update_delivery_status
from ...services.deliveries.state_machine import allowed_targets, is_terminal, progress_index
from ...services.notifications import NotificationScheduler, build_dispatcher

router = APIRouter(prefix="/deliveries", tags=["deliveries"])
logger = logging.getLogger(__name__)


@lru_cache()
def get_notification_scheduler() -> NotificationScheduler:
    return NotificationScheduler(build_dispatcher())


@router.post("/{delivery_id}/status", response_model=DeliveryModel, status_code=status.HTTP_200_OK)
def change_status(delivery_id: str, payload: StatusUpdateRequest) -> DeliveryModel:
    try:
        delivery = update_delivery_status(
            delivery_id,
            payload.status,
            scheduler=get_notification_scheduler(),
        )
        return DeliveryModel.from_domain(delivery)
    except DeliveryNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (InvalidTransition, StaleDeliveryState) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error updating delivery {delivery_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update delivery status: {str(exc)}",
        ) from exc


@router.get("/{delivery_id}/transitions", response_model=TransitionsResponse, status_code=status.HTTP_200_OK)
def transitions(delivery_id: str) -> TransitionsResponse:
    """Statuses the delivery may move to next."""
    try:
        delivery = get_delivery_aggregate(delivery_id).delivery
    except DeliveryNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return TransitionsResponse(
        delivery_id=delivery.id,
        status=delivery.status,
        progress_index=progress_index(delivery.status),
        terminal=is_terminal(delivery.status),
        allowed=allowed_targets(delivery.status),
    )
