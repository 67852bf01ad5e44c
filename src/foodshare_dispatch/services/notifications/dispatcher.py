"""Notification contract and the non-fatal dispatch helpers around it.

A status transition must never fail because an e-mail could not be sent, so
callers go through ``dispatch_safely`` (inline) or ``NotificationScheduler``
(fire-and-forget). Both make exactly one attempt.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from ...config import settings
from ...errors import NotificationValidationError

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_NAME_LENGTH = 100


class NotificationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    delivery_id: str = Field(..., min_length=1)
    new_status: str = Field(..., min_length=1, max_length=32)
    subject_title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    recipient_email: EmailStr
    recipient_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


def validate_notification(
    delivery_id: str,
    new_status: str,
    subject_title: str,
    recipient_email: str,
    recipient_name: str,
) -> NotificationRequest:
    try:
        return NotificationRequest(
            delivery_id=delivery_id,
            new_status=new_status,
            subject_title=subject_title,
            recipient_email=recipient_email,
            recipient_name=recipient_name,
        )
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        raise NotificationValidationError(f"Invalid notification payload ({fields})") from exc


class NotificationDispatcher(Protocol):
    """Sends a status-change notification; raises on failure."""

    def notify(
        self,
        delivery_id: str,
        new_status: str,
        subject_title: str,
        recipient_email: str,
        recipient_name: str,
    ) -> None: ...


class LoggingDispatcher:
    """Dispatcher used when no e-mail provider is configured."""

    def notify(
        self,
        delivery_id: str,
        new_status: str,
        subject_title: str,
        recipient_email: str,
        recipient_name: str,
    ) -> None:
        request = validate_notification(delivery_id, new_status, subject_title, recipient_email, recipient_name)
        logger.info(
            f"E-mail not configured; would notify {request.recipient_email} that delivery "
            f"{request.delivery_id} is now {request.new_status}"
        )


def dispatch_safely(
    dispatcher: NotificationDispatcher,
    delivery_id: str,
    new_status: str,
    subject_title: str,
    recipient_email: str,
    recipient_name: str,
) -> bool:
    """Single notification attempt that logs failures instead of raising."""
    try:
        dispatcher.notify(delivery_id, new_status, subject_title, recipient_email, recipient_name)
    except NotificationValidationError as exc:
        logger.warning(f"Notification for delivery {delivery_id} rejected: {exc}")
        return False
    except Exception as exc:
        logger.error(f"Error sending notification for delivery {delivery_id}: {exc}")
        return False
    logger.info(f"Notification sent for delivery {delivery_id} ({new_status})")
    return True


class NotificationScheduler:
    """Fire-and-forget notification dispatch on a small worker pool."""

    def __init__(self, dispatcher: NotificationDispatcher, max_workers: int | None = None) -> None:
        self.dispatcher = dispatcher
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.notification_workers,
            thread_name_prefix="notify",
        )

    def submit(
        self,
        delivery_id: str,
        new_status: str,
        subject_title: str,
        recipient_email: str,
        recipient_name: str,
    ) -> Future:
        return self._executor.submit(
            dispatch_safely,
            self.dispatcher,
            delivery_id,
            new_status,
            subject_title,
            recipient_email,
            recipient_name,
        )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
