"""Exceptions raised by the dispatch engine."""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for all dispatch engine errors."""


class InvalidTransition(DispatchError):
    """Requested status change is not permitted by the delivery lifecycle."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move delivery from '{current}' to '{target}'.")


class StaleDeliveryState(DispatchError):
    """Delivery status changed between read and write."""


class DeliveryNotFound(DispatchError):
    pass


class NotificationValidationError(DispatchError, ValueError):
    """Notification payload failed validation; nothing was sent."""


class NotificationError(DispatchError):
    """Notification provider could not deliver the message."""


class GeocodingError(DispatchError):
    pass
