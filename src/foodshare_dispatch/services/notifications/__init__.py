"""Status-change notifications."""

from .dispatcher import (
    LoggingDispatcher,
    NotificationDispatcher,
    NotificationRequest,
    NotificationScheduler,
    dispatch_safely,
    validate_notification,
)
from .resend import ResendEmailDispatcher
from ...config import settings


def build_dispatcher() -> NotificationDispatcher:
    """E-mail through Resend when configured, otherwise log only."""
    if settings.resend_api_key:
        return ResendEmailDispatcher()
    return LoggingDispatcher()


__all__ = [
    "LoggingDispatcher",
    "NotificationDispatcher",
    "NotificationRequest",
    "NotificationScheduler",
    "ResendEmailDispatcher",
    "build_dispatcher",
    "dispatch_safely",
    "validate_notification",
]
