"""HTTP client for sending status e-mails through Resend."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...errors import NotificationError
from .dispatcher import validate_notification
from .templates import render_email_html, template_for

logger = logging.getLogger(__name__)


class ResendEmailDispatcher:
    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        sender: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key or settings.resend_api_key
        self.api_url = api_url or settings.resend_api_url
        self.sender = sender or settings.notification_sender
        self.timeout = timeout if timeout is not None else settings.notification_timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is not None:
            return self._client
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=5.0))

    def notify(
        self,
        delivery_id: str,
        new_status: str,
        subject_title: str,
        recipient_email: str,
        recipient_name: str,
    ) -> None:
        """Validate, render and send one e-mail. No retries."""
        request = validate_notification(delivery_id, new_status, subject_title, recipient_email, recipient_name)
        if not self.api_key:
            raise NotificationError("Email service not configured (missing Resend API key).")

        template = template_for(request.new_status)
        payload = {
            "from": self.sender,
            "to": [request.recipient_email],
            "subject": template.subject,
            "html": render_email_html(request.new_status, request.subject_title, request.recipient_name),
        }
        logger.info(f"Processing notification for delivery {request.delivery_id}, status: {request.new_status}")

        client = self._get_client()
        try:
            response = client.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:200]
            raise NotificationError(f"Resend API error {exc.response.status_code}: {detail}") from exc
        except httpx.HTTPError as exc:
            raise NotificationError(f"Failed to reach Resend API: {exc}") from exc
        finally:
            if client is not self._client:
                client.close()
