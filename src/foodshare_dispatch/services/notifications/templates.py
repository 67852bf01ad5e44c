"""E-mail subject/body templates for delivery status changes."""

from __future__ import annotations

from html import escape
from typing import NamedTuple


class StatusTemplate(NamedTuple):
    subject: str
    message: str


STATUS_TEMPLATES: dict[str, StatusTemplate] = {
    "assigned": StatusTemplate(
        subject="Delivery Assigned - FoodShare",
        message="A delivery person has been assigned to pick up your food donation.",
    ),
    "in_transit": StatusTemplate(
        subject="Food is On the Way! - FoodShare",
        message="Great news! Your food donation is now in transit and on its way.",
    ),
    "delivered": StatusTemplate(
        subject="Delivery Complete - FoodShare",
        message="Your food donation has been successfully delivered. Thank you for making a difference!",
    ),
    "failed": StatusTemplate(
        subject="Delivery Issue - FoodShare",
        message=(
            "Unfortunately, there was an issue with the delivery. "
            "Please check your dashboard for more details."
        ),
    ),
}


def status_label(status: str) -> str:
    return status.replace("_", " ")


def template_for(status: str) -> StatusTemplate:
    """Known statuses get their own template, anything else a generic one."""
    template = STATUS_TEMPLATES.get(status)
    if template is not None:
        return template
    return StatusTemplate(
        subject="Delivery Status Update - FoodShare",
        message=f"Your delivery status has been updated to: {status}",
    )


EMAIL_LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: #10b981; padding: 30px; border-radius: 12px 12px 0 0; text-align: center; }}
    .header h1 {{ color: white; margin: 0; font-size: 24px; }}
    .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 12px 12px; }}
    .status-badge {{ display: inline-block; padding: 8px 16px; background: #10b981; color: white; border-radius: 20px; font-weight: 600; text-transform: capitalize; }}
    .donation-title {{ font-size: 18px; font-weight: 600; color: #1f2937; margin: 20px 0 10px; }}
    .footer {{ text-align: center; margin-top: 30px; color: #9ca3af; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>FoodShare</h1></div>
    <div class="content">
      <p>Hello {recipient_name},</p>
      <p class="donation-title">Donation: {subject_title}</p>
      <p><strong>Status:</strong> <span class="status-badge">{status_label}</span></p>
      <p class="message">{message}</p>
      <p>Log in to your dashboard to view more details about this delivery.</p>
      <div class="footer">
        <p>Thank you for being part of the FoodShare community!</p>
        <p>Together, we're fighting hunger one meal at a time.</p>
      </div>
    </div>
  </div>
</body>
</html>
"""


def render_email_html(status: str, subject_title: str, recipient_name: str) -> str:
    """Render the status e-mail; every interpolated value is HTML-escaped."""
    template = template_for(status)
    return EMAIL_LAYOUT.format(
        recipient_name=escape(recipient_name),
        subject_title=escape(subject_title),
        status_label=escape(status_label(status)),
        message=escape(template.message),
    )
