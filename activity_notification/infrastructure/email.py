"""Helpers for delivering notification emails via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from activity_notification.config import get_settings

logger = logging.getLogger(__name__)


def _describe_sendgrid_body(body: Any) -> str | None:
    """Return the error messages contained in a SendGrid response body."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body:
        return None
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body.strip() or None

    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list):
        messages = [
            str(item["message"])
            for item in errors
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return json.dumps(body, default=str)


def _log_delivery_failure(source: Any) -> None:
    status_code = getattr(source, "status_code", None)
    details = _describe_sendgrid_body(getattr(source, "body", None))
    if details:
        logger.error(
            "SendGrid rejected notification email (status %s): %s", status_code, details
        )
    else:
        logger.error("SendGrid rejected notification email (status %s)", status_code)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # SendGrid raises HTTPError subclasses and transport errors
        if getattr(exc, "status_code", None) is None:
            logger.exception("Error sending notification email via SendGrid")
        else:
            _log_delivery_failure(exc)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_delivery_failure(response)
        return False

    return True


def send_notification_email(
    recipient: str, *, key: str, parameters: dict[str, Any] | None = None
) -> bool:
    """Tell ``recipient`` that a notification identified by ``key`` arrived."""

    subject = f"Notification: {key}"
    lines = [f"<p>You have a new notification: <strong>{html.escape(key)}</strong></p>"]
    for name, value in sorted((parameters or {}).items()):
        lines.append(f"<p>{html.escape(str(name))}: {html.escape(str(value))}</p>")
    return send_email(subject, "".join(lines), recipient)


__all__ = ["send_email", "send_notification_email"]
