"""Deliver a notification by email when the target allows it."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from activity_notification.domain.entities import Notification
from activity_notification.infrastructure import email as email_delivery
from activity_notification.infrastructure.polymorphic import resolve_model_class

logger = logging.getLogger(__name__)


def _load(session: Session, tag: str, identifier: int) -> Any:
    return session.get(resolve_model_class(tag), identifier)


def send_notification_email(
    session: Session,
    notification: Notification,
    *,
    target: Any | None = None,
    notifiable: Any | None = None,
) -> bool:
    """Email ``notification`` to its target and return whether it was sent."""

    if target is None:
        target = _load(session, notification.target_type, notification.target_id)
    if notifiable is None:
        notifiable = _load(session, notification.notifiable_type, notification.notifiable_id)
    if target is None:
        logger.warning(
            "Target %s#%s of notification %s no longer exists",
            notification.target_type,
            notification.target_id,
            notification.id,
        )
        return False

    if not target.notification_email_allowed(notifiable, notification.key):
        logger.debug("Email disabled for %s#%s", notification.target_type, target.id)
        return False

    recipient = target.mailer_to()
    if not recipient:
        logger.info(
            "No notification email configured for %s#%s",
            notification.target_type,
            target.id,
        )
        return False

    return email_delivery.send_notification_email(
        recipient, key=notification.key, parameters=notification.parameters
    )


__all__ = ["send_notification_email"]
