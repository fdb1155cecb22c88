"""Create notifications for a target."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from activity_notification.domain.entities import Notification
from activity_notification.infrastructure.polymorphic import reference_of, type_tag
from activity_notification.infrastructure.repositories import NotificationRepository
from activity_notification.utils import now_in_app_timezone

from .email import send_notification_email

logger = logging.getLogger(__name__)


def default_notification_key(notifiable: Any) -> str:
    """Return the key used when a notification is created without one."""

    return getattr(notifiable, "default_notification_key", None) or f"{type_tag(notifiable)}.default"


def notify_to(
    session: Session,
    target: Any,
    notifiable: Any,
    *,
    key: str | None = None,
    notifier: Any | None = None,
    group: Any | None = None,
    parameters: dict[str, Any] | None = None,
    send_email: bool = True,
) -> Notification:
    """Persist a notification about ``notifiable`` for ``target``.

    When ``group`` is given and the target still has an unopened owner-level
    notification with the same key and group, the new notification joins that
    group as a member instead of showing up on its own. Without a ``key`` the
    notifiable's ``default_notification_key`` is used, or ``<type>.default``.
    """

    if key is None:
        key = default_notification_key(notifiable)
    if not key:
        raise ValueError("Notification key is required")

    target_type, target_id = reference_of(target)
    notifiable_type, notifiable_id = reference_of(notifiable)
    notifier_type, notifier_id = reference_of(notifier)
    group_type, group_id = reference_of(group)

    repository = NotificationRepository(session)
    group_owner_id = None
    if group is not None:
        owner = repository.find_unopened_group_owner(
            target_type=target_type,
            target_id=target_id,
            key=key,
            group_type=group_type,
            group_id=group_id,
        )
        group_owner_id = owner.id if owner else None

    saved = repository.create(
        Notification(
            id=None,
            target_type=target_type,
            target_id=target_id,
            notifiable_type=notifiable_type,
            notifiable_id=notifiable_id,
            key=key,
            group_type=group_type,
            group_id=group_id,
            group_owner_id=group_owner_id,
            notifier_type=notifier_type,
            notifier_id=notifier_id,
            parameters=parameters or {},
            created_at=now_in_app_timezone(),
        )
    )
    logger.info(
        "Notified %s#%s about %s#%s (key=%s, group_owner=%s)",
        target_type,
        target_id,
        notifiable_type,
        notifiable_id,
        key,
        group_owner_id,
    )

    if send_email:
        send_notification_email(session, saved, target=target, notifiable=notifiable)
    return saved


__all__ = ["default_notification_key", "notify_to"]
