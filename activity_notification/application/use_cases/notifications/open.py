"""Mark notifications as opened."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from activity_notification.domain.exceptions import NotificationNotFoundError
from activity_notification.infrastructure.polymorphic import type_tag
from activity_notification.infrastructure.repositories import NotificationRepository


def open_all_of(session: Session, target: Any, *, opened_at: datetime | None = None) -> int:
    """Open every unopened notification of ``target`` and return how many changed."""

    return NotificationRepository(session).mark_opened_for_target(
        type_tag(target), target.id, opened_at=opened_at
    )


def open_notification(
    session: Session,
    notification_id: int,
    *,
    opened_at: datetime | None = None,
    with_members: bool = True,
) -> int:
    """Open a single notification, along with its group members by default."""

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(f"Notification with id {notification_id} not found")

    ids = [notification.id] if notification.unopened else []
    if with_members:
        ids.extend(repository.unopened_member_ids(notification.id))
    return repository.mark_opened(ids, opened_at=opened_at)


__all__ = ["open_all_of", "open_notification"]
