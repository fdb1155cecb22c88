"""Unopened and opened notification indexes of a target."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from activity_notification.config import get_settings
from activity_notification.domain.entities import Notification
from activity_notification.infrastructure.polymorphic import type_tag
from activity_notification.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def opened_limit_for(target: Any) -> int:
    """Return the number of opened notifications shown when no limit is given."""

    configured = getattr(type(target), "_notification_opened_limit", None)
    if configured is not None:
        return configured
    return get_settings().opened_index_limit


class NotificationIndexer:
    """Build the owner-level notification indexes of a target.

    Only notifications without a group owner are listed; group members are
    reachable through their owner. Results are ordered from the most recent
    to the oldest, ties broken by id.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.repository = NotificationRepository(session)

    def unopened_index(self, target: Any, limit: int | None = None) -> list[Notification]:
        return list(
            self.repository.list_owner_level(
                type_tag(target), target.id, opened=False, limit=limit
            )
        )

    def opened_index(self, target: Any, limit: int | None = None) -> list[Notification]:
        if limit is None:
            limit = opened_limit_for(target)
        return list(
            self.repository.list_owner_level(
                type_tag(target), target.id, opened=True, limit=limit
            )
        )

    def index(self, target: Any, limit: int | None = None) -> list[Notification]:
        """Return the unopened index when there is one, the opened index otherwise."""

        if self.has_unopened(target):
            logger.debug("Serving unopened index for %s#%s", type_tag(target), target.id)
            return self.unopened_index(target, limit)
        logger.debug("Serving opened index for %s#%s", type_tag(target), target.id)
        return self.opened_index(target, limit)

    def unopened_count(self, target: Any) -> int:
        return self.repository.count_owner_level(type_tag(target), target.id, opened=False)

    def has_unopened(self, target: Any) -> bool:
        return self.unopened_count(target) > 0


__all__ = ["NotificationIndexer", "opened_limit_for"]
