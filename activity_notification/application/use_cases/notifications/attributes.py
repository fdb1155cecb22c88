"""Notification indexes with their related objects loaded up front."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from activity_notification.domain.entities import Notification
from activity_notification.infrastructure.polymorphic import resolve_model_class

from .index import NotificationIndexer

logger = logging.getLogger(__name__)

_ALWAYS_LOADED = ("target", "notifiable", "notifier")


class NotificationAttributeLoader:
    """Attach targets, notifiables, notifiers and groups to index results.

    Each polymorphic relation is resolved with one ``IN`` query per referenced
    model class, so rendering an index never triggers per-record lookups. The
    group relation is only queried when a record of the batch owns at least one
    group member.
    """

    def __init__(self, session: Session, indexer: NotificationIndexer | None = None) -> None:
        self.session = session
        self.indexer = indexer or NotificationIndexer(session)
        self.repository = self.indexer.repository

    def unopened_index_with_attributes(
        self, target: Any, limit: int | None = None
    ) -> list[Notification]:
        return self.attach(self.indexer.unopened_index(target, limit))

    def opened_index_with_attributes(
        self, target: Any, limit: int | None = None
    ) -> list[Notification]:
        return self.attach(self.indexer.opened_index(target, limit))

    def index_with_attributes(self, target: Any, limit: int | None = None) -> list[Notification]:
        if self.indexer.has_unopened(target):
            return self.unopened_index_with_attributes(target, limit)
        return self.opened_index_with_attributes(target, limit)

    def attach(self, notifications: Sequence[Notification]) -> list[Notification]:
        """Populate the related objects of ``notifications`` in place."""

        notifications = list(notifications)
        if not notifications:
            return notifications

        for relation in _ALWAYS_LOADED:
            self._load_relation(notifications, relation)

        if self.repository.exists_member_of(n.id for n in notifications):
            self._load_groups(notifications)
        else:
            logger.debug("No group members among %s notification(s)", len(notifications))
        return notifications

    def _load_groups(self, notifications: list[Notification]) -> None:
        self._load_relation(notifications, "group")
        members = self.repository.list_members_of(n.id for n in notifications)
        for notification in notifications:
            notification.group_members = members.get(notification.id, [])

    def _load_relation(self, notifications: list[Notification], relation: str) -> None:
        wanted: dict[str, set[int]] = defaultdict(set)
        for notification in notifications:
            reference = _reference(notification, relation)
            if reference is not None:
                wanted[reference[0]].add(reference[1])

        loaded: dict[tuple[str, int], Any] = {}
        for tag, ids in wanted.items():
            model_class = resolve_model_class(tag)
            rows = (
                self.session.query(model_class)
                .filter(model_class.id.in_(sorted(ids)))
                .all()
            )
            loaded.update({(tag, row.id): row for row in rows})
        logger.debug("Loaded %s %s record(s)", len(loaded), relation)

        for notification in notifications:
            reference = _reference(notification, relation)
            setattr(notification, relation, loaded.get(reference) if reference else None)


def _reference(notification: Notification, relation: str) -> tuple[str, int] | None:
    tag = getattr(notification, f"{relation}_type")
    identifier = getattr(notification, f"{relation}_id")
    if tag is None or identifier is None:
        return None
    return tag, identifier


__all__ = ["NotificationAttributeLoader"]
