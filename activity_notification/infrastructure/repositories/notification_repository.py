"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from activity_notification.domain.entities import Notification
from activity_notification.infrastructure.models import NotificationModel
from activity_notification.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

logger = logging.getLogger(__name__)


class TargetNotifications:
    """Every notification of one target, regardless of state or grouping."""

    def __init__(self, repository: "NotificationRepository", target_type: str, target_id: int) -> None:
        self._repository = repository
        self.target_type = target_type
        self.target_id = target_id

    def _query(self) -> Query:
        return self._repository.session.query(NotificationModel).filter(
            NotificationModel.target_type == self.target_type,
            NotificationModel.target_id == self.target_id,
        )

    def count(self) -> int:
        return self._query().count()

    def all(self) -> list[Notification]:
        query = self._query().order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        return [self._repository._to_entity(model) for model in query.all()]

    def earliest(self) -> Notification | None:
        """Return the first notification created for the target."""

        model = (
            self._query()
            .order_by(NotificationModel.created_at.asc(), NotificationModel.id.asc())
            .first()
        )
        return self._repository._to_entity(model) if model else None

    def latest(self) -> Notification | None:
        """Return the most recently created notification for the target."""

        model = (
            self._query()
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .first()
        )
        return self._repository._to_entity(model) if model else None

    def __len__(self) -> int:
        return self.count()

    def __iter__(self):
        return iter(self.all())


class NotificationRepository:
    """Provide storage operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def for_target(self, target_type: str, target_id: int) -> TargetNotifications:
        return TargetNotifications(self, target_type, target_id)

    def _owner_level_query(
        self, target_type: str, target_id: int, *, opened: bool
    ) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.target_type == target_type,
            NotificationModel.target_id == target_id,
            NotificationModel.group_owner_id.is_(None),
        )
        if opened:
            return query.filter(NotificationModel.opened_at.is_not(None))
        return query.filter(NotificationModel.opened_at.is_(None))

    def list_owner_level(
        self,
        target_type: str,
        target_id: int,
        *,
        opened: bool,
        limit: int | None = None,
    ) -> Sequence[Notification]:
        """Return owner-level notifications of a target, most recent first."""

        query = self._owner_level_query(target_type, target_id, opened=opened)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_owner_level(self, target_type: str, target_id: int, *, opened: bool) -> int:
        query = self._owner_level_query(target_type, target_id, opened=opened)
        return query.with_entities(func.count(NotificationModel.id)).scalar() or 0

    def find_unopened_group_owner(
        self,
        *,
        target_type: str,
        target_id: int,
        key: str,
        group_type: str,
        group_id: int,
    ) -> Notification | None:
        """Return the latest unopened owner-level notification for the same group."""

        model = (
            self._owner_level_query(target_type, target_id, opened=False)
            .filter(
                NotificationModel.key == key,
                NotificationModel.group_type == group_type,
                NotificationModel.group_id == group_id,
            )
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .first()
        )
        return self._to_entity(model) if model else None

    def exists_member_of(self, owner_ids: Iterable[int]) -> bool:
        ids = [owner_id for owner_id in owner_ids if owner_id is not None]
        if not ids:
            return False
        query = self.session.query(NotificationModel.id).filter(
            NotificationModel.group_owner_id.in_(ids)
        )
        return self.session.query(query.exists()).scalar()

    def list_members_of(self, owner_ids: Iterable[int]) -> dict[int, list[Notification]]:
        """Return group members indexed by their owner id, most recent first."""

        ids = [owner_id for owner_id in owner_ids if owner_id is not None]
        members: dict[int, list[Notification]] = defaultdict(list)
        if not ids:
            return members
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.group_owner_id.in_(ids))
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        for model in query.all():
            members[model.group_owner_id].append(self._to_entity(model))
        return members

    def unopened_member_ids(self, owner_id: int) -> list[int]:
        rows = (
            self.session.query(NotificationModel.id)
            .filter(
                NotificationModel.group_owner_id == owner_id,
                NotificationModel.opened_at.is_(None),
            )
            .all()
        )
        return [row.id for row in rows]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification, include_creation_fields=True)
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_opened(
        self, notification_ids: Iterable[int], *, opened_at: datetime | None = None
    ) -> int:
        """Set ``opened_at`` on the given notifications that are still unopened.

        Returns the number of rows that changed; already opened notifications
        keep their original timestamp.
        """

        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        return self._open_matching(NotificationModel.id.in_(ids), opened_at=opened_at)

    def mark_opened_for_target(
        self, target_type: str, target_id: int, *, opened_at: datetime | None = None
    ) -> int:
        """Open every unopened notification of one target with a single UPDATE."""

        return self._open_matching(
            NotificationModel.target_type == target_type,
            NotificationModel.target_id == target_id,
            opened_at=opened_at,
        )

    def _open_matching(self, *criteria, opened_at: datetime | None) -> int:
        timestamp = ensure_app_naive_datetime(opened_at or now_in_app_timezone())
        updated = (
            self.session.query(NotificationModel)
            .filter(*criteria, NotificationModel.opened_at.is_(None))
            .update(
                {
                    NotificationModel.opened_at: timestamp,
                    NotificationModel.updated_at: timestamp,
                },
                synchronize_session=False,
            )
        )
        self._commit()
        self.session.expire_all()
        logger.info("Marked %s notification(s) as opened", updated)
        return updated

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to persist notification changes")
            self.session.rollback()
            raise

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            created_at = ensure_app_naive_datetime(
                notification.created_at
            ) or ensure_app_naive_datetime(now_in_app_timezone())
            model.created_at = created_at
            model.updated_at = created_at
        model.target_type = notification.target_type
        model.target_id = notification.target_id
        model.notifiable_type = notification.notifiable_type
        model.notifiable_id = notification.notifiable_id
        model.key = notification.key
        model.group_type = notification.group_type
        model.group_id = notification.group_id
        model.group_owner_id = notification.group_owner_id
        model.notifier_type = notification.notifier_type
        model.notifier_id = notification.notifier_id
        model.parameters = notification.parameters or {}
        model.opened_at = ensure_app_naive_datetime(notification.opened_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            target_type=model.target_type,
            target_id=model.target_id,
            notifiable_type=model.notifiable_type,
            notifiable_id=model.notifiable_id,
            key=model.key,
            group_type=model.group_type,
            group_id=model.group_id,
            group_owner_id=model.group_owner_id,
            notifier_type=model.notifier_type,
            notifier_id=model.notifier_id,
            parameters=model.parameters or {},
            opened_at=ensure_app_timezone(model.opened_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository", "TargetNotifications"]
