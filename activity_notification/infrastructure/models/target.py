"""Mixin turning a mapped model into a notification target."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session, object_session

from activity_notification.config import get_settings
from activity_notification.domain.email_rules import (
    resolve_email_address,
    resolve_email_allowed,
    validate_email_address_rule,
    validate_email_allowed_rule,
)
from activity_notification.domain.exceptions import (
    ConfigurationShapeError,
    TargetTypeMismatchError,
)


class NotificationTarget:
    """Notification accessors for models that can receive notifications.

    Instances must be attached to a SQLAlchemy session; every accessor runs
    its queries through that session. The class attributes below hold the
    per-class email routing configuration and are meant to be written once,
    through :meth:`configure_target`, while the application starts.
    """

    _notification_email = None
    _notification_email_allowed = None
    _notification_opened_limit = None

    @classmethod
    def available_as_target(cls) -> bool:
        return True

    @classmethod
    def set_target_class_defaults(cls) -> None:
        """Drop any email routing and opened limit configured on the class."""

        cls._notification_email = None
        cls._notification_email_allowed = None
        cls._notification_opened_limit = None

    @classmethod
    def configure_target(
        cls,
        *,
        email: Any = None,
        email_allowed: Any = None,
        opened_limit: int | None = None,
    ) -> None:
        """Validate and store the notification settings of the class."""

        if opened_limit is not None and (
            isinstance(opened_limit, bool)
            or not isinstance(opened_limit, int)
            or opened_limit <= 0
        ):
            raise ConfigurationShapeError("opened_limit must be a positive integer")
        cls._notification_email = validate_email_address_rule(email)
        cls._notification_email_allowed = validate_email_allowed_rule(email_allowed)
        cls._notification_opened_limit = opened_limit

    def _notification_session(self) -> Session:
        session = object_session(self)
        if session is None:
            raise RuntimeError(
                f"{type(self).__name__} must be attached to a session to access notifications"
            )
        return session

    def _indexer(self):
        from activity_notification.application.use_cases.notifications import (
            NotificationIndexer,
        )

        return NotificationIndexer(self._notification_session())

    def _attribute_loader(self):
        from activity_notification.application.use_cases.notifications import (
            NotificationAttributeLoader,
        )

        return NotificationAttributeLoader(self._notification_session())

    @property
    def notifications(self):
        from activity_notification.infrastructure.polymorphic import type_tag
        from activity_notification.infrastructure.repositories import (
            NotificationRepository,
        )

        repository = NotificationRepository(self._notification_session())
        return repository.for_target(type_tag(self), self.id)

    def unopened_notification_count(self) -> int:
        return self._indexer().unopened_count(self)

    def has_unopened_notifications(self) -> bool:
        return self._indexer().has_unopened(self)

    def notification_index(self, limit: int | None = None):
        return self._indexer().index(self, limit)

    def unopened_notification_index(self, limit: int | None = None):
        return self._indexer().unopened_index(self, limit)

    def opened_notification_index(self, limit: int | None = None):
        return self._indexer().opened_index(self, limit)

    def notification_index_with_attributes(self, limit: int | None = None):
        return self._attribute_loader().index_with_attributes(self, limit)

    def unopened_notification_index_with_attributes(self, limit: int | None = None):
        return self._attribute_loader().unopened_index_with_attributes(self, limit)

    def opened_notification_index_with_attributes(self, limit: int | None = None):
        return self._attribute_loader().opened_index_with_attributes(self, limit)

    def mailer_to(self) -> str | None:
        """Return the address notification emails should be sent to, if any."""

        return resolve_email_address(self, type(self)._notification_email)

    def notification_email_allowed(self, notifiable: Any, key: str) -> bool:
        return resolve_email_allowed(
            self,
            type(self)._notification_email_allowed,
            notifiable,
            key,
            default=get_settings().email_enabled,
        )

    def notify_to(self, notifiable: Any, *, key: str | None = None, **options: Any):
        from activity_notification.application.use_cases.notifications import notify_to

        return notify_to(self._notification_session(), self, notifiable, key=key, **options)

    def open_all_notifications(self, *, opened_at=None) -> int:
        from activity_notification.application.use_cases.notifications import open_all_of

        return open_all_of(self._notification_session(), self, opened_at=opened_at)

    def authenticates_as(self, candidate: Any) -> bool:
        """Return ``True`` when ``candidate`` is this very target.

        Override this method on targets that authenticate through a record of
        another type (an account owning several profiles, for instance).
        """

        if type(candidate) is not type(self):
            raise TargetTypeMismatchError(
                f"Different type of candidate {type(candidate).__name__} has been "
                f"passed to {type(self).__name__}. You have to override "
                f"{type(self).__name__}.authenticates_as to compare different types."
            )
        return candidate is self


__all__ = ["NotificationTarget"]
