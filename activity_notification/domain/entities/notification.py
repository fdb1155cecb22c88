"""Domain entity representing a notification delivered to a target."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Notification:
    """One notification event addressed to a polymorphic target.

    Related objects (``target``, ``notifiable``, ``notifier``, ``group`` and
    ``group_members``) are only populated by the attribute loader and are
    ignored when comparing notifications.
    """

    id: int | None
    target_type: str
    target_id: int
    notifiable_type: str
    notifiable_id: int
    key: str
    group_type: str | None = None
    group_id: int | None = None
    group_owner_id: int | None = None
    notifier_type: str | None = None
    notifier_id: int | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    opened_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    target: Any = field(default=None, compare=False, repr=False)
    notifiable: Any = field(default=None, compare=False, repr=False)
    notifier: Any = field(default=None, compare=False, repr=False)
    group: Any = field(default=None, compare=False, repr=False)
    group_members: list["Notification"] | None = field(
        default=None, compare=False, repr=False
    )

    @property
    def opened(self) -> bool:
        return self.opened_at is not None

    @property
    def unopened(self) -> bool:
        return self.opened_at is None

    @property
    def is_group_member(self) -> bool:
        """Return ``True`` when the notification is grouped under another one."""

        return self.group_owner_id is not None

    @property
    def is_owner_level(self) -> bool:
        return self.group_owner_id is None

    @property
    def group_member_count(self) -> int:
        """Number of attached group members, zero when they were not loaded."""

        return len(self.group_members or [])


__all__ = ["Notification"]
