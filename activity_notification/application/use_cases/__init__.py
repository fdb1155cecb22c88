"""Aggregate application use cases."""

from .notifications import (
    NotificationAttributeLoader,
    NotificationIndexer,
    notify_to,
    open_all_of,
    open_notification,
    send_notification_email,
)

__all__ = [
    "NotificationAttributeLoader",
    "NotificationIndexer",
    "notify_to",
    "open_all_of",
    "open_notification",
    "send_notification_email",
]
