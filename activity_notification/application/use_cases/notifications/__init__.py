"""Use cases around the notifications of a target."""

from .attributes import NotificationAttributeLoader
from .email import send_notification_email
from .index import NotificationIndexer, opened_limit_for
from .notify import default_notification_key, notify_to
from .open import open_all_of, open_notification

__all__ = [
    "NotificationAttributeLoader",
    "NotificationIndexer",
    "default_notification_key",
    "notify_to",
    "open_all_of",
    "open_notification",
    "opened_limit_for",
    "send_notification_email",
]
