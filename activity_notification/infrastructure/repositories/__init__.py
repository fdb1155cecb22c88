"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository, TargetNotifications

__all__ = ["NotificationRepository", "TargetNotifications"]
