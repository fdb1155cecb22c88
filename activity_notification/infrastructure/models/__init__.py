"""ORM models used by the application infrastructure."""

from .article import ArticleModel
from .notification import NotificationModel
from .target import NotificationTarget
from .user import UserModel

__all__ = [
    "ArticleModel",
    "NotificationModel",
    "NotificationTarget",
    "UserModel",
]
