"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String

from activity_notification.infrastructure.database import Base
from activity_notification.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation of a notification sent to a target."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_target", "target_type", "target_id", "opened_at"),
        Index("ix_notification_notifiable", "notifiable_type", "notifiable_id"),
        Index("ix_notification_group", "group_type", "group_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    target_type = Column(String(100), nullable=False)
    target_id = Column(Integer, nullable=False)
    notifiable_type = Column(String(100), nullable=False)
    notifiable_id = Column(Integer, nullable=False)
    key = Column(String(120), nullable=False)
    group_type = Column(String(100), nullable=True)
    group_id = Column(Integer, nullable=True)
    group_owner_id = Column(
        Integer, ForeignKey("notification.id"), nullable=True, index=True
    )
    notifier_type = Column(String(100), nullable=True)
    notifier_id = Column(Integer, nullable=True)
    parameters = Column(JSON, nullable=False, default=dict)
    opened_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationModel"]
