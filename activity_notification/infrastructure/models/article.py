"""SQLAlchemy model for articles, the subject of most notifications."""

from sqlalchemy import Column, DateTime, Integer, String, func

from activity_notification.infrastructure.database import Base


class ArticleModel(Base):
    """Database representation of an article users get notified about."""

    __tablename__ = "article"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["ArticleModel"]
