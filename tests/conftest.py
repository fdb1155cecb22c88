"""Shared fixtures: an in-memory database and notification factories."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the project root (which contains the ``activity_notification`` package) is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from activity_notification.config import reset_settings_cache
from activity_notification.domain.entities import Notification
from activity_notification.infrastructure.database import Base
from activity_notification.infrastructure.models import ArticleModel, UserModel
from activity_notification.infrastructure.polymorphic import reference_of
from activity_notification.infrastructure.repositories import NotificationRepository
from activity_notification.utils import get_app_timezone, now_in_app_timezone


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default settings and default target classes."""

    for name in (
        "EMAIL_ENABLED",
        "OPENED_INDEX_LIMIT",
        "APP_TIMEZONE",
        "SENDGRID_API_KEY",
        "SENDGRID_SENDER",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    get_app_timezone.cache_clear()
    UserModel.set_target_class_defaults()
    yield
    UserModel.set_target_class_defaults()
    reset_settings_cache()
    get_app_timezone.cache_clear()


@pytest.fixture()
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def make_user(session):
    counter = {"value": 0}

    def factory(**values) -> UserModel:
        counter["value"] += 1
        values.setdefault("name", f"User {counter['value']}")
        values.setdefault("email", f"user{counter['value']}@example.com")
        user = UserModel(**values)
        session.add(user)
        session.commit()
        return user

    return factory


@pytest.fixture()
def make_article(session):
    def factory(**values) -> ArticleModel:
        values.setdefault("title", "Release notes")
        article = ArticleModel(**values)
        session.add(article)
        session.commit()
        return article

    return factory


@pytest.fixture()
def make_notification(session, make_article):
    """Insert a notification row directly, bypassing grouping and email."""

    clock = {"now": now_in_app_timezone() - timedelta(hours=1)}

    def factory(
        target,
        *,
        notifiable=None,
        notifier=None,
        group=None,
        group_owner: Notification | None = None,
        opened_at: datetime | None = None,
        created_at: datetime | None = None,
        key: str = "article.comment",
    ) -> Notification:
        notifiable = notifiable if notifiable is not None else make_article()
        clock["now"] += timedelta(seconds=1)
        target_type, target_id = reference_of(target)
        notifiable_type, notifiable_id = reference_of(notifiable)
        notifier_type, notifier_id = reference_of(notifier)
        group_type, group_id = reference_of(group)
        return NotificationRepository(session).create(
            Notification(
                id=None,
                target_type=target_type,
                target_id=target_id,
                notifiable_type=notifiable_type,
                notifiable_id=notifiable_id,
                key=key,
                group_type=group_type,
                group_id=group_id,
                group_owner_id=group_owner.id if group_owner else None,
                notifier_type=notifier_type,
                notifier_id=notifier_id,
                opened_at=opened_at,
                created_at=created_at or clock["now"],
            )
        )

    return factory
