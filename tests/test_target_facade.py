"""Tests for the target mixin: configuration, email routing and delegation."""

from __future__ import annotations

import pytest

from activity_notification.application.use_cases import notifications as use_cases
from activity_notification.config import reset_settings_cache
from activity_notification.domain.email_rules import (
    AllowedCallback,
    AllowedContextCallback,
    EmailCallback,
    EmailField,
    StaticAllowed,
    StaticEmail,
)
from activity_notification.domain.exceptions import (
    ConfigurationShapeError,
    TargetTypeMismatchError,
)
from activity_notification.infrastructure.models import UserModel


@pytest.fixture()
def user(make_user):
    return make_user(email="reader@example.com")


class TestClassConfiguration:
    def test_set_target_class_defaults(self) -> None:
        UserModel.configure_target(
            email=EmailField("email"), email_allowed=StaticAllowed(True), opened_limit=3
        )

        UserModel.set_target_class_defaults()

        assert UserModel._notification_email is None
        assert UserModel._notification_email_allowed is None
        assert UserModel._notification_opened_limit is None

    @pytest.mark.parametrize("opened_limit", [0, -1, True, "10"])
    def test_rejects_invalid_opened_limit(self, opened_limit) -> None:
        with pytest.raises(ConfigurationShapeError):
            UserModel.configure_target(opened_limit=opened_limit)

    def test_rejects_unknown_email_shape(self) -> None:
        with pytest.raises(ConfigurationShapeError):
            UserModel.configure_target(email="email")


class TestMailerTo:
    def test_without_configuration(self, user) -> None:
        assert user.mailer_to() is None

    def test_static_value(self, user) -> None:
        UserModel.configure_target(email=StaticEmail("test@example.com"))

        assert user.mailer_to() == "test@example.com"

    def test_field(self, user) -> None:
        UserModel.configure_target(email=EmailField("email"))

        assert user.mailer_to() == "reader@example.com"

    def test_callback(self, user) -> None:
        UserModel.configure_target(email=EmailCallback(lambda target: f"{target.name}@example.com"))

        assert user.mailer_to() == f"{user.name}@example.com"

    def test_invalid_rule_written_directly_fails_on_resolution(self, user) -> None:
        UserModel._notification_email = "reader@example.com"

        with pytest.raises(ConfigurationShapeError):
            user.mailer_to()


class TestNotificationEmailAllowed:
    def test_defaults_to_false(self, user, make_article) -> None:
        assert user.notification_email_allowed(make_article(), "dummy_key") is False

    def test_follows_email_enabled_setting(self, user, make_article, monkeypatch) -> None:
        monkeypatch.setenv("EMAIL_ENABLED", "true")
        reset_settings_cache()

        assert user.notification_email_allowed(make_article(), "dummy_key") is True

    def test_static_value(self, user, make_article) -> None:
        UserModel.configure_target(email_allowed=StaticAllowed(True))

        assert user.notification_email_allowed(make_article(), "dummy_key") is True

    def test_callback_with_target(self, user, make_article) -> None:
        UserModel.configure_target(email_allowed=AllowedCallback(lambda target: target.is_active))

        assert user.notification_email_allowed(make_article(), "dummy_key") is True

    def test_callback_with_context(self, user, make_article) -> None:
        article = make_article()
        UserModel.configure_target(
            email_allowed=AllowedContextCallback(
                lambda target, notifiable, key: notifiable is article and key == "article.comment"
            )
        )

        assert user.notification_email_allowed(article, "article.comment") is True
        assert user.notification_email_allowed(article, "article.like") is False


class TestAuthenticatesAs:
    def test_same_instance(self, user) -> None:
        assert user.authenticates_as(user) is True

    def test_other_instance_of_same_type(self, user, make_user) -> None:
        assert user.authenticates_as(make_user()) is False

    def test_different_type(self, user, make_article) -> None:
        with pytest.raises(
            TargetTypeMismatchError,
            match=r"Different type of candidate ArticleModel has been passed to UserModel\. "
            r"You have to override UserModel\.authenticates_as",
        ):
            user.authenticates_as(make_article())

    def test_mismatch_is_a_type_error(self, user) -> None:
        with pytest.raises(TypeError):
            user.authenticates_as(object())


class TestDelegation:
    def test_notify_to(self, user, make_article, monkeypatch) -> None:
        article = make_article()
        calls = []
        monkeypatch.setattr(
            use_cases,
            "notify_to",
            lambda session, target, notifiable, **kwargs: calls.append((target, notifiable, kwargs)),
        )

        user.notify_to(article, key="article.comment", send_email=False)

        assert calls == [(user, article, {"key": "article.comment", "send_email": False})]

    def test_open_all_notifications(self, user, monkeypatch) -> None:
        calls = []
        monkeypatch.setattr(
            use_cases,
            "open_all_of",
            lambda session, target, opened_at=None: calls.append((target, opened_at)) or 0,
        )

        assert user.open_all_notifications() == 0
        assert calls == [(user, None)]

    def test_notify_to_creates_notification(self, user, make_article) -> None:
        notification = user.notify_to(make_article(), key="article.comment")

        assert user.notifications.latest() == notification
        assert user.unopened_notification_index() == [notification]

    def test_notify_to_without_key(self, user, make_article) -> None:
        article = make_article()

        notification = user.notify_to(article)

        assert notification.key == "ArticleModel.default"
        assert notification.notifiable_id == article.id
        assert user.unopened_notification_count() == 1

    def test_open_all_notifications_opens_everything(self, user, make_notification) -> None:
        owner = make_notification(user)
        make_notification(user, group_owner=owner)
        make_notification(user)

        assert user.open_all_notifications() == 3
        assert user.has_unopened_notifications() is False
        assert user.open_all_notifications() == 0
        assert len(user.opened_notification_index()) == 2
