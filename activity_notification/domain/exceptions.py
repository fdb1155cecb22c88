"""Errors raised by the notification target domain."""

from __future__ import annotations


class ConfigurationShapeError(ValueError):
    """A configured email rule does not match any supported shape."""


class TargetTypeMismatchError(TypeError):
    """A target was compared against an instance of another type."""


class UnknownTargetTypeError(LookupError):
    """A stored polymorphic type tag does not name any mapped model."""


class NotificationNotFoundError(ValueError):
    """The requested notification does not exist."""


__all__ = [
    "ConfigurationShapeError",
    "NotificationNotFoundError",
    "TargetTypeMismatchError",
    "UnknownTargetTypeError",
]
