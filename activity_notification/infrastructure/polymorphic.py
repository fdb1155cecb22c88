"""Resolve polymorphic ``(type, id)`` references to mapped models."""

from __future__ import annotations

from typing import Any

from activity_notification.domain.exceptions import UnknownTargetTypeError
from activity_notification.infrastructure.database import Base


def type_tag(instance_or_class: Any) -> str:
    """Return the type tag stored in polymorphic ``*_type`` columns."""

    cls = instance_or_class if isinstance(instance_or_class, type) else type(instance_or_class)
    return cls.__name__


def resolve_model_class(tag: str) -> type:
    """Return the mapped class whose type tag is ``tag``."""

    for mapper in Base.registry.mappers:
        if mapper.class_.__name__ == tag:
            return mapper.class_
    raise UnknownTargetTypeError(f"No mapped model is registered as '{tag}'")


def reference_of(instance: Any | None) -> tuple[str | None, int | None]:
    """Return the ``(type tag, id)`` pair used to store ``instance``."""

    if instance is None:
        return None, None
    if getattr(instance, "id", None) is None:
        raise ValueError(
            f"{type(instance).__name__} must be persisted before it can be referenced"
        )
    return type_tag(instance), instance.id


__all__ = ["reference_of", "resolve_model_class", "type_tag"]
