"""Rules describing how a target resolves its notification email routing.

Each target class stores at most one address rule and one allowed rule. The
rules are plain frozen dataclasses so the shape of the configuration is chosen
explicitly when the class is prepared, instead of being guessed from the
arity of a callable when an email is about to be delivered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from .exceptions import ConfigurationShapeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaticEmail:
    """Always deliver to ``value``."""

    value: str


@dataclass(frozen=True)
class EmailField:
    """Read the address from the target attribute ``name``."""

    name: str


@dataclass(frozen=True)
class EmailMethod:
    """Call the zero-argument target method ``name`` to obtain the address."""

    name: str


@dataclass(frozen=True)
class EmailCallback:
    """Call ``func(target)`` to obtain the address."""

    func: Callable[[Any], str | None]


EmailAddressRule = Union[StaticEmail, EmailField, EmailMethod, EmailCallback]


@dataclass(frozen=True)
class StaticAllowed:
    """Always answer ``value``."""

    value: bool


@dataclass(frozen=True)
class AllowedMethod:
    """Call the zero-argument target method ``name``."""

    name: str


@dataclass(frozen=True)
class AllowedMethodWithContext:
    """Call the target method ``name`` with ``(notifiable, key)``."""

    name: str


@dataclass(frozen=True)
class AllowedCallback:
    """Call ``func(target)``."""

    func: Callable[[Any], bool]


@dataclass(frozen=True)
class AllowedContextCallback:
    """Call ``func(target, notifiable, key)``."""

    func: Callable[[Any, Any, str], bool]


EmailAllowedRule = Union[
    StaticAllowed,
    AllowedMethod,
    AllowedMethodWithContext,
    AllowedCallback,
    AllowedContextCallback,
]

_ADDRESS_RULE_TYPES = (StaticEmail, EmailField, EmailMethod, EmailCallback)
_ALLOWED_RULE_TYPES = (
    StaticAllowed,
    AllowedMethod,
    AllowedMethodWithContext,
    AllowedCallback,
    AllowedContextCallback,
)


def validate_email_address_rule(rule: object) -> EmailAddressRule | None:
    """Return ``rule`` unchanged or raise when it is not a known address rule."""

    if rule is None or isinstance(rule, _ADDRESS_RULE_TYPES):
        _validate_rule_payload(rule)
        return rule
    raise ConfigurationShapeError(
        f"Unsupported notification email rule {rule!r}; expected one of "
        "StaticEmail, EmailField, EmailMethod or EmailCallback"
    )


def validate_email_allowed_rule(rule: object) -> EmailAllowedRule | None:
    """Return ``rule`` unchanged or raise when it is not a known allowed rule."""

    if rule is None or isinstance(rule, _ALLOWED_RULE_TYPES):
        _validate_rule_payload(rule)
        return rule
    raise ConfigurationShapeError(
        f"Unsupported notification email allowed rule {rule!r}; expected one of "
        "StaticAllowed, AllowedMethod, AllowedMethodWithContext, "
        "AllowedCallback or AllowedContextCallback"
    )


def resolve_email_address(target: Any, rule: object) -> str | None:
    """Return the email address configured for ``target`` by ``rule``."""

    if rule is None:
        return None
    if isinstance(rule, StaticEmail):
        return rule.value
    if isinstance(rule, EmailField):
        return _read_attribute(target, rule.name)
    if isinstance(rule, EmailMethod):
        return _lookup_method(target, rule.name)()
    if isinstance(rule, EmailCallback):
        return rule.func(target)
    raise ConfigurationShapeError(
        f"Cannot resolve notification email for {type(target).__name__} "
        f"with rule {rule!r}"
    )


def resolve_email_allowed(
    target: Any,
    rule: object,
    notifiable: Any,
    key: str,
    *,
    default: bool = False,
) -> bool:
    """Return whether ``target`` accepts emails about ``notifiable`` for ``key``."""

    if rule is None:
        return default
    if isinstance(rule, StaticAllowed):
        return rule.value
    if isinstance(rule, AllowedMethod):
        return _lookup_method(target, rule.name)()
    if isinstance(rule, AllowedMethodWithContext):
        return _lookup_method(target, rule.name)(notifiable, key)
    if isinstance(rule, AllowedCallback):
        return rule.func(target)
    if isinstance(rule, AllowedContextCallback):
        return rule.func(target, notifiable, key)
    raise ConfigurationShapeError(
        f"Cannot resolve notification email permission for "
        f"{type(target).__name__} with rule {rule!r}"
    )


def _validate_rule_payload(rule: object) -> None:
    if isinstance(rule, StaticEmail) and not isinstance(rule.value, str):
        raise ConfigurationShapeError("StaticEmail value must be a string")
    if isinstance(rule, StaticAllowed) and not isinstance(rule.value, bool):
        raise ConfigurationShapeError("StaticAllowed value must be a boolean")
    if isinstance(rule, (EmailField, EmailMethod, AllowedMethod, AllowedMethodWithContext)):
        if not isinstance(rule.name, str) or not rule.name:
            raise ConfigurationShapeError(
                f"{type(rule).__name__} requires a non-empty attribute name"
            )
    if isinstance(rule, (EmailCallback, AllowedCallback, AllowedContextCallback)):
        if not callable(rule.func):
            raise ConfigurationShapeError(f"{type(rule).__name__} requires a callable")


def _read_attribute(target: Any, name: str) -> Any:
    try:
        return getattr(target, name)
    except AttributeError as exc:
        raise ConfigurationShapeError(
            f"{type(target).__name__} has no attribute '{name}'"
        ) from exc


def _lookup_method(target: Any, name: str) -> Callable[..., Any]:
    method = _read_attribute(target, name)
    if not callable(method):
        raise ConfigurationShapeError(
            f"{type(target).__name__}.{name} is not callable"
        )
    logger.debug("Resolving email routing via %s.%s", type(target).__name__, name)
    return method


__all__ = [
    "AllowedCallback",
    "AllowedContextCallback",
    "AllowedMethod",
    "AllowedMethodWithContext",
    "EmailAddressRule",
    "EmailAllowedRule",
    "EmailCallback",
    "EmailField",
    "EmailMethod",
    "StaticAllowed",
    "StaticEmail",
    "resolve_email_address",
    "resolve_email_allowed",
    "validate_email_address_rule",
    "validate_email_allowed_rule",
]
