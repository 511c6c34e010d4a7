"""Typed environment variable lookup.

Usage:
    from rocmwatch.utils.env import get_env

    timeout = get_env("ROCMWATCH_TIMEOUT", default=10.0, as_type=float)
    keywords = get_env("ROCMWATCH_IGPU_KEYWORDS", default=[], as_type=list)
"""

from __future__ import annotations

import os
from typing import Any, TypeVar, cast, overload

T = TypeVar("T")


class EnvVarError(Exception):
    """Base exception for environment variable errors."""

    pass


class EnvVarTypeError(EnvVarError):
    """Raised when an environment variable cannot be converted to the expected type."""

    def __init__(self, name: str, value: str, expected_type: type) -> None:
        self.name = name
        self.value = value
        self.expected_type = expected_type
        super().__init__(f"Cannot convert {name}='{value}' to {expected_type.__name__}")


def _coerce_type(name: str, value: str, as_type: type) -> Any:
    """Convert a raw environment string to ``as_type``.

    Raises:
        EnvVarTypeError: If conversion fails.
    """
    try:
        if as_type is float:
            return float(value)

        # list[str] is read as a comma-separated string
        origin = getattr(as_type, "__origin__", None)
        if as_type is list or origin is list:
            return [item.strip() for item in value.split(",") if item.strip()]

        return as_type(value)

    except (ValueError, TypeError) as e:
        raise EnvVarTypeError(name, value, as_type) from e


@overload
def get_env(name: str, *, default: T, as_type: type[T]) -> T:
    ...


@overload
def get_env(name: str, *, default: T) -> T:
    ...


@overload
def get_env(name: str, *, as_type: type[T]) -> T | None:
    ...


@overload
def get_env(name: str) -> str | None:
    ...


def get_env(
    name: str,
    *,
    default: T | None = None,
    as_type: type[T] | None = None,
) -> T | str | None:
    """Get an environment variable with optional type coercion.

    Unset and empty variables both resolve to ``default``.

    Args:
        name: Environment variable name.
        default: Value returned when the variable is unset or empty.
        as_type: float, str or list (comma-separated).

    Raises:
        EnvVarTypeError: If as_type is given and conversion fails.

    Examples:
        >>> get_env("ROCMWATCH_INTERVAL", default=1.0, as_type=float)
        1.0
    """
    value = os.environ.get(name)
    if value is None or value == "":
        return default

    if as_type is not None:
        return cast(T, _coerce_type(name, value, as_type))

    return value

