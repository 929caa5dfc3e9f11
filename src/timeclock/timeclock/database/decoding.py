"""Strict row decoding at the record store boundary.

Every row read from the store passes through these helpers; anything that
does not match the expected column types raises DecodeError instead of
leaking an untyped record into the services.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Type, TypeVar

from ..core.exceptions import DecodeError

E = TypeVar("E", bound=Enum)


def _column(row: Mapping[str, Any], name: str) -> Any:
    if not isinstance(row, Mapping):
        raise DecodeError(f"Expected a mapping row, got {type(row).__name__}")
    if name not in row:
        raise DecodeError(f"Missing column {name!r}")
    value = row[name]
    if value is None:
        raise DecodeError(f"Column {name!r} is NULL")
    return value


def require_str(row: Mapping[str, Any], name: str, *, allow_empty: bool = False) -> str:
    value = _column(row, name)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if not isinstance(value, str):
        raise DecodeError(f"Column {name!r} must be text, got {type(value).__name__}")
    if not allow_empty and not value:
        raise DecodeError(f"Column {name!r} is empty")
    return value


def require_int(row: Mapping[str, Any], name: str) -> int:
    value = _column(row, name)
    # bool is an int subclass; a flag in a timestamp column is a schema error.
    if isinstance(value, bool):
        raise DecodeError(f"Column {name!r} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise DecodeError(f"Column {name!r} must be an integer, got {value!r}")


def require_float(row: Mapping[str, Any], name: str) -> float:
    value = _column(row, name)
    if isinstance(value, bool):
        raise DecodeError(f"Column {name!r} must be numeric")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise DecodeError(f"Column {name!r} must be numeric, got {value!r}") from None


def require_enum(row: Mapping[str, Any], name: str, enum_type: Type[E]) -> E:
    value = require_str(row, name)
    try:
        return enum_type(value)
    except ValueError:
        raise DecodeError(f"Column {name!r} has unknown {enum_type.__name__} {value!r}") from None
