"""Encode Python values for PostgREST bodies and query-string filters."""

from datetime import datetime
from enum import Enum
from typing import Any


def encode_value(v: Any) -> Any:
    """Make a value JSON-safe (datetimes as ISO 8601, enums as their value)."""
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, datetime):
        return v.isoformat()
    if isinstance(v, list):
        return [encode_value(x) for x in v]
    if isinstance(v, dict):
        return {k: encode_value(x) for k, x in v.items()}
    return v


def encode_record(data: dict[str, Any]) -> dict[str, Any]:
    return {k: encode_value(v) for k, v in data.items()}


def encode_filter(v: Any) -> str:
    """Equality filter operand, e.g. ``eq.active``, ``eq.true``, ``is.null``."""
    if v is None:
        return "is.null"
    if isinstance(v, bool):
        return f"eq.{'true' if v else 'false'}"
    return f"eq.{encode_value(v)}"
