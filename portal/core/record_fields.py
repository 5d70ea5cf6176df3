"""
Uniform field access for raw records.

List views and trend charts work on pydantic records as well as plain dicts
coming straight from the record store.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


_MISSING = object()


def field_value(record: Any, name: str) -> Any:
    """Return a record's field, or None when it does not have one."""
    if isinstance(record, Mapping):
        return record.get(name)
    value = getattr(record, name, _MISSING)
    return None if value is _MISSING else value


def field_text(record: Any, name: str) -> str:
    """
    Return a field as text for matching.

    Enum members contribute their value; missing fields become "".
    """
    value = field_value(record, name)
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


__all__ = ["field_value", "field_text"]
