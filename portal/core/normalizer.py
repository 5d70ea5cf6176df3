"""
Grouping key normalization.

Plates are written many ways ("34 ABC 123", "34abc123"), so they are
canonicalized before grouping. Policy types are kept as entered because the
raw label is what the dashboard shows.
"""
from __future__ import annotations

import re
from typing import Final, Optional


UNKNOWN_LABEL: Final[str] = "Unknown"
OTHER_LABEL: Final[str] = "Other"
NO_GROUP: Final[str] = ""

_WHITESPACE = re.compile(r"\s+")


def normalize_plate(raw: Optional[str]) -> str:
    """
    Strip every whitespace character and upper-case the plate.

    Returns NO_GROUP for None or blank input; such records are left out of
    plate-keyed aggregates.
    """
    if not isinstance(raw, str):
        return NO_GROUP
    return _WHITESPACE.sub("", raw).upper()


def label_or_default(raw: Optional[str], default: str) -> str:
    """
    Return raw unchanged unless it is missing or empty.

    Whitespace-only values are kept as their own label.
    """
    if not isinstance(raw, str) or raw == "":
        return default
    return raw


def policy_type_key(raw: Optional[str]) -> str:
    return label_or_default(raw, UNKNOWN_LABEL)


def company_key(raw: Optional[str]) -> str:
    return label_or_default(raw, UNKNOWN_LABEL)


__all__ = [
    "UNKNOWN_LABEL",
    "OTHER_LABEL",
    "NO_GROUP",
    "normalize_plate",
    "label_or_default",
    "policy_type_key",
    "company_key",
]
