"""
Display metadata for categorical values shown on the dashboard.

Each table lists every known value plus a single fallback entry, so callers
never branch on raw status strings themselves.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Mapping, Optional


FALLBACK: Final[str] = "__fallback__"


@dataclass(frozen=True)
class CategoryInfo:
    """Label and visual tone for one categorical value."""

    value: str
    label: str
    tone: str


CLAIM_STATUSES: Final[dict[str, dict[str, str]]] = {
    "open": {"label": "Open", "tone": "blue"},
    "pending": {"label": "Pending", "tone": "yellow"},
    "approved": {"label": "Approved", "tone": "teal"},
    "paid": {"label": "Paid", "tone": "green"},
    "closed": {"label": "Paid", "tone": "green"},
    "rejected": {"label": "Rejected", "tone": "red"},
    FALLBACK: {"label": "", "tone": "gray"},
}

POLICY_STATUSES: Final[dict[str, dict[str, str]]] = {
    "active": {"label": "Active", "tone": "green"},
    "expired": {"label": "Expired", "tone": "gray"},
    "cancelled": {"label": "Cancelled", "tone": "red"},
    FALLBACK: {"label": "", "tone": "gray"},
}

ANNOUNCEMENT_PRIORITIES: Final[dict[str, dict[str, str]]] = {
    "high": {"label": "High", "tone": "red"},
    "medium": {"label": "Medium", "tone": "yellow"},
    "low": {"label": "Low", "tone": "blue"},
    FALLBACK: {"label": "Info", "tone": "blue"},
}

# Upper bounds (exclusive) in percent, checked in order.
LOSS_RATIO_BANDS: Final[tuple[tuple[float, str], ...]] = (
    (50.0, "excellent"),
    (75.0, "good"),
)
LOSS_RATIO_HIGH: Final[str] = "high"
LOSS_RATIO_NONE: Final[str] = "none"

# Upper bounds (inclusive) in days until expiry.
EXPIRY_URGENCY: Final[tuple[tuple[int, str], ...]] = (
    (7, "critical"),
    (15, "warning"),
)
EXPIRY_NOTICE: Final[str] = "notice"


def _describe(table: Mapping[str, Mapping[str, str]], value: Optional[str]) -> CategoryInfo:
    raw = value if isinstance(value, str) else ""
    entry = table.get(raw.strip().lower())
    if entry is None:
        fallback = table[FALLBACK]
        return CategoryInfo(value=raw, label=fallback["label"] or raw, tone=fallback["tone"])
    return CategoryInfo(value=raw, label=entry["label"], tone=entry["tone"])


def describe_claim_status(value: Optional[str]) -> CategoryInfo:
    return _describe(CLAIM_STATUSES, value)


def describe_policy_status(value: Optional[str]) -> CategoryInfo:
    return _describe(POLICY_STATUSES, value)


def describe_priority(value: Optional[str]) -> CategoryInfo:
    return _describe(ANNOUNCEMENT_PRIORITIES, value)


def loss_ratio_band(ratio: float, earned: float) -> str:
    """
    Classify a loss ratio for the headline card.

    A portfolio with nothing earned yet has no meaningful ratio.
    """
    if earned <= 0:
        return LOSS_RATIO_NONE
    for upper, band in LOSS_RATIO_BANDS:
        if ratio < upper:
            return band
    return LOSS_RATIO_HIGH


def expiry_urgency(days_left: int) -> str:
    for upper, level in EXPIRY_URGENCY:
        if days_left <= upper:
            return level
    return EXPIRY_NOTICE


__all__ = [
    "CategoryInfo",
    "CLAIM_STATUSES",
    "POLICY_STATUSES",
    "ANNOUNCEMENT_PRIORITIES",
    "describe_claim_status",
    "describe_policy_status",
    "describe_priority",
    "loss_ratio_band",
    "expiry_urgency",
]
