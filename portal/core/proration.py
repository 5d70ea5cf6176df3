"""
Premium proration helpers.

Earned premium is the share of a policy's premium that belongs to the part
of its coverage period already elapsed at a reference date.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError


DateLike = Union[date, datetime, str]

SECONDS_PER_DAY: float = 24 * 60 * 60
ZERO = Decimal("0")

_DATETIME_ADAPTER = TypeAdapter(datetime)
_DATE_ADAPTER = TypeAdapter(date)


def to_amount(value: Any) -> Decimal:
    """
    Coerce a premium/payment value into a safe non-negative Decimal.

    Missing, non-numeric, non-finite and negative values all become 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def _parse_text(text: str) -> Optional[datetime]:
    try:
        return _DATETIME_ADAPTER.validate_python(text)
    except ValidationError:
        pass
    try:
        day = _DATE_ADAPTER.validate_python(text)
    except ValidationError:
        return None
    return datetime(day.year, day.month, day.day)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Convert a date-like value to a naive datetime.

    Plain dates map to midnight. ISO-8601 strings (any fractional-second
    precision, with or without offset) are parsed with pydantic; anything
    else returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = _parse_text(text)
        return parsed.replace(tzinfo=None) if parsed is not None else None
    return None


def to_date(value: Any) -> Optional[date]:
    moment = to_datetime(value)
    return moment.date() if moment is not None else None


def days_between(start: DateLike, end: DateLike) -> Optional[int]:
    """
    Whole days from start to end, rounding partial days up.

    Returns None when either side cannot be read as a date.
    """
    start_dt = to_datetime(start)
    end_dt = to_datetime(end)
    if start_dt is None or end_dt is None:
        return None
    return math.ceil((end_dt - start_dt).total_seconds() / SECONDS_PER_DAY)


def earned_amount(
    premium: Any,
    start_date: Optional[DateLike],
    end_date: Optional[DateLike],
    as_of: Optional[DateLike] = None,
) -> Decimal:
    """
    Prorate a premium over its coverage interval.

    Args:
        premium: Written premium; invalid values count as 0.
        start_date: Coverage start.
        end_date: Coverage end.
        as_of: Reference date, defaults to today.

    Returns:
        premium * elapsed_days / total_days, where total_days is floored at 1
        and elapsed_days is clamped to [0, total_days]. A policy without a
        readable start or end date earns nothing.
    """
    amount = to_amount(premium)
    if as_of is None:
        as_of = date.today()

    span = days_between(start_date, end_date)
    elapsed = days_between(start_date, as_of)
    if span is None or elapsed is None:
        return ZERO

    total_days = max(1, span)
    elapsed_days = min(total_days, max(0, elapsed))
    return amount * Decimal(elapsed_days) / Decimal(total_days)


def earned_premium(
    premium: Any,
    start_date: Optional[DateLike],
    end_date: Optional[DateLike],
    as_of: Optional[DateLike] = None,
) -> float:
    """Earned premium as a plain number for display rows."""
    return float(earned_amount(premium, start_date, end_date, as_of))


def loss_ratio(earned: Union[Decimal, float], claims: Union[Decimal, float]) -> float:
    """Claims as a percentage of earned premium; 0 when nothing is earned."""
    if earned <= 0:
        return 0.0
    return float(claims / earned * 100)


__all__ = [
    "DateLike",
    "to_amount",
    "to_datetime",
    "to_date",
    "days_between",
    "earned_amount",
    "earned_premium",
    "loss_ratio",
]
