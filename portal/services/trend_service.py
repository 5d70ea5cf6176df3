"""
Monthly trend series for the dashboard charts.

A fixed trailing window of calendar months is seeded first, records are
folded into it, and percentages are scaled against the busiest month once
the window is complete.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Final, Iterable, List, Optional, Tuple, Union

from portal.core.proration import ZERO, to_amount, to_date
from portal.core.record_fields import field_value
from portal.core.settings import settings
from portal.schemas.analytics_schema import (
    ClaimRecord,
    PolicyRecord,
    TimeBucket,
    TrendChannel,
)


logger = logging.getLogger(__name__)

MONTH_NAMES: Final[dict[str, tuple[str, ...]]] = {
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    "tr": ("Oca", "Şub", "Mar", "Nis", "May", "Haz",
           "Tem", "Ağu", "Eyl", "Eki", "Kas", "Ara"),
}


def month_label(year: int, month: int, locale: Optional[str] = None) -> str:
    """Short month name and year, e.g. "Tem 2024". Unknown locales use English."""
    names = MONTH_NAMES.get((locale or settings.month_locale).lower(), MONTH_NAMES["en"])
    return f"{names[month - 1]} {year}"


def _shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


@dataclass
class _MonthTotals:
    year: int
    month: int
    count: int = 0
    amount: Decimal = ZERO


def build_monthly_buckets(
    records: Iterable[Any],
    date_field: str,
    amount_field: Optional[str] = None,
    months_back: Optional[int] = None,
    reference_date: Optional[date] = None,
    value: Union[TrendChannel, str] = TrendChannel.COUNT,
    locale: Optional[str] = None,
) -> List[TimeBucket]:
    """
    Distribute dated records over the trailing calendar months.

    Args:
        records: Pydantic records or dicts.
        date_field: Field holding the record's date.
        amount_field: Field added to each month's amount, if any.
        months_back: Window length including the reference month; defaults
            to the configured trend window.
        reference_date: Last month of the window, defaults to today.
        value: Accumulator that drives the percentage scale.
        locale: Month label language.

    Returns:
        Exactly months_back buckets, oldest first. Records outside the
        window or without a readable date are skipped.

    Raises:
        ValueError: If months_back is below 1 or value is unknown.
    """
    if months_back is None:
        months_back = settings.trend_months
    if months_back < 1:
        raise ValueError("months_back must be at least 1")
    try:
        channel = TrendChannel(value)
    except ValueError as exc:
        raise ValueError(f"Unknown trend channel: {value!r}") from exc

    reference = reference_date or date.today()

    window: Dict[Tuple[int, int], _MonthTotals] = {}
    for offset in range(-(months_back - 1), 1):
        year, month = _shift_month(reference.year, reference.month, offset)
        window[(year, month)] = _MonthTotals(year=year, month=month)

    dropped = 0
    for record in records:
        when = to_date(field_value(record, date_field))
        totals = window.get((when.year, when.month)) if when is not None else None
        if totals is None:
            dropped += 1
            continue
        totals.count += 1
        if amount_field:
            totals.amount += to_amount(field_value(record, amount_field))

    def _value_of(totals: _MonthTotals) -> float:
        return totals.count if channel is TrendChannel.COUNT else float(totals.amount)

    scale = max(1, max(_value_of(totals) for totals in window.values()))

    if dropped:
        logger.debug("Skipped %d records outside the %d-month window", dropped, months_back)

    return [
        TimeBucket(
            label=month_label(totals.year, totals.month, locale),
            year=totals.year,
            month=totals.month,
            count=totals.count,
            amount=float(totals.amount),
            percentage=_value_of(totals) / scale * 100,
        )
        for totals in window.values()
    ]


def premium_trend(
    policies: Iterable[PolicyRecord],
    months_back: Optional[int] = None,
    reference_date: Optional[date] = None,
    locale: Optional[str] = None,
) -> List[TimeBucket]:
    """Written premium by policy start month, scaled by amount."""
    return build_monthly_buckets(
        policies,
        "start_date",
        "premium_amount",
        months_back=months_back,
        reference_date=reference_date,
        value=TrendChannel.AMOUNT,
        locale=locale,
    )


def claims_trend(
    claims: Iterable[ClaimRecord],
    months_back: Optional[int] = None,
    reference_date: Optional[date] = None,
    locale: Optional[str] = None,
) -> List[TimeBucket]:
    """Claim rows by claim month, scaled by count."""
    return build_monthly_buckets(
        claims,
        "claim_date",
        "payment_amount",
        months_back=months_back,
        reference_date=reference_date,
        value=TrendChannel.COUNT,
        locale=locale,
    )


__all__ = [
    "MONTH_NAMES",
    "month_label",
    "build_monthly_buckets",
    "premium_trend",
    "claims_trend",
]
