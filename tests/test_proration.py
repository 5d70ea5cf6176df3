from datetime import date, datetime
from decimal import Decimal

import pytest

from portal.core.proration import (
    days_between,
    earned_amount,
    earned_premium,
    loss_ratio,
    to_amount,
    to_date,
    to_datetime,
)


START = date(2024, 1, 1)
END = date(2025, 1, 1)


def test_earned_premium_midway():
    """183 of 366 days elapsed earns exactly half the premium."""
    assert earned_premium(12000, START, END, date(2024, 7, 2)) == pytest.approx(6000.0)


def test_earned_premium_fully_earned_at_expiry():
    assert earned_premium(12000, START, END, END) == 12000
    assert earned_premium(999.99, date(2024, 3, 1), date(2024, 3, 31), date(2024, 3, 31)) == 999.99


def test_earned_premium_after_expiry_is_capped():
    assert earned_premium(12000, START, END, date(2026, 5, 1)) == 12000


@pytest.mark.parametrize("as_of", [START, date(2023, 12, 31), date(2020, 1, 1)])
def test_earned_premium_zero_at_or_before_start(as_of):
    assert earned_premium(12000, START, END, as_of) == 0


@pytest.mark.parametrize(
    "as_of",
    [date(2024, 1, 2), date(2024, 2, 29), date(2024, 6, 30), date(2024, 12, 31), date(2025, 6, 1)],
)
def test_earned_premium_never_exceeds_premium(as_of):
    earned = earned_premium(12000, START, END, as_of)
    assert 0 <= earned <= 12000


def test_inverted_interval_uses_one_day_floor():
    """End on or before start counts as a one-day policy."""
    assert earned_premium(800, date(2024, 5, 1), date(2024, 5, 1), date(2024, 6, 1)) == 800
    assert earned_premium(800, date(2024, 5, 1), date(2024, 4, 1), date(2024, 6, 1)) == 800
    assert earned_premium(800, date(2024, 5, 1), date(2024, 4, 1), date(2024, 4, 15)) == 0


@pytest.mark.parametrize("premium", [None, "abc", -50, float("nan"), float("inf"), True])
def test_invalid_premium_earns_nothing(premium):
    assert earned_premium(premium, START, END, date(2024, 7, 2)) == 0


def test_numeric_string_premium_is_accepted():
    assert earned_premium("1200", START, END, END) == 1200


def test_missing_dates_earn_nothing():
    assert earned_premium(1000, None, END, date(2024, 7, 2)) == 0
    assert earned_premium(1000, START, None, date(2024, 7, 2)) == 0


def test_partial_days_round_up():
    start = datetime(2024, 1, 1, 0, 0)
    end = datetime(2024, 1, 3, 0, 0)
    assert earned_premium(100, start, end, datetime(2024, 1, 1, 12, 0)) == pytest.approx(50.0)


def test_days_between_accepts_iso_strings():
    assert days_between("2024-01-01", "2024-01-31") == 30
    assert days_between("2024-01-01", "not a date") is None


def test_to_date_variants():
    assert to_date("2024-07-01T10:30:00Z") == date(2024, 7, 1)
    assert to_date(datetime(2024, 7, 1, 23, 59)) == date(2024, 7, 1)
    assert to_date("") is None
    assert to_date(42) is None


@pytest.mark.parametrize(
    "raw",
    [
        "2024-07-01T10:30:00.12345+00:00",
        "2024-07-01T10:30:00.1+03:00",
        "2024-07-01T10:30:00.1234Z",
    ],
)
def test_fractional_second_timestamps_are_read(raw):
    """Record stores emit timestamps with any number of fractional digits."""
    assert to_date(raw) == date(2024, 7, 1)
    assert to_datetime(raw).tzinfo is None


def test_fractional_second_start_date_still_earns():
    earned = earned_premium(12000, "2024-01-01T00:00:00.12345+00:00", "2025-01-01", "2024-07-02")
    assert earned == pytest.approx(6000.0, rel=1e-4)


def test_to_amount():
    assert to_amount("15.5") == Decimal("15.5")
    assert to_amount(19.99) == Decimal("19.99")
    assert to_amount(Decimal("-1")) == Decimal("0")
    assert to_amount(None) == Decimal("0")
    assert to_amount([1]) == Decimal("0")


def test_earned_amount_keeps_cents_exact():
    """Money stays in Decimal until it is handed to a display row."""
    earned = earned_amount("0.30", date(2024, 3, 1), date(2024, 3, 4), date(2024, 3, 2))
    assert isinstance(earned, Decimal)
    assert earned == Decimal("0.10")


def test_loss_ratio():
    assert loss_ratio(200, 50) == 25.0
    assert loss_ratio(0, 500) == 0
    assert loss_ratio(-10, 500) == 0
