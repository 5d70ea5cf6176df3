"""
Filtering and ordering for the policy and claim list views.

These helpers only shape what a table shows. Analytics always run on the
complete record set.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from portal.core.proration import to_amount, to_date
from portal.core.record_fields import field_text, field_value
from portal.schemas.analytics_schema import RecordFilter


logger = logging.getLogger(__name__)

R = TypeVar("R")
Predicate = Callable[[Any], bool]


def _contains(name: str, needle: str) -> Predicate:
    lowered = needle.lower()
    return lambda record: lowered in field_text(record, name).lower()


def _search(fields: Sequence[str], term: str) -> Predicate:
    lowered = term.lower()
    return lambda record: any(lowered in field_text(record, name).lower() for name in fields)


def _equals(name: str, expected: str) -> Predicate:
    return lambda record: field_value(record, name) is not None and field_text(record, name) == expected


def _date_bound(name: str, bound: date, after: bool) -> Predicate:
    def check(record: Any) -> bool:
        value = to_date(field_value(record, name))
        if value is None:
            return False
        return value >= bound if after else value <= bound

    return check


def build_predicates(predicates: Optional[RecordFilter]) -> List[Predicate]:
    """
    Translate a RecordFilter into individual checks.

    Blank search terms, blank substrings and blank expected values are
    skipped, so they match everything.
    """
    if predicates is None:
        return []

    checks: List[Predicate] = []
    if predicates.search and predicates.search.strip() and predicates.search_fields:
        checks.append(_search(predicates.search_fields, predicates.search.strip()))
    for name, needle in predicates.contains.items():
        if needle:
            checks.append(_contains(name, needle))
    for name, expected in predicates.equals.items():
        if expected:
            checks.append(_equals(name, expected))
    for name, bound in predicates.on_or_after.items():
        checks.append(_date_bound(name, bound, after=True))
    for name, bound in predicates.on_or_before.items():
        checks.append(_date_bound(name, bound, after=False))
    return checks


def filter_records(records: Iterable[R], predicates: Optional[RecordFilter] = None) -> List[R]:
    """
    Keep the records that satisfy every supplied predicate.

    A record that lacks a field named by a predicate fails that predicate.
    Input order is preserved.
    """
    checks = build_predicates(predicates)
    kept = [record for record in records if all(check(record) for check in checks)]
    logger.debug("Filter kept %d records using %d predicates", len(kept), len(checks))
    return kept


def sort_by_amount(records: Iterable[R], field: str, descending: bool = True) -> List[R]:
    """Order records by a money field; invalid amounts sort as 0."""
    return sorted(records, key=lambda record: to_amount(field_value(record, field)), reverse=descending)


def sort_by_frequency(records: Iterable[R], field: str) -> List[R]:
    """
    Put records whose field value occurs most often first.

    Used to surface repeat plates or claim types. Records without the field
    count as 0 and end up last; ties keep input order.
    """
    items = list(records)
    counts = Counter(field_text(record, field) for record in items if field_text(record, field))

    def frequency(record: Any) -> int:
        text = field_text(record, field)
        return counts[text] if text else 0

    return sorted(items, key=frequency, reverse=True)


__all__ = [
    "build_predicates",
    "filter_records",
    "sort_by_amount",
    "sort_by_frequency",
]
