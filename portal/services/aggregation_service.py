"""
Loss-ratio aggregation over policies and claims.

Policies and claims are folded into per-group accumulators keyed by a
grouping strategy (plate, policy type, company). Loss ratios are derived
only once every record has been folded in.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from portal.core.normalizer import (
    NO_GROUP,
    company_key,
    normalize_plate,
    policy_type_key,
)
from portal.core.proration import ZERO, earned_amount, loss_ratio
from portal.schemas.analytics_schema import (
    AggregateBucket,
    ClaimRecord,
    GroupBy,
    PolicyRecord,
)


logger = logging.getLogger(__name__)

# (group key, display name); an empty key means "no group"
KeyExtractor = Callable[[Union[PolicyRecord, ClaimRecord]], Tuple[str, str]]


@dataclass(frozen=True)
class GroupingStrategy:
    """
    How records map onto group keys.

    The same extractor is applied to policies and claims, so both sides of
    the join must expose the field it reads.
    """

    name: str
    key_of: KeyExtractor


def _by_plate(record: Union[PolicyRecord, ClaimRecord]) -> Tuple[str, str]:
    return normalize_plate(record.plate), record.plate or ""


def _by_policy_type(record: Union[PolicyRecord, ClaimRecord]) -> Tuple[str, str]:
    label = policy_type_key(record.policy_type)
    return label, label


def _by_company(record: Union[PolicyRecord, ClaimRecord]) -> Tuple[str, str]:
    label = company_key(record.company_name)
    return label, label


GROUPING_STRATEGIES: Dict[GroupBy, GroupingStrategy] = {
    GroupBy.PLATE: GroupingStrategy(GroupBy.PLATE.value, _by_plate),
    GroupBy.POLICY_TYPE: GroupingStrategy(GroupBy.POLICY_TYPE.value, _by_policy_type),
    GroupBy.COMPANY: GroupingStrategy(GroupBy.COMPANY.value, _by_company),
}


@dataclass
class _Totals:
    """Running totals for one group while records are being folded in."""

    key: str
    name: str
    total_premium: Decimal = ZERO
    earned_premium: Decimal = ZERO
    policy_count: int = 0
    total_claims: Decimal = ZERO
    claim_count: int = 0

    def finalize(self) -> AggregateBucket:
        return AggregateBucket(
            key=self.key,
            name=self.name,
            total_premium=float(self.total_premium),
            earned_premium=float(self.earned_premium),
            policy_count=self.policy_count,
            total_claims=float(self.total_claims),
            claim_count=self.claim_count,
            loss_ratio=loss_ratio(self.earned_premium, self.total_claims),
        )


def resolve_strategy(group_by: Union[GroupBy, str, GroupingStrategy]) -> GroupingStrategy:
    """
    Look up a grouping strategy by name, or pass a custom one through.

    Raises:
        ValueError: If the name is not a registered strategy.
    """
    if isinstance(group_by, GroupingStrategy):
        return group_by
    try:
        return GROUPING_STRATEGIES[GroupBy(group_by)]
    except ValueError as exc:
        raise ValueError(f"Unknown grouping strategy: {group_by!r}") from exc


def aggregate(
    policies: Iterable[PolicyRecord],
    claims: Iterable[ClaimRecord],
    group_by: Union[GroupBy, str, GroupingStrategy] = GroupBy.PLATE,
    as_of: Optional[date] = None,
) -> List[AggregateBucket]:
    """
    Group policies and claims and compute premium, claim and loss-ratio totals.

    Args:
        policies: Policy records; never mutated.
        claims: Claim records; never mutated.
        group_by: Registered strategy name or a custom GroupingStrategy.
        as_of: Reference date for earned premium, defaults to today.

    Returns:
        One bucket per non-empty key in order of first appearance (policies
        first, then claims). Keys seen only on claims get zero premium and a
        zero loss ratio.

    Raises:
        ValueError: If group_by is not a known strategy.
    """
    strategy = resolve_strategy(group_by)
    if as_of is None:
        as_of = date.today()

    groups: Dict[str, _Totals] = {}

    def _bucket_for(record: Union[PolicyRecord, ClaimRecord]) -> Optional[_Totals]:
        key, name = strategy.key_of(record)
        if key == NO_GROUP:
            return None
        totals = groups.get(key)
        if totals is None:
            totals = _Totals(key=key, name=name)
            groups[key] = totals
        return totals

    skipped = 0
    for policy in policies:
        totals = _bucket_for(policy)
        if totals is None:
            skipped += 1
            continue
        totals.total_premium += policy.premium_amount
        totals.earned_premium += earned_amount(
            policy.premium_amount, policy.start_date, policy.end_date, as_of
        )
        totals.policy_count += 1

    for claim in claims:
        totals = _bucket_for(claim)
        if totals is None:
            skipped += 1
            continue
        totals.total_claims += claim.payment_amount
        totals.claim_count += 1

    logger.debug(
        "Aggregated %d groups by %s (%d records without a key)",
        len(groups),
        strategy.name,
        skipped,
    )
    return [totals.finalize() for totals in groups.values()]


__all__ = [
    "GroupingStrategy",
    "GROUPING_STRATEGIES",
    "resolve_strategy",
    "aggregate",
]
