"""
Ranking of aggregated groups and of plates by distinct claim files.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Set, Union

from portal.schemas.analytics_schema import (
    AggregateBucket,
    ClaimRecord,
    RankCriterion,
    UniqueClaimRow,
)


logger = logging.getLogger(__name__)

NO_POLICY_TYPE = "-"


def rank(
    buckets: Sequence[AggregateBucket],
    criterion: Union[RankCriterion, str] = RankCriterion.LOSS_RATIO,
) -> List[AggregateBucket]:
    """
    Sort buckets by a numeric field, highest first.

    The sort is stable, so ties keep their input order. A new list is
    returned and the input is left untouched.

    Raises:
        ValueError: If the criterion is not a rankable field.
    """
    try:
        field_name = RankCriterion(criterion).value
    except ValueError as exc:
        raise ValueError(f"Unknown ranking criterion: {criterion!r}") from exc

    return sorted(buckets, key=lambda bucket: getattr(bucket, field_name), reverse=True)


@dataclass
class _PlateClaims:
    policy_type: str
    claim_numbers: Set[str] = field(default_factory=set)
    total: Decimal = Decimal("0")


def rank_by_unique_claims(claims: Iterable[ClaimRecord]) -> List[UniqueClaimRow]:
    """
    Rank plates by how many distinct claim files they have.

    Plates are compared exactly as entered. Claim numbers repeated across
    payment rows count once, but every row's payment is added to the total.
    Claims without a plate are ignored.
    """
    plates: Dict[str, _PlateClaims] = {}

    for claim in claims:
        if not claim.plate:
            continue
        entry = plates.get(claim.plate)
        if entry is None:
            entry = _PlateClaims(policy_type=claim.policy_type or NO_POLICY_TYPE)
            plates[claim.plate] = entry
        if claim.claim_number:
            entry.claim_numbers.add(claim.claim_number)
        entry.total += claim.payment_amount

    rows = [
        UniqueClaimRow(
            key=plate,
            display_label=entry.policy_type,
            unique_claim_count=len(entry.claim_numbers),
            total_amount=float(entry.total),
        )
        for plate, entry in plates.items()
    ]
    logger.debug("Ranked %d plates by unique claim files", len(rows))
    return sorted(rows, key=lambda row: row.unique_claim_count, reverse=True)


__all__ = ["rank", "rank_by_unique_claims"]
