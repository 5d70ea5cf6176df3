"""
Headline figures and side panels for the client dashboard.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import date, timedelta
from typing import AbstractSet, Iterable, List, Optional, Sequence

from portal.core.categories import describe_priority, expiry_urgency, loss_ratio_band
from portal.core.normalizer import OTHER_LABEL, label_or_default, policy_type_key
from portal.core.proration import ZERO, earned_amount, loss_ratio
from portal.core.settings import settings
from portal.schemas.analytics_schema import (
    Announcement,
    AnnouncementView,
    CategoryLabel,
    ClaimRecord,
    DistributionRow,
    ExpiringPolicy,
    PolicyRecord,
    PortfolioSummary,
)


logger = logging.getLogger(__name__)

ACTIVE_STATUS = "active"


def summarize_portfolio(
    policies: Sequence[PolicyRecord],
    claims: Sequence[ClaimRecord],
    as_of: Optional[date] = None,
) -> PortfolioSummary:
    """
    Compute the dashboard cards: counts, premium, claims and loss ratio.

    The loss ratio uses earned premium, so a portfolio whose policies have
    not started yet reports a ratio of 0 and a band of "none".
    """
    if as_of is None:
        as_of = date.today()

    total_premium = sum((policy.premium_amount for policy in policies), ZERO)
    earned = sum(
        (earned_amount(policy.premium_amount, policy.start_date, policy.end_date, as_of) for policy in policies),
        ZERO,
    )
    total_claim_amount = sum((claim.payment_amount for claim in claims), ZERO)
    ratio = loss_ratio(earned, total_claim_amount)

    return PortfolioSummary(
        total_policies=len(policies),
        active_policies=sum(1 for policy in policies if (policy.status or "").lower() == ACTIVE_STATUS),
        total_claims=len(claims),
        total_premium=float(total_premium),
        earned_premium=float(earned),
        total_claim_amount=float(total_claim_amount),
        loss_ratio=ratio,
        loss_ratio_band=loss_ratio_band(ratio, earned),
    )


def _distribution(labels: List[str], limit: Optional[int] = None) -> List[DistributionRow]:
    if not labels:
        return []
    ordered = list(Counter(labels).items())
    if limit:
        ordered = sorted(ordered, key=lambda item: item[1], reverse=True)[:limit]
    total = len(labels)
    return [
        DistributionRow(label=label, count=count, percentage=count / total * 100)
        for label, count in ordered
    ]


def policy_type_distribution(policies: Iterable[PolicyRecord]) -> List[DistributionRow]:
    """Policy count and share per policy type, in order of first appearance."""
    return _distribution([policy_type_key(policy.policy_type) for policy in policies])


def company_distribution(policies: Iterable[PolicyRecord], limit: int = 5) -> List[DistributionRow]:
    """Top insurers by policy count; policies without a company count as "Other"."""
    return _distribution([label_or_default(policy.company_name, OTHER_LABEL) for policy in policies], limit=max(1, limit))


def expiring_policies(
    policies: Iterable[PolicyRecord],
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[ExpiringPolicy]:
    """
    Policies whose coverage ends within the reminder window, soonest first.

    Policies that already ended or have no end date are left out.
    """
    if as_of is None:
        as_of = date.today()
    if window_days is None:
        window_days = settings.expiry_window_days
    if limit is None:
        limit = settings.expiry_limit

    horizon = as_of + timedelta(days=window_days)
    due = [
        policy for policy in policies
        if policy.end_date is not None and as_of <= policy.end_date <= horizon
    ]
    due.sort(key=lambda policy: policy.end_date)

    reminders = []
    for policy in due[:limit]:
        days_left = (policy.end_date - as_of).days
        reminders.append(
            ExpiringPolicy(policy=policy, days_until_expiry=days_left, urgency=expiry_urgency(days_left))
        )
    return reminders


def visible_announcements(
    announcements: Iterable[Announcement],
    dismissed_ids: AbstractSet[str],
) -> List[Announcement]:
    """
    Drop announcements the user has dismissed.

    The dismissed ids are owned by the caller (e.g. persisted client-side).
    """
    visible = [item for item in announcements if item.id not in dismissed_ids]
    logger.debug("%d announcements visible after dismissal", len(visible))
    return visible


def announcement_feed(
    announcements: Iterable[Announcement],
    dismissed_ids: AbstractSet[str],
) -> List[AnnouncementView]:
    """Visible announcements paired with their priority badge."""
    return [
        AnnouncementView(
            announcement=item,
            priority=CategoryLabel.model_validate(describe_priority(item.priority)),
        )
        for item in visible_announcements(announcements, dismissed_ids)
    ]


__all__ = [
    "summarize_portfolio",
    "policy_type_distribution",
    "company_distribution",
    "expiring_policies",
    "visible_announcements",
    "announcement_feed",
]
