"""
API routes for dashboard analytics over already-fetched policies and claims.
"""
import logging
from typing import Callable, List, TypeVar

from fastapi import APIRouter, HTTPException, status

from portal.core.categories import describe_claim_status, describe_policy_status
from portal.core.settings import settings
from portal.schemas.analytics_schema import (
    AggregateBucket,
    AggregateRequest,
    AnnouncementRequest,
    AnnouncementView,
    CategoryLabel,
    ClaimFilterRequest,
    ClaimRecord,
    PolicyFilterRequest,
    PolicyRecord,
    RankRequest,
    SortOrder,
    StatusLabelRequest,
    StatusLabelResponse,
    SummaryRequest,
    SummaryResponse,
    TopPlatesRequest,
    TrendRequest,
    TrendResponse,
    UniqueClaimRow,
)
from portal.services.aggregation_service import aggregate
from portal.services.filter_service import filter_records, sort_by_amount, sort_by_frequency
from portal.services.ranking_service import rank, rank_by_unique_claims
from portal.services.summary_service import (
    announcement_feed,
    company_distribution,
    expiring_policies,
    policy_type_distribution,
    summarize_portfolio,
)
from portal.services.trend_service import claims_trend, premium_trend


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

T = TypeVar("T")


def _run(action: str, compute: Callable[[], T]) -> T:
    """
    Run an analytics computation with the standard error mapping.

    - Validation errors return HTTP 400
    - Unexpected errors return HTTP 500
    """
    try:
        return compute()
    except ValueError as exc:
        logger.warning("Validation error while computing %s: %s", action, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:
        logger.exception("Unexpected error while computing %s", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute {action}",
        ) from exc


@router.post("/aggregate", response_model=List[AggregateBucket])
def aggregate_route(request: AggregateRequest) -> List[AggregateBucket]:
    """
    Group policies and claims by plate, policy type or company.

    Buckets come back ranked by the requested criterion.
    """
    return _run(
        "aggregates",
        lambda: rank(
            aggregate(request.policies, request.claims, request.group_by, request.as_of),
            request.sort_by,
        ),
    )


@router.post("/rank", response_model=List[AggregateBucket])
def rank_route(request: RankRequest) -> List[AggregateBucket]:
    """Re-rank previously computed buckets."""
    return _run("ranking", lambda: rank(request.buckets, request.criterion))


@router.post("/trends", response_model=TrendResponse)
def trends_route(request: TrendRequest) -> TrendResponse:
    """
    Monthly premium and claim series for the trailing window.
    """
    months_back = request.months_back or settings.trend_months
    return _run(
        "trends",
        lambda: TrendResponse(
            premium_trend=premium_trend(request.policies, months_back, request.reference_date),
            claims_trend=claims_trend(request.claims, months_back, request.reference_date),
        ),
    )


@router.post("/filter/policies", response_model=List[PolicyRecord])
def filter_policies_route(request: PolicyFilterRequest) -> List[PolicyRecord]:
    """Policy list view: predicates first, then optional premium ordering."""

    def compute() -> List[PolicyRecord]:
        policies = filter_records(request.records, request.predicates)
        if request.premium_order is not None:
            policies = sort_by_amount(
                policies, "premium_amount", descending=request.premium_order is SortOrder.DESC
            )
        return policies

    return _run("policy filter", compute)


@router.post("/filter/claims", response_model=List[ClaimRecord])
def filter_claims_route(request: ClaimFilterRequest) -> List[ClaimRecord]:
    """
    Claim list view.

    Predicates are applied first. The result can then be ordered by payment
    amount, and afterwards grouped so the most repeated values of
    frequency_field come first.
    """

    def compute() -> List[ClaimRecord]:
        claims = filter_records(request.records, request.predicates)
        if request.amount_order is not None:
            claims = sort_by_amount(
                claims, "payment_amount", descending=request.amount_order is SortOrder.DESC
            )
        if request.frequency_field:
            claims = sort_by_frequency(claims, request.frequency_field)
        return claims

    return _run("claim filter", compute)


@router.post("/top-plates", response_model=List[UniqueClaimRow])
def top_plates_route(request: TopPlatesRequest) -> List[UniqueClaimRow]:
    """
    Plates ranked by distinct claim files, with all payments summed.
    """
    return _run("top plates", lambda: rank_by_unique_claims(request.claims))


@router.post("/summary", response_model=SummaryResponse)
def summary_route(request: SummaryRequest) -> SummaryResponse:
    """
    Dashboard headline cards, distributions and renewal reminders.
    """
    return _run(
        "summary",
        lambda: SummaryResponse(
            summary=summarize_portfolio(request.policies, request.claims, request.as_of),
            policy_types=policy_type_distribution(request.policies),
            companies=company_distribution(request.policies),
            expiring=expiring_policies(request.policies, request.as_of),
        ),
    )


@router.post("/announcements", response_model=List[AnnouncementView])
def announcements_route(request: AnnouncementRequest) -> List[AnnouncementView]:
    """Announcements the user has not dismissed, with priority badges."""
    return _run(
        "announcements",
        lambda: announcement_feed(request.announcements, set(request.dismissed_ids)),
    )


@router.post("/labels", response_model=StatusLabelResponse)
def labels_route(request: StatusLabelRequest) -> StatusLabelResponse:
    """Display labels and tones for raw claim and policy statuses."""
    return _run(
        "status labels",
        lambda: StatusLabelResponse(
            claim_statuses=[
                CategoryLabel.model_validate(describe_claim_status(value)) for value in request.claim_statuses
            ],
            policy_statuses=[
                CategoryLabel.model_validate(describe_policy_status(value)) for value in request.policy_statuses
            ],
        ),
    )
