"""
Pydantic schemas for portfolio analytics.
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.core.proration import to_amount, to_date


class GroupBy(str, Enum):
    """Dimensions the aggregation engine can group on."""
    PLATE = "plate"
    POLICY_TYPE = "policy_type"
    COMPANY = "company"


class RankCriterion(str, Enum):
    """Numeric bucket fields usable as a ranking criterion."""
    CLAIM_COUNT = "claim_count"
    TOTAL_CLAIMS = "total_claims"
    LOSS_RATIO = "loss_ratio"


class TrendChannel(str, Enum):
    """Which accumulator drives a trend's percentage scale."""
    COUNT = "count"
    AMOUNT = "amount"


class SortOrder(str, Enum):
    """Direction for money-ordered list views."""
    ASC = "asc"
    DESC = "desc"


class PolicyRecord(BaseModel):
    """A policy as supplied by the record store."""
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "POL-1",
                "policy_number": "TRF-2024-0001",
                "policy_type": "Traffic",
                "premium_amount": 12000,
                "start_date": "2024-01-01",
                "end_date": "2025-01-01",
                "plate": "34 ABC 123",
                "insured_name": "Acme Logistics",
                "company_name": "Anadolu",
                "status": "active",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the policy")
    policy_type: Optional[str] = Field(None, description="Policy type / line of business")
    premium_amount: Decimal = Field(Decimal("0"), description="Written premium; invalid values become 0")
    start_date: Optional[date] = Field(None, description="Coverage start date")
    end_date: Optional[date] = Field(None, description="Coverage end date")
    plate: Optional[str] = Field(None, description="Vehicle plate as entered")
    insured_name: Optional[str] = None
    company_name: Optional[str] = Field(None, description="Insurance company name")
    policy_number: Optional[str] = None
    status: Optional[str] = Field(None, description="active, expired or cancelled")

    @field_validator("premium_amount", mode="before")
    @classmethod
    def _coerce_premium(cls, value: Any) -> Decimal:
        return to_amount(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> Optional[date]:
        return to_date(value)


class ClaimRecord(BaseModel):
    """A claim payment row as supplied by the record store."""
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "CLM-1",
                "claim_number": "H-2024-77",
                "policy_type": "Traffic",
                "payment_amount": 3000,
                "claim_date": "2024-07-01",
                "plate": "34ABC123",
                "status": "closed",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the claim row")
    policy_type: Optional[str] = None
    payment_amount: Decimal = Field(Decimal("0"), description="Paid amount; invalid values become 0")
    claim_date: Optional[date] = None
    claim_number: Optional[str] = Field(None, description="File number, may repeat across rows")
    plate: Optional[str] = None
    status: Optional[str] = None
    claim_type: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("payment_amount", mode="before")
    @classmethod
    def _coerce_payment(cls, value: Any) -> Decimal:
        return to_amount(value)

    @field_validator("claim_date", mode="before")
    @classmethod
    def _coerce_claim_date(cls, value: Any) -> Optional[date]:
        return to_date(value)


class AggregateBucket(BaseModel):
    """Per-group totals with a loss ratio computed after all rows are folded in."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Group key (normalized for plates)")
    name: str = Field(..., description="First-seen raw form of the key")
    total_premium: float = 0.0
    earned_premium: float = 0.0
    policy_count: int = 0
    total_claims: float = Field(0.0, description="Sum of claim payments")
    claim_count: int = 0
    loss_ratio: float = Field(0.0, description="total_claims / earned_premium * 100")


class TimeBucket(BaseModel):
    """One calendar month of a trend series."""
    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Localized month/year label")
    year: int
    month: int = Field(..., ge=1, le=12)
    count: int = 0
    amount: float = 0.0
    percentage: float = Field(0.0, description="Share of the busiest month, 0-100")


class UniqueClaimRow(BaseModel):
    """A plate ranked by distinct claim files."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Plate exactly as entered")
    display_label: str = Field(..., description="Policy type of the first claim seen")
    unique_claim_count: int = 0
    total_amount: float = 0.0


class RecordFilter(BaseModel):
    """
    Field predicates for list views, combined with AND.

    Empty entries match everything.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "equals": {"status": "closed"},
                "on_or_after": {"claim_date": "2024-01-01"},
            }
        }
    )

    search: Optional[str] = Field(None, description="Free text matched against any search field")
    search_fields: List[str] = Field(default_factory=list)
    contains: Dict[str, str] = Field(default_factory=dict, description="Case-insensitive substring per field")
    equals: Dict[str, str] = Field(default_factory=dict, description="Exact value per field")
    on_or_after: Dict[str, date] = Field(default_factory=dict)
    on_or_before: Dict[str, date] = Field(default_factory=dict)


class Announcement(BaseModel):
    """Agency announcement shown on the client dashboard."""
    id: str
    title: str
    content: str = ""
    priority: Optional[str] = None
    created_at: Optional[date] = None


class PortfolioSummary(BaseModel):
    """Headline figures for the dashboard cards."""
    total_policies: int
    active_policies: int
    total_claims: int
    total_premium: float
    earned_premium: float
    total_claim_amount: float
    loss_ratio: float
    loss_ratio_band: str


class DistributionRow(BaseModel):
    """Count and share of one category."""
    label: str
    count: int
    percentage: float


class ExpiringPolicy(BaseModel):
    """A policy due for renewal soon."""
    policy: PolicyRecord
    days_until_expiry: int
    urgency: str


class AggregateRequest(BaseModel):
    """Request schema for grouped loss-ratio analysis."""
    policies: List[PolicyRecord] = Field(default_factory=list)
    claims: List[ClaimRecord] = Field(default_factory=list)
    group_by: GroupBy = GroupBy.PLATE
    sort_by: RankCriterion = RankCriterion.LOSS_RATIO
    as_of: Optional[date] = Field(None, description="Reference date, defaults to today")


class RankRequest(BaseModel):
    buckets: List[AggregateBucket]
    criterion: RankCriterion = RankCriterion.LOSS_RATIO


class TrendRequest(BaseModel):
    """Request schema for the monthly premium and claim charts."""
    policies: List[PolicyRecord] = Field(default_factory=list)
    claims: List[ClaimRecord] = Field(default_factory=list)
    months_back: Optional[int] = Field(None, ge=1, le=60)
    reference_date: Optional[date] = None


class TrendResponse(BaseModel):
    premium_trend: List[TimeBucket]
    claims_trend: List[TimeBucket]


class PolicyFilterRequest(BaseModel):
    records: List[PolicyRecord] = Field(default_factory=list)
    predicates: RecordFilter = Field(default_factory=RecordFilter)
    premium_order: Optional[SortOrder] = Field(None, description="Order the result by premium")


class ClaimFilterRequest(BaseModel):
    records: List[ClaimRecord] = Field(default_factory=list)
    predicates: RecordFilter = Field(default_factory=RecordFilter)
    amount_order: Optional[SortOrder] = Field(None, description="Order the result by payment amount")
    frequency_field: Optional[str] = Field(
        None, description="Put records whose value in this field repeats most often first"
    )


class TopPlatesRequest(BaseModel):
    claims: List[ClaimRecord] = Field(default_factory=list)


class SummaryRequest(BaseModel):
    policies: List[PolicyRecord] = Field(default_factory=list)
    claims: List[ClaimRecord] = Field(default_factory=list)
    as_of: Optional[date] = None


class SummaryResponse(BaseModel):
    """Everything the dashboard header needs in one payload."""
    summary: PortfolioSummary
    policy_types: List[DistributionRow]
    companies: List[DistributionRow]
    expiring: List[ExpiringPolicy]


class CategoryLabel(BaseModel):
    """Display label and tone for one categorical value."""
    model_config = ConfigDict(from_attributes=True)

    value: str
    label: str
    tone: str


class AnnouncementRequest(BaseModel):
    announcements: List[Announcement] = Field(default_factory=list)
    dismissed_ids: List[str] = Field(default_factory=list, description="Ids the user has dismissed")


class AnnouncementView(BaseModel):
    """A visible announcement with its priority badge."""
    announcement: Announcement
    priority: CategoryLabel


class StatusLabelRequest(BaseModel):
    claim_statuses: List[Optional[str]] = Field(default_factory=list)
    policy_statuses: List[Optional[str]] = Field(default_factory=list)


class StatusLabelResponse(BaseModel):
    claim_statuses: List[CategoryLabel]
    policy_statuses: List[CategoryLabel]
