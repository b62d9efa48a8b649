"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# ---- Request schemas ----

class PaymentRequest(BaseModel):
    principal: Decimal = Field(..., description="Amount financed")
    annual_interest_rate_percent: Decimal = Field(..., description="12 means 12% a year")
    tenure_periods: int = Field(..., description="Number of monthly payments")


class RepaymentRecordRequest(BaseModel):
    period_index: int
    status: str | None = None
    paid_at: datetime | None = None


class ScheduleRequest(PaymentRequest):
    start_date: date
    repayments: list[RepaymentRecordRequest] = Field(default_factory=list)


class AmortizationRequest(BaseModel):
    principal: Decimal
    annual_interest_rate_percent: Decimal
    tenure_years: Decimal
    frequency: str = "monthly"


class MortgageScenarioRequest(BaseModel):
    property_price: Decimal
    down_payment: Decimal = Decimal("0")
    annual_interest_rate_percent: Decimal
    tenure_years: Decimal


# ---- Response schemas ----

class PaymentResponse(BaseModel):
    periodic_payment: Decimal
    flat_interest_payment: Decimal | None = None


class ScheduleEntryResponse(BaseModel):
    period_index: int
    due_date: date
    amount: Decimal
    status: str


class ScheduleProgressResponse(BaseModel):
    paid_count: int
    total_count: int
    percent_paid: Decimal
    amount_paid: Decimal
    amount_remaining: Decimal
    is_fully_repaid: bool


class ScheduleResponse(BaseModel):
    periodic_payment: Decimal
    entries: list[ScheduleEntryResponse]
    progress: ScheduleProgressResponse


class AmortizationRowResponse(BaseModel):
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


class AmortizationResponse(BaseModel):
    frequency: str
    payment_per_period: Decimal
    total_paid: Decimal
    total_interest: Decimal
    rows: list[AmortizationRowResponse]


class TimelineEventResponse(BaseModel):
    id: str
    timestamp: datetime
    event_type: str
    title: str
    description: str
    status: str
    amount: Decimal | None = None
    source_label: str | None = None
    channel: str | None = None
    timestamp_defaulted: bool = False


class MilestoneResponse(BaseModel):
    percentage: int
    threshold: Decimal
    achieved: bool
    achieved_at: datetime | None = None


class MethodBreakdownResponse(BaseModel):
    label: str
    count: int
    total: Decimal


class PaymentStatsResponse(BaseModel):
    total_payments: int
    total_paid: Decimal
    average_payment: Decimal
    by_method: list[MethodBreakdownResponse]


class TotalsCheckResponse(BaseModel):
    authoritative_total: Decimal
    reconstructed_total: Decimal
    difference: Decimal
    consistent: bool
    undated_milestones: list[int]
    backend_total_missing: bool = False


class PaymentJourneyResponse(BaseModel):
    property_id: str | None = None
    progress_percent: Decimal
    timeline: list[TimelineEventResponse]
    milestones: list[MilestoneResponse]
    stats: PaymentStatsResponse
    totals: TotalsCheckResponse
