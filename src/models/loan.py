from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class ScheduleStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


class RepaymentFrequency(Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUALLY = "biannually"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        return {
            RepaymentFrequency.MONTHLY: 12,
            RepaymentFrequency.QUARTERLY: 4,
            RepaymentFrequency.BIANNUALLY: 2,
            RepaymentFrequency.ANNUALLY: 1,
        }[self]


@dataclass(frozen=True)
class LoanTerms:
    principal: Decimal
    annual_interest_rate_percent: Decimal  # e.g. Decimal("12") for 12%
    tenure_periods: int  # Months


@dataclass(frozen=True)
class RepaymentRecord:
    """A repayment the backend already recorded against a schedule period."""
    period_index: int  # 1-based
    status: str | None
    paid_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return (self.status or "").lower() in {"paid", "completed", "success"}


@dataclass(frozen=True)
class ScheduleEntry:
    period_index: int
    due_date: date
    amount: Decimal
    status: ScheduleStatus


@dataclass(frozen=True)
class ScheduleProgress:
    paid_count: int
    total_count: int
    percent_paid: Decimal
    amount_paid: Decimal
    amount_remaining: Decimal
    is_fully_repaid: bool


@dataclass(frozen=True)
class AmortizationRow:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationTable:
    rows: list[AmortizationRow]
    payment_per_period: Decimal
    total_paid: Decimal
    total_interest: Decimal
    frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY
