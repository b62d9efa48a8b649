"""Payment history records, timeline events and milestone results.

Backend records arrive as one of four event kinds. Each kind is its own
frozen dataclass and ``PaymentEvent`` is their union, so the reconciler
dispatches on type instead of probing optional fields.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

MILESTONE_PERCENTAGES = (25, 50, 75, 100)


# ---- Source records ----

@dataclass(frozen=True)
class PaymentHistoryEntry:
    id: str
    amount: Decimal | None
    status: str | None
    payment_method: str | None = None
    created_at: datetime | None = None
    description: str | None = None


@dataclass(frozen=True)
class LedgerEntry:
    """Bookkeeping entry on the property's payment account.

    Only ``direction == "credit"`` entries represent money paid in.
    """
    id: str
    amount: Decimal | None
    status: str | None
    direction: str | None
    source: str | None = None
    paid_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_credit(self) -> bool:
        return (self.direction or "").lower() == "credit"


@dataclass(frozen=True)
class PlanSetupEvent:
    id: str
    created_at: datetime | None = None
    selected_methods: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScheduleApprovalEvent:
    schedule: str  # "mortgage", "cooperative", ...
    approved: bool
    approved_at: datetime | None = None


PaymentEvent = PaymentHistoryEntry | LedgerEntry | PlanSetupEvent | ScheduleApprovalEvent


@dataclass(frozen=True)
class PropertyTarget:
    price: Decimal
    total_paid: Decimal | None = None  # Authoritative figure from the backend
    progress: Decimal | None = None  # Percent, as reported by the backend


@dataclass(frozen=True)
class PaymentSetup:
    """Everything the backend knows about one property purchase."""
    property_id: str
    target: PropertyTarget
    events: tuple[PaymentEvent, ...] = ()
    plan_setup: PlanSetupEvent | None = None
    schedule_approvals: tuple[ScheduleApprovalEvent, ...] = ()


# ---- Derived results ----

class EventType(Enum):
    PAYMENT = "payment"
    MILESTONE = "milestone"
    PLAN_SETUP = "plan_setup"
    SCHEDULE_APPROVAL = "schedule_approval"


class EventStatus(Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    OVERDUE = "overdue"  # Reserved: nothing derives it yet


class PaymentChannel(Enum):
    MORTGAGE = "mortgage"
    COOPERATIVE = "cooperative"
    WALLET = "wallet"
    LOAN = "loan"
    CASH = "cash"


@dataclass(frozen=True)
class TimelineEvent:
    id: str
    timestamp: datetime
    event_type: EventType
    title: str
    description: str
    status: EventStatus
    amount: Decimal | None = None
    source_label: str | None = None
    channel: PaymentChannel | None = None
    timestamp_defaulted: bool = False  # Source had no timestamp; "now" was used

    @property
    def is_completed_payment(self) -> bool:
        return self.event_type is EventType.PAYMENT and self.status is EventStatus.COMPLETED


@dataclass(frozen=True)
class Milestone:
    percentage: int
    threshold: Decimal
    achieved: bool
    achieved_at: datetime | None = None


@dataclass(frozen=True)
class MethodBreakdown:
    label: str
    count: int
    total: Decimal


@dataclass(frozen=True)
class PaymentStats:
    total_payments: int
    total_paid: Decimal
    average_payment: Decimal
    by_method: tuple[MethodBreakdown, ...] = ()


@dataclass(frozen=True)
class TotalsCheck:
    """Authoritative vs. reconstructed total paid."""
    authoritative_total: Decimal
    reconstructed_total: Decimal
    difference: Decimal  # authoritative - reconstructed
    consistent: bool
    undated_milestones: tuple[int, ...] = ()  # Achieved with no achieved_at
    backend_total_missing: bool = False


@dataclass(frozen=True)
class PaymentJourney:
    timeline: list[TimelineEvent]
    milestones: list[Milestone]
    stats: PaymentStats
    totals: TotalsCheck
    progress_percent: Decimal
    generated_at: datetime | None = None  # Instant substituted for missing timestamps
