"""Wire models for the cooperative backend's property payment-setup payload.

The backend returns loosely typed JSON (amounts as numbers or strings, ids as
ints or strings, most fields optional). These models validate it and
``parse_payment_setup`` turns it into the engine's domain records.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.models.payments import (
    LedgerEntry,
    PaymentEvent,
    PaymentHistoryEntry,
    PaymentSetup,
    PlanSetupEvent,
    PropertyTarget,
    ScheduleApprovalEvent,
)


class PaymentSetupError(ValueError):
    """Backend payload could not be turned into a payment setup."""


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Backend ids are integers on some tables and UUID strings on others
    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def _id_to_str(cls, value):
        return str(value) if value is not None else value


class PaymentHistoryPayload(_Wire):
    id: str
    amount: Decimal | None = None
    status: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    description: str | None = None


class LedgerEntryPayload(_Wire):
    id: str
    amount: Decimal | None = None
    status: str | None = None
    direction: str | None = None
    source: str | None = None
    paid_at: datetime | None = None
    created_at: datetime | None = None


class PaymentPlanPayload(_Wire):
    id: str = "plan"
    created_at: datetime | None = None
    selected_methods: list[str] = Field(default_factory=list)

    @field_validator("selected_methods", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []


class RepaymentSchedulePayload(_Wire):
    schedule_approved: bool = False
    schedule_approved_at: datetime | None = None


class PropertyPayload(_Wire):
    id: str | None = None
    price: Decimal = Decimal("0")
    total_paid: Decimal | None = None
    progress: Decimal | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _none_price(cls, value):
        return Decimal("0") if value is None else value


class PaymentSetupPayload(_Wire):
    property: PropertyPayload | None = None
    payment_history: list[PaymentHistoryPayload] = Field(default_factory=list)
    ledger_entries: list[LedgerEntryPayload] = Field(default_factory=list)
    payment_plan: PaymentPlanPayload | None = None
    repayment_schedules: dict[str, RepaymentSchedulePayload | None] = Field(default_factory=dict)

    @field_validator("payment_history", "ledger_entries", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return value or []

    @field_validator("repayment_schedules", mode="before")
    @classmethod
    def _none_to_dict(cls, value):
        return value or {}

    def to_domain(self, property_id: str | None = None) -> PaymentSetup:
        prop = self.property or PropertyPayload()

        events: list[PaymentEvent] = [
            PaymentHistoryEntry(
                id=p.id,
                amount=p.amount,
                status=p.status,
                payment_method=p.payment_method,
                created_at=p.created_at,
                description=p.description,
            )
            for p in self.payment_history
        ]
        events.extend(
            LedgerEntry(
                id=e.id,
                amount=e.amount,
                status=e.status,
                direction=e.direction,
                source=e.source,
                paid_at=e.paid_at,
                created_at=e.created_at,
            )
            for e in self.ledger_entries
        )

        plan = None
        if self.payment_plan is not None:
            plan = PlanSetupEvent(
                id=self.payment_plan.id,
                created_at=self.payment_plan.created_at,
                selected_methods=tuple(self.payment_plan.selected_methods),
            )

        approvals = tuple(
            ScheduleApprovalEvent(
                schedule=name,
                approved=schedule.schedule_approved,
                approved_at=schedule.schedule_approved_at,
            )
            for name, schedule in self.repayment_schedules.items()
            if schedule is not None
        )

        return PaymentSetup(
            property_id=property_id or prop.id or "",
            target=PropertyTarget(
                price=prop.price,
                total_paid=prop.total_paid,
                progress=prop.progress,
            ),
            events=tuple(events),
            plan_setup=plan,
            schedule_approvals=approvals,
        )


def parse_payment_setup(data: dict, property_id: str | None = None) -> PaymentSetup:
    """Validate a raw payment-setup dict and convert it to domain records."""
    try:
        payload = PaymentSetupPayload.model_validate(data)
    except ValidationError as e:
        raise PaymentSetupError(f"Invalid payment setup payload: {e}") from e
    return payload.to_domain(property_id)
