"""Shared fixtures.

Fixture property: ₦4,000,000 unit, two completed ₦2,000,000 payments (Jan and
Mar 2025), one pending wallet payment, a ledger credit and debit, a payment
plan and an approved mortgage schedule.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.models.payments import (
    LedgerEntry,
    PaymentHistoryEntry,
    PaymentSetup,
    PlanSetupEvent,
    PropertyTarget,
    ScheduleApprovalEvent,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return utc(2025, 6, 1, 12, 0)


@pytest.fixture
def payment_setup_payload() -> dict:
    """The ``data`` object of the backend's payment-setup response."""
    return {
        "property": {"id": 42, "price": 4000000, "total_paid": "4000000.00", "progress": None},
        "payment_history": [
            {
                "id": 1,
                "amount": 2000000,
                "status": "completed",
                "payment_method": "cooperative",
                "created_at": "2025-01-10T09:00:00Z",
                "description": None,
            },
            {
                "id": 2,
                "amount": "150000.50",
                "status": "pending",
                "payment_method": "equity_wallet",
                "created_at": "2025-04-02T09:00:00Z",
            },
        ],
        "ledger_entries": [
            {
                "id": "L-1",
                "amount": 2000000,
                "status": "completed",
                "direction": "credit",
                "source": "mortgage",
                "paid_at": "2025-03-05T10:00:00Z",
                "created_at": "2025-03-01T10:00:00Z",
            },
            {
                "id": "L-2",
                "amount": 5000,
                "status": "completed",
                "direction": "debit",
                "source": "fee",
                "created_at": "2025-03-06T10:00:00Z",
            },
        ],
        "payment_plan": {
            "id": 7,
            "created_at": "2024-12-20T08:00:00Z",
            "selected_methods": ["cooperative", "mortgage"],
        },
        "repayment_schedules": {
            "mortgage": {"schedule_approved": True, "schedule_approved_at": "2024-12-28T08:00:00Z"},
            "cooperative": {"schedule_approved": False, "schedule_approved_at": None},
        },
    }


@pytest.fixture
def payment_setup() -> PaymentSetup:
    """Domain equivalent of ``payment_setup_payload``."""
    return PaymentSetup(
        property_id="42",
        target=PropertyTarget(price=Decimal("4000000"), total_paid=Decimal("4000000.00")),
        events=(
            PaymentHistoryEntry(
                id="1",
                amount=Decimal("2000000"),
                status="completed",
                payment_method="cooperative",
                created_at=utc(2025, 1, 10, 9, 0),
            ),
            PaymentHistoryEntry(
                id="2",
                amount=Decimal("150000.50"),
                status="pending",
                payment_method="equity_wallet",
                created_at=utc(2025, 4, 2, 9, 0),
            ),
            LedgerEntry(
                id="L-1",
                amount=Decimal("2000000"),
                status="completed",
                direction="credit",
                source="mortgage",
                paid_at=utc(2025, 3, 5, 10, 0),
                created_at=utc(2025, 3, 1, 10, 0),
            ),
            LedgerEntry(
                id="L-2",
                amount=Decimal("5000"),
                status="completed",
                direction="debit",
                source="fee",
                created_at=utc(2025, 3, 6, 10, 0),
            ),
        ),
        plan_setup=PlanSetupEvent(
            id="7",
            created_at=utc(2024, 12, 20, 8, 0),
            selected_methods=("cooperative", "mortgage"),
        ),
        schedule_approvals=(
            ScheduleApprovalEvent(schedule="mortgage", approved=True, approved_at=utc(2024, 12, 28, 8, 0)),
            ScheduleApprovalEvent(schedule="cooperative", approved=False),
        ),
    )
