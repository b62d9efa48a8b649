"""Tests for parsing the backend payment-setup payload."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.data.payment_setup import PaymentSetupError, parse_payment_setup
from src.engine.reconciler import build_journey
from src.models.payments import EventStatus, LedgerEntry, PaymentHistoryEntry


class TestParsePaymentSetup:
    def test_full_payload(self, payment_setup_payload):
        setup = parse_payment_setup(payment_setup_payload)
        assert setup.property_id == "42"
        assert setup.target.price == Decimal("4000000")
        assert setup.target.total_paid == Decimal("4000000.00")
        assert setup.target.progress is None

        history = [e for e in setup.events if isinstance(e, PaymentHistoryEntry)]
        ledger = [e for e in setup.events if isinstance(e, LedgerEntry)]
        assert [e.id for e in history] == ["1", "2"]
        assert history[1].amount == Decimal("150000.50")
        assert history[0].created_at == datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
        assert [e.direction for e in ledger] == ["credit", "debit"]

        assert setup.plan_setup.selected_methods == ("cooperative", "mortgage")
        assert {(a.schedule, a.approved) for a in setup.schedule_approvals} == {
            ("mortgage", True),
            ("cooperative", False),
        }

    def test_matches_domain_fixture(self, payment_setup_payload, payment_setup, now):
        parsed = build_journey(parse_payment_setup(payment_setup_payload), now=now)
        expected = build_journey(payment_setup, now=now)
        assert parsed.timeline == expected.timeline
        assert parsed.milestones == expected.milestones

    def test_property_id_override(self, payment_setup_payload):
        setup = parse_payment_setup(payment_setup_payload, property_id="abc")
        assert setup.property_id == "abc"

    def test_nulls_and_missing_sections(self):
        setup = parse_payment_setup({
            "property": {"price": None},
            "payment_history": None,
            "ledger_entries": None,
            "payment_plan": None,
            "repayment_schedules": None,
        })
        assert setup.events == ()
        assert setup.plan_setup is None
        assert setup.schedule_approvals == ()
        assert setup.target.price == Decimal("0")

    def test_empty_payload(self):
        setup = parse_payment_setup({})
        assert setup.property_id == ""
        assert setup.events == ()

    def test_null_schedule_skipped(self):
        setup = parse_payment_setup({"repayment_schedules": {"mortgage": None}})
        assert setup.schedule_approvals == ()

    def test_plan_without_methods(self):
        setup = parse_payment_setup({"payment_plan": {"id": 3, "selected_methods": None}})
        assert setup.plan_setup.id == "3"
        assert setup.plan_setup.selected_methods == ()

    def test_unknown_fields_ignored(self):
        setup = parse_payment_setup({
            "payment_history": [{"id": 1, "amount": 10, "status": "success", "metadata": {"ref": "x"}}],
        })
        assert setup.events[0].status == "success"

    def test_null_status_is_pending(self, now):
        setup = parse_payment_setup({
            "property": {"price": 1000, "total_paid": 0},
            "payment_history": [
                {"id": 1, "amount": 500, "status": None, "created_at": "2025-01-10T09:00:00Z"},
            ],
            "ledger_entries": [
                {"id": "L-1", "amount": 200, "status": None, "direction": "credit",
                 "paid_at": "2025-01-11T09:00:00Z"},
            ],
        })
        assert [e.status for e in setup.events] == [None, None]
        timeline = build_journey(setup, now=now).timeline
        assert [e.id for e in timeline] == ["ledger-L-1", "payment-1"]
        assert all(e.status is EventStatus.PENDING for e in timeline)

    @pytest.mark.parametrize("entry", [
        {"id": "L-1", "amount": 500, "status": "completed", "direction": None},
        {"id": "L-1", "amount": 500, "status": "completed"},
    ])
    def test_ledger_without_direction_skipped(self, entry, now):
        setup = parse_payment_setup({"property": {"price": 1000}, "ledger_entries": [entry]})
        [ledger] = setup.events
        assert ledger.direction is None
        assert not ledger.is_credit
        assert build_journey(setup, now=now).timeline == []

    def test_invalid_amount(self):
        with pytest.raises(PaymentSetupError):
            parse_payment_setup({"payment_history": [{"id": 1, "amount": "lots"}]})

    def test_missing_id(self):
        with pytest.raises(PaymentSetupError):
            parse_payment_setup({"ledger_entries": [{"amount": 10}]})
