"""Payment timeline, milestones and totals reconciliation for a property purchase.

Pure functions over in-memory records. The only side effect is a warning
log when the reconstructed total disagrees with the backend's figure.
"""

import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from src.models.payments import (
    MILESTONE_PERCENTAGES,
    EventStatus,
    EventType,
    LedgerEntry,
    MethodBreakdown,
    Milestone,
    PaymentChannel,
    PaymentEvent,
    PaymentHistoryEntry,
    PaymentJourney,
    PaymentSetup,
    PaymentStats,
    PlanSetupEvent,
    ScheduleApprovalEvent,
    TimelineEvent,
    TotalsCheck,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
COMPLETED_STATUSES = {"completed", "success"}

_CHANNELS = {
    "mortgage": PaymentChannel.MORTGAGE,
    "cooperative": PaymentChannel.COOPERATIVE,
    "equity_wallet": PaymentChannel.WALLET,
    "wallet": PaymentChannel.WALLET,
    "loan": PaymentChannel.LOAN,
    "cash": PaymentChannel.CASH,
}

_APPROVAL_TITLES = {
    "mortgage": "Mortgage Schedule Approved",
    "cooperative": "Cooperative Deduction Schedule Approved",
}

_APPROVAL_DESCRIPTIONS = {
    "mortgage": "Mortgage repayment schedule has been approved",
    "cooperative": "Cooperative deduction schedule has been approved",
}


def method_label(method: str | None) -> str:
    """Human label for a payment method: "equity_wallet" -> "Equity Wallet"."""
    if not method:
        return "Payment"
    return re.sub(r"\b\w", lambda m: m.group().upper(), method.replace("_", " "))


def method_channel(method: str | None) -> PaymentChannel:
    if not method:
        return PaymentChannel.CASH
    return _CHANNELS.get(method.lower(), PaymentChannel.CASH)


def _status(raw: str | None) -> EventStatus:
    if raw and raw.lower() in COMPLETED_STATUSES:
        return EventStatus.COMPLETED
    return EventStatus.PENDING


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _format_amount(amount: Decimal | None) -> str:
    return f"{amount or Decimal('0'):,.2f}"


def _payment_event(
    event_id: str,
    timestamp: datetime | None,
    method: str | None,
    amount: Decimal | None,
    status: str | None,
    description: str,
    now: datetime,
) -> TimelineEvent:
    label = method_label(method)
    return TimelineEvent(
        id=event_id,
        timestamp=_as_utc(timestamp) if timestamp else now,
        event_type=EventType.PAYMENT,
        title=f"Payment via {label}",
        description=description,
        status=_status(status),
        amount=amount,
        source_label=label,
        channel=method_channel(method),
        timestamp_defaulted=timestamp is None,
    )


def _to_timeline_event(event: PaymentEvent, now: datetime) -> TimelineEvent | None:
    if isinstance(event, PaymentHistoryEntry):
        return _payment_event(
            f"payment-{event.id}",
            event.created_at,
            event.payment_method,
            event.amount,
            event.status,
            event.description or f"Payment of {_format_amount(event.amount)}",
            now,
        )

    if isinstance(event, LedgerEntry):
        if not event.is_credit:
            return None
        return _payment_event(
            f"ledger-{event.id}",
            event.paid_at or event.created_at,
            event.source,
            event.amount,
            event.status,
            f"Ledger entry: {_format_amount(event.amount)}",
            now,
        )

    if isinstance(event, PlanSetupEvent):
        return TimelineEvent(
            id="plan-setup",
            timestamp=_as_utc(event.created_at) if event.created_at else now,
            event_type=EventType.PLAN_SETUP,
            title="Payment Plan Created",
            description=(
                f"Payment plan configured with {len(event.selected_methods)} payment method(s)"
            ),
            status=EventStatus.COMPLETED,
            timestamp_defaulted=event.created_at is None,
        )

    if isinstance(event, ScheduleApprovalEvent):
        if not event.approved:
            return None
        key = event.schedule.lower()
        label = method_label(event.schedule)
        return TimelineEvent(
            id=f"{key}-approval",
            timestamp=_as_utc(event.approved_at) if event.approved_at else now,
            event_type=EventType.SCHEDULE_APPROVAL,
            title=_APPROVAL_TITLES.get(key, f"{label} Schedule Approved"),
            description=_APPROVAL_DESCRIPTIONS.get(
                key, f"{label} repayment schedule has been approved"
            ),
            status=EventStatus.COMPLETED,
            timestamp_defaulted=event.approved_at is None,
        )

    raise TypeError(f"Unsupported payment event: {type(event).__name__}")


def build_timeline(
    events: Iterable[PaymentEvent],
    plan_setup: PlanSetupEvent | None = None,
    schedule_approvals: Iterable[ScheduleApprovalEvent] | None = None,
    now: datetime | None = None,
) -> list[TimelineEvent]:
    """Merge payment records into one timeline, most recent first.

    Records without a timestamp are stamped with ``now`` (a single instant
    per call, UTC) and flagged via ``timestamp_defaulted``; they therefore
    sort to the top. Ledger debits and unapproved schedules are skipped.
    """
    now = _as_utc(now) if now else datetime.now(timezone.utc)

    sources: list[PaymentEvent] = list(events)
    if plan_setup is not None:
        sources.append(plan_setup)
    if schedule_approvals:
        sources.extend(schedule_approvals)

    timeline = [e for e in (_to_timeline_event(s, now) for s in sources) if e is not None]
    # sorted() is stable, so ties keep input order
    return sorted(timeline, key=lambda e: e.timestamp, reverse=True)


def _completed_payments_ascending(timeline: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    payments = [e for e in timeline if e.is_completed_payment and e.amount is not None]
    return sorted(payments, key=lambda e: e.timestamp)


def reconstructed_total(timeline: Iterable[TimelineEvent]) -> Decimal:
    """Sum of completed payment amounts on the timeline."""
    return sum(
        (e.amount for e in timeline if e.is_completed_payment and e.amount is not None),
        Decimal("0"),
    )


def compute_milestones(
    timeline: list[TimelineEvent],
    target_price: Decimal,
    total_paid: Decimal | None = None,
) -> list[Milestone]:
    """Evaluate the 25/50/75/100% milestones against the target price.

    ``achieved`` compares ``total_paid`` (the backend's authoritative figure,
    falling back to the timeline sum) with each threshold. ``achieved_at`` is
    the first payment, walking oldest to newest, at which the running sum of
    timeline payments reaches the threshold. The two can disagree, leaving an
    achieved milestone without a date.
    """
    target_price = Decimal(str(target_price))
    if target_price <= 0:
        return [
            Milestone(percentage=pct, threshold=Decimal("0"), achieved=False)
            for pct in MILESTONE_PERCENTAGES
        ]

    ascending = _completed_payments_ascending(timeline)
    if total_paid is None:
        total_paid = sum((e.amount for e in ascending), Decimal("0"))

    milestones: list[Milestone] = []
    for pct in MILESTONE_PERCENTAGES:
        threshold = Decimal(pct) / 100 * target_price
        achieved = total_paid >= threshold

        achieved_at = None
        if achieved:
            running = Decimal("0")
            for payment in ascending:
                running += payment.amount
                if running >= threshold:
                    achieved_at = payment.timestamp
                    break

        milestones.append(Milestone(
            percentage=pct,
            threshold=threshold,
            achieved=achieved,
            achieved_at=achieved_at,
        ))

    return milestones


def payment_stats(timeline: Iterable[TimelineEvent]) -> PaymentStats:
    """Count, sum, mean and per-method breakdown of completed payments."""
    count = 0
    total = Decimal("0")
    groups: dict[str, tuple[int, Decimal]] = {}

    for event in timeline:
        if not event.is_completed_payment:
            continue
        amount = event.amount or Decimal("0")
        count += 1
        total += amount
        label = event.source_label or "Unknown"
        group_count, group_total = groups.get(label, (0, Decimal("0")))
        groups[label] = (group_count + 1, group_total + amount)

    average = (total / count).quantize(TWO_PLACES, ROUND_HALF_UP) if count else Decimal("0")

    return PaymentStats(
        total_payments=count,
        total_paid=total,
        average_payment=average,
        by_method=tuple(
            MethodBreakdown(label=label, count=c, total=t) for label, (c, t) in groups.items()
        ),
    )


def check_totals(
    timeline: list[TimelineEvent],
    milestones: list[Milestone],
    authoritative_total: Decimal | None,
    tolerance: Decimal = TWO_PLACES,
) -> TotalsCheck:
    """Flag divergence between the backend total and the timeline sum.

    A missing backend total counts as 0 and is never consistent.
    """
    missing = authoritative_total is None
    if missing:
        authoritative_total = Decimal("0")

    reconstructed = reconstructed_total(timeline)
    difference = authoritative_total - reconstructed
    undated = tuple(m.percentage for m in milestones if m.achieved and m.achieved_at is None)
    consistent = abs(difference) <= tolerance and not undated and not missing

    if not consistent:
        logger.warning(
            "Payment totals disagree: backend=%s timeline=%s difference=%s "
            "undated_milestones=%s backend_total_missing=%s",
            authoritative_total, reconstructed, difference, list(undated), missing,
        )

    return TotalsCheck(
        authoritative_total=authoritative_total,
        reconstructed_total=reconstructed,
        difference=difference,
        consistent=consistent,
        undated_milestones=undated,
        backend_total_missing=missing,
    )


def progress_percent(price: Decimal, total_paid: Decimal, reported: Decimal | None = None) -> Decimal:
    """Percent of the price paid; the backend's own figure wins when present."""
    if reported is not None:
        return reported.quantize(TWO_PLACES, ROUND_HALF_UP)
    if price <= 0:
        return Decimal("0")
    return (total_paid / price * 100).quantize(TWO_PLACES, ROUND_HALF_UP)


def build_journey(
    setup: PaymentSetup,
    now: datetime | None = None,
    tolerance: Decimal = TWO_PLACES,
) -> PaymentJourney:
    """Timeline, milestones, stats and totals check for one property."""
    now = _as_utc(now) if now else datetime.now(timezone.utc)

    timeline = build_timeline(
        setup.events,
        plan_setup=setup.plan_setup,
        schedule_approvals=setup.schedule_approvals,
        now=now,
    )
    target = setup.target
    # No backend figure means nothing paid as far as the backend knows
    authoritative = target.total_paid if target.total_paid is not None else Decimal("0")
    milestones = compute_milestones(timeline, target.price, total_paid=authoritative)

    return PaymentJourney(
        timeline=timeline,
        milestones=milestones,
        stats=payment_stats(timeline),
        totals=check_totals(timeline, milestones, target.total_paid, tolerance=tolerance),
        progress_percent=progress_percent(target.price, authoritative, target.progress),
        generated_at=now,
    )
