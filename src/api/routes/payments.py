"""Payment journey routes: timeline, milestones and totals for a property."""

from fastapi import APIRouter, Body, HTTPException

from src.api.schemas import (
    MethodBreakdownResponse,
    MilestoneResponse,
    PaymentJourneyResponse,
    PaymentStatsResponse,
    TimelineEventResponse,
    TotalsCheckResponse,
)
from src.config import settings
from src.data.payment_setup import PaymentSetupError, parse_payment_setup
from src.engine.reconciler import build_journey
from src.models.payments import PaymentJourney

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


def journey_to_response(journey: PaymentJourney, property_id: str | None = None) -> PaymentJourneyResponse:
    """Convert engine PaymentJourney to API response."""
    stats = journey.stats
    totals = journey.totals
    return PaymentJourneyResponse(
        property_id=property_id or None,
        progress_percent=journey.progress_percent,
        timeline=[
            TimelineEventResponse(
                id=e.id,
                timestamp=e.timestamp,
                event_type=e.event_type.value,
                title=e.title,
                description=e.description,
                status=e.status.value,
                amount=e.amount,
                source_label=e.source_label,
                channel=e.channel.value if e.channel else None,
                timestamp_defaulted=e.timestamp_defaulted,
            )
            for e in journey.timeline
        ],
        milestones=[
            MilestoneResponse(
                percentage=m.percentage,
                threshold=m.threshold,
                achieved=m.achieved,
                achieved_at=m.achieved_at,
            )
            for m in journey.milestones
        ],
        stats=PaymentStatsResponse(
            total_payments=stats.total_payments,
            total_paid=stats.total_paid,
            average_payment=stats.average_payment,
            by_method=[
                MethodBreakdownResponse(label=b.label, count=b.count, total=b.total)
                for b in stats.by_method
            ],
        ),
        totals=TotalsCheckResponse(
            authoritative_total=totals.authoritative_total,
            reconstructed_total=totals.reconstructed_total,
            difference=totals.difference,
            consistent=totals.consistent,
            undated_milestones=list(totals.undated_milestones),
            backend_total_missing=totals.backend_total_missing,
        ),
    )


@router.post("/journey", response_model=PaymentJourneyResponse)
async def payment_journey(payload: dict = Body(...)):
    """Build the journey from a payment-setup payload shaped like the backend's ``data``."""
    try:
        setup = parse_payment_setup(payload)
    except PaymentSetupError as e:
        raise HTTPException(status_code=400, detail=str(e))

    journey = build_journey(setup, tolerance=settings.totals_tolerance)
    return journey_to_response(journey, setup.property_id)
