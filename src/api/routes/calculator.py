"""Mortgage and loan calculator routes."""

from decimal import Decimal

from fastapi import APIRouter, HTTPException

from src.api.schemas import (
    AmortizationRequest,
    AmortizationResponse,
    AmortizationRowResponse,
    MortgageScenarioRequest,
    PaymentRequest,
    PaymentResponse,
    ScheduleEntryResponse,
    ScheduleProgressResponse,
    ScheduleRequest,
    ScheduleResponse,
)
from src.engine.amortization import (
    InvalidLoanTerms,
    amortization_table,
    compute_periodic_payment,
    flat_interest_monthly_payment,
    generate_schedule,
    mortgage_scenario,
    schedule_progress,
)
from src.models.loan import AmortizationTable, LoanTerms, RepaymentFrequency, RepaymentRecord

router = APIRouter(prefix="/api/v1/calculator", tags=["calculator"])


def _table_to_response(table: AmortizationTable) -> AmortizationResponse:
    return AmortizationResponse(
        frequency=table.frequency.value,
        payment_per_period=table.payment_per_period,
        total_paid=table.total_paid,
        total_interest=table.total_interest,
        rows=[
            AmortizationRowResponse(
                period=r.period,
                payment=r.payment,
                principal=r.principal,
                interest=r.interest,
                balance=r.balance,
            )
            for r in table.rows
        ],
    )


@router.post("/payment", response_model=PaymentResponse)
async def periodic_payment(req: PaymentRequest):
    """Fixed monthly payment, plus the simple-interest estimate for comparison."""
    try:
        payment = compute_periodic_payment(
            req.principal, req.annual_interest_rate_percent, req.tenure_periods
        )
        flat = flat_interest_monthly_payment(
            req.principal, req.annual_interest_rate_percent, Decimal(req.tenure_periods) / 12
        )
    except InvalidLoanTerms as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PaymentResponse(periodic_payment=payment, flat_interest_payment=flat)


@router.post("/schedule", response_model=ScheduleResponse)
async def repayment_schedule(req: ScheduleRequest):
    terms = LoanTerms(
        principal=req.principal,
        annual_interest_rate_percent=req.annual_interest_rate_percent,
        tenure_periods=req.tenure_periods,
    )
    repayments = [
        RepaymentRecord(period_index=r.period_index, status=r.status, paid_at=r.paid_at)
        for r in req.repayments
    ]
    try:
        schedule = generate_schedule(terms, req.start_date, repayments)
    except InvalidLoanTerms as e:
        raise HTTPException(status_code=400, detail=str(e))

    progress = schedule_progress(schedule)
    return ScheduleResponse(
        periodic_payment=schedule[0].amount,
        entries=[
            ScheduleEntryResponse(
                period_index=e.period_index,
                due_date=e.due_date,
                amount=e.amount,
                status=e.status.value,
            )
            for e in schedule
        ],
        progress=ScheduleProgressResponse(
            paid_count=progress.paid_count,
            total_count=progress.total_count,
            percent_paid=progress.percent_paid,
            amount_paid=progress.amount_paid,
            amount_remaining=progress.amount_remaining,
            is_fully_repaid=progress.is_fully_repaid,
        ),
    )


@router.post("/amortization", response_model=AmortizationResponse)
async def amortization(req: AmortizationRequest):
    try:
        frequency = RepaymentFrequency(req.frequency.lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown frequency: {req.frequency}")

    try:
        table = amortization_table(
            req.principal, req.annual_interest_rate_percent, req.tenure_years, frequency
        )
    except InvalidLoanTerms as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _table_to_response(table)


@router.post("/mortgage", response_model=AmortizationResponse)
async def mortgage(req: MortgageScenarioRequest):
    """Monthly amortization of the property price less the down payment."""
    try:
        table = mortgage_scenario(
            req.property_price,
            req.down_payment,
            req.annual_interest_rate_percent,
            req.tenure_years,
        )
    except InvalidLoanTerms as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _table_to_response(table)
