"""Periodic payment, flat repayment schedules and amortization tables.

Pure functions: Decimal in, dataclass out. No I/O.
"""

import calendar
import logging
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from src.models.loan import (
    AmortizationRow,
    AmortizationTable,
    LoanTerms,
    RepaymentFrequency,
    RepaymentRecord,
    ScheduleEntry,
    ScheduleProgress,
    ScheduleStatus,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


class InvalidLoanTerms(ValueError):
    """Principal or tenure is not positive, or the rate is negative."""


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _validate(principal: Decimal, annual_rate_percent: Decimal, periods) -> None:
    if principal <= 0:
        raise InvalidLoanTerms(f"principal must be positive, got {principal}")
    if periods <= 0:
        raise InvalidLoanTerms(f"tenure must be positive, got {periods}")
    if annual_rate_percent < 0:
        raise InvalidLoanTerms(f"interest rate cannot be negative, got {annual_rate_percent}")


def _payment_exact(principal: Decimal, periodic_rate: Decimal, periods: int) -> Decimal:
    """Unrounded annuity payment."""
    if periodic_rate <= 0:
        return principal / periods

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + periodic_rate) ** periods
    if factor == 1:
        logger.debug("Annuity factor collapsed to 1 (rate=%s, n=%s); using straight line",
                     periodic_rate, periods)
        return principal / periods
    return principal * (periodic_rate * factor) / (factor - 1)


def years_to_periods(tenure_years, periods_per_year: int = 12) -> int:
    """Convert a tenure in (possibly fractional) years to a payment count."""
    periods = _to_decimal(tenure_years) * periods_per_year
    return int(periods.quantize(Decimal("1"), ROUND_HALF_UP))


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month's end."""
    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def compute_periodic_payment(principal, annual_rate_percent, tenure_periods: int) -> Decimal:
    """Fixed monthly payment that retires ``principal`` over ``tenure_periods``.

    ``annual_rate_percent`` is a percentage (12 means 12% a year). A zero
    rate divides the principal evenly. Raises InvalidLoanTerms for
    non-positive principal or tenure and for negative rates.
    """
    principal = _to_decimal(principal)
    annual_rate_percent = _to_decimal(annual_rate_percent)
    _validate(principal, annual_rate_percent, tenure_periods)

    monthly_rate = annual_rate_percent / 100 / 12
    payment = _payment_exact(principal, monthly_rate, tenure_periods)
    return payment.quantize(TWO_PLACES, ROUND_HALF_UP)


def generate_schedule(
    terms: LoanTerms,
    start_date: date,
    known_repayments: Iterable[RepaymentRecord] = (),
) -> list[ScheduleEntry]:
    """Expand loan terms into one flat entry per period.

    Every entry carries the same payment; there is no principal/interest
    split. The first payment falls due one month after ``start_date``.
    """
    amount = compute_periodic_payment(
        terms.principal, terms.annual_interest_rate_percent, terms.tenure_periods
    )
    if isinstance(start_date, datetime):
        start_date = start_date.date()

    paid_periods = {r.period_index for r in known_repayments if r.is_paid}

    return [
        ScheduleEntry(
            period_index=period,
            due_date=add_months(start_date, period),
            amount=amount,
            status=ScheduleStatus.PAID if period in paid_periods else ScheduleStatus.PENDING,
        )
        for period in range(1, terms.tenure_periods + 1)
    ]


def schedule_progress(schedule: list[ScheduleEntry]) -> ScheduleProgress:
    """Summarize how much of a repayment schedule has been paid."""
    paid = [e for e in schedule if e.status is ScheduleStatus.PAID]
    amount_paid = sum((e.amount for e in paid), Decimal("0"))
    amount_total = sum((e.amount for e in schedule), Decimal("0"))

    if schedule:
        percent = (Decimal(len(paid)) / Decimal(len(schedule)) * 100).quantize(
            TWO_PLACES, ROUND_HALF_UP
        )
    else:
        percent = Decimal("0")

    return ScheduleProgress(
        paid_count=len(paid),
        total_count=len(schedule),
        percent_paid=percent,
        amount_paid=amount_paid,
        amount_remaining=amount_total - amount_paid,
        is_fully_repaid=bool(schedule) and len(paid) == len(schedule),
    )


def amortization_table(
    principal,
    annual_rate_percent,
    tenure_years,
    frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY,
) -> AmortizationTable:
    """Reducing-balance breakdown of each payment into principal and interest.

    Args:
        principal: Loan amount
        annual_rate_percent: Annual interest rate as a percentage
        tenure_years: Loan term in years (fractions allowed)
        frequency: How often repayments are made
    """
    principal = _to_decimal(principal)
    annual_rate_percent = _to_decimal(annual_rate_percent)
    n_periods = years_to_periods(tenure_years, frequency.periods_per_year)
    _validate(principal, annual_rate_percent, n_periods)

    r = annual_rate_percent / 100 / frequency.periods_per_year
    pmt = _payment_exact(principal, r, n_periods).quantize(TWO_PLACES, ROUND_HALF_UP)

    rows: list[AmortizationRow] = []
    balance = principal
    total_paid = Decimal("0")
    total_interest = Decimal("0")

    for period in range(1, n_periods + 1):
        interest = (balance * r).quantize(TWO_PLACES, ROUND_HALF_UP)
        principal_paid = pmt - interest

        # Final period clears whatever is left
        if period == n_periods or principal_paid > balance:
            principal_paid = balance
        actual_payment = interest + principal_paid

        balance = max(balance - principal_paid, Decimal("0"))
        total_paid += actual_payment
        total_interest += interest

        rows.append(AmortizationRow(
            period=period,
            payment=actual_payment,
            principal=principal_paid,
            interest=interest,
            balance=balance.quantize(TWO_PLACES, ROUND_HALF_UP),
        ))

        if balance == 0:
            break

    return AmortizationTable(
        rows=rows,
        payment_per_period=pmt,
        total_paid=total_paid,
        total_interest=total_interest,
        frequency=frequency,
    )


def mortgage_scenario(
    property_price,
    down_payment,
    annual_rate_percent,
    tenure_years,
) -> AmortizationTable:
    """Monthly amortization of a property price net of the down payment."""
    financed = max(_to_decimal(property_price) - _to_decimal(down_payment), Decimal("0"))
    return amortization_table(financed, annual_rate_percent, tenure_years)


def flat_interest_monthly_payment(loan_amount, annual_rate_percent, tenure_years) -> Decimal:
    """Monthly payment when interest is charged on the original amount for the whole term."""
    loan_amount = _to_decimal(loan_amount)
    annual_rate_percent = _to_decimal(annual_rate_percent)
    tenure_years = _to_decimal(tenure_years)
    _validate(loan_amount, annual_rate_percent, tenure_years)

    total = loan_amount * (1 + annual_rate_percent / 100 * tenure_years)
    return (total / (tenure_years * 12)).quantize(TWO_PLACES, ROUND_HALF_UP)
