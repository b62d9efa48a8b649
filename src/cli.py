"""CLI for the mortgage calculators.

Usage:
    python -m src.cli payment 1000000 12 --months 12
    python -m src.cli schedule 1000000 12 --months 12 --start 2025-01-15 --paid 1 2
    python -m src.cli amortize 25000000 12 --years 5 --frequency quarterly
"""

import argparse
import sys
from datetime import date
from decimal import Decimal

from src.engine.amortization import (
    InvalidLoanTerms,
    amortization_table,
    compute_periodic_payment,
    generate_schedule,
    schedule_progress,
)
from src.models.loan import LoanTerms, RepaymentFrequency, RepaymentRecord


def print_schedule(schedule, progress) -> None:
    print(f"\n{'=' * 50}")
    print(f"  Repayment Schedule ({progress.total_count} payments)")
    print(f"{'=' * 50}")
    for entry in schedule:
        print(f"  {entry.period_index:>4}  {entry.due_date.isoformat()}  "
              f"{entry.amount:>16,.2f}  {entry.status.value}")
    print()
    print(f"  Paid:       {progress.paid_count}/{progress.total_count} ({progress.percent_paid}%)")
    print(f"  Remaining:  {progress.amount_remaining:,.2f}")
    print()


def print_table(table) -> None:
    print(f"\n{'=' * 72}")
    print(f"  Amortization ({table.frequency.value}), {table.payment_per_period:,.2f} per period")
    print(f"{'=' * 72}")
    print(f"  {'Period':>6}  {'Payment':>14}  {'Principal':>14}  {'Interest':>14}  {'Balance':>14}")
    for row in table.rows:
        print(f"  {row.period:>6}  {row.payment:>14,.2f}  {row.principal:>14,.2f}  "
              f"{row.interest:>14,.2f}  {row.balance:>14,.2f}")
    print()
    print(f"  Total paid:      {table.total_paid:,.2f}")
    print(f"  Total interest:  {table.total_interest:,.2f}")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mortgage and loan calculators")
    sub = parser.add_subparsers(dest="command", required=True)

    pay = sub.add_parser("payment", help="Fixed monthly payment")
    pay.add_argument("principal", type=Decimal)
    pay.add_argument("rate", type=Decimal, help="Annual interest rate in percent")
    pay.add_argument("--months", type=int, required=True)

    sched = sub.add_parser("schedule", help="Flat repayment schedule with due dates")
    sched.add_argument("principal", type=Decimal)
    sched.add_argument("rate", type=Decimal, help="Annual interest rate in percent")
    sched.add_argument("--months", type=int, required=True)
    sched.add_argument("--start", type=date.fromisoformat, default=date.today())
    sched.add_argument("--paid", type=int, nargs="*", default=[], help="Periods already paid")

    amort = sub.add_parser("amortize", help="Principal/interest breakdown per period")
    amort.add_argument("principal", type=Decimal)
    amort.add_argument("rate", type=Decimal, help="Annual interest rate in percent")
    amort.add_argument("--years", type=Decimal, required=True)
    amort.add_argument(
        "--frequency",
        choices=[f.value for f in RepaymentFrequency],
        default=RepaymentFrequency.MONTHLY.value,
    )

    args = parser.parse_args(argv)

    try:
        if args.command == "payment":
            pmt = compute_periodic_payment(args.principal, args.rate, args.months)
            print(f"Monthly payment: {pmt:,.2f}")
        elif args.command == "schedule":
            terms = LoanTerms(args.principal, args.rate, args.months)
            paid = [RepaymentRecord(period_index=p, status="paid") for p in args.paid]
            schedule = generate_schedule(terms, args.start, paid)
            print_schedule(schedule, schedule_progress(schedule))
        else:
            table = amortization_table(
                args.principal, args.rate, args.years, RepaymentFrequency(args.frequency)
            )
            print_table(table)
    except InvalidLoanTerms as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
