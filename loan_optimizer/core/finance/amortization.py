# loan_optimizer/core/finance/amortization.py
"""
Month-by-month amortization ledger: schedule generation, totals and the
per-year roll-up used by reports.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date

from loan_optimizer.schemas.models import AmortizationRow, PrepaymentEvent

from .dates import add_months
from .emi import monthly_rate, round_money

# Extra months simulated past the nominal tenure. Custom EMIs and rounding can
# leave a small residual after the last nominal month; this bounds the loop.
SAFETY_HORIZON_MONTHS = 120


def generate_schedule(
    principal: float,
    annual_rate: float,
    tenure_months: int,
    emi: float,
    prepayment: PrepaymentEvent | None = None,
    start_date: date | None = None,
    *,
    month_offset: int = 0,
    max_months: int | None = None,
) -> list[AmortizationRow]:
    """
    Month-by-month reducing-balance schedule, optionally with one lump-sum prepayment.

    Each month:
        interest  = round(balance * r)
        principal = min(emi - interest, balance)
        part      = min(prepayment.amount, balance - principal)   (prepayment month only)
        closing   = max(0, balance - principal - part)

    Generation stops the month the balance reaches zero, after
    ``tenure_months + SAFETY_HORIZON_MONTHS`` rows, or after ``max_months`` rows.

    Continuation:
        ``principal`` is the opening balance and ``month_offset`` the number of
        months already elapsed, so a later phase of a loan can be generated on
        its own and appended to an earlier one. ``prepayment.month`` and
        ``start_date`` are always in absolute loan months.
    """
    r = monthly_rate(annual_rate)
    cap = tenure_months + SAFETY_HORIZON_MONTHS
    if max_months is not None:
        cap = min(cap, max_months)

    rows: list[AmortizationRow] = []
    balance = float(principal)

    for i in range(1, cap + 1):
        if balance <= 0:
            break
        month = month_offset + i
        opening = balance
        interest = round_money(opening * r)
        principal_paid = min(emi - interest, opening)

        part = 0.0
        if prepayment is not None and prepayment.amount > 0 and month == prepayment.month:
            part = min(prepayment.amount, opening - principal_paid)

        closing = max(0.0, opening - principal_paid - part)
        rows.append(
            AmortizationRow(
                month=month,
                year=math.ceil(month / 12),
                opening_balance=round_money(opening),
                interest_component=interest,
                principal_component=round_money(principal_paid),
                part_payment=round_money(part),
                closing_balance=round_money(closing),
                installment=round_money(interest + principal_paid),
                due_date=add_months(start_date, month - 1) if start_date is not None else None,
            )
        )
        balance = closing

    return rows


def schedule_totals(schedule: Sequence[AmortizationRow]) -> tuple[float, float]:
    """Return (total_interest, total_payment) where payment = installments + part payments."""
    interest = sum(row.interest_component for row in schedule)
    payment = sum(row.installment + row.part_payment for row in schedule)
    return interest, payment


def aggregate_by_year(schedule: Sequence[AmortizationRow]) -> list[AmortizationRow]:
    """
    Roll a monthly schedule up to one row per loan year.

    Opening balance is the first month's, closing balance the last month's;
    interest, principal, part payments and installments are summed.
    """
    years: dict[int, AmortizationRow] = {}
    for row in schedule:
        acc = years.get(row.year)
        if acc is None:
            years[row.year] = row.model_copy(update={"due_date": None})
            continue
        years[row.year] = acc.model_copy(
            update={
                "month": row.month,
                "interest_component": acc.interest_component + row.interest_component,
                "principal_component": acc.principal_component + row.principal_component,
                "part_payment": acc.part_payment + row.part_payment,
                "installment": acc.installment + row.installment,
                "closing_balance": row.closing_balance,
            }
        )
    return list(years.values())
