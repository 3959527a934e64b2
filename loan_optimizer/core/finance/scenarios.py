# loan_optimizer/core/finance/scenarios.py
"""
Scenario calculator: the three ways a loan can run around one prepayment.

- original       no prepayment
- reduce_tenure  prepay, keep the EMI, finish earlier
- reduce_emi     prepay, keep the payoff month, pay a lower EMI afterwards

reduce_emi cannot be generated in one pass because the installment changes
mid-stream. It is composed from independently generated pieces:

    phase 1          months 1 .. m-1 at the original EMI
    prepayment row   month m: regular installment plus the lump sum
    phase 2          months m+1 .. the original end month at the re-amortized EMI

Savings on both prepayment scenarios are measured against the original
scenario of the same loan and are never clamped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date

from loan_optimizer.schemas.labels import ScenarioKind
from loan_optimizer.schemas.models import AmortizationRow, LoanParameters, PrepaymentEvent, ScenarioResult

from .amortization import generate_schedule, schedule_totals
from .dates import add_months
from .emi import compute_emi, interest_floor, monthly_rate, round_money, solve_tenure_from_emi
from .errors import EmiInsufficientError

logger = logging.getLogger(__name__)

# Simulation horizon when the borrower supplies their own EMI, which need not
# match the nominal tenure.
EXTENDED_HORIZON_MONTHS = 360


@dataclass(frozen=True)
class ScenarioSet:
    original: ScenarioResult
    reduce_tenure: ScenarioResult
    reduce_emi: ScenarioResult


def resolve_emi(loan: LoanParameters) -> tuple[float, bool]:
    """
    Return (emi, is_custom).

    A supplied EMI wins when, rounded to the rupee, it exceeds the interest-only
    floor; otherwise the formula EMI for the remaining tenure is used.
    """
    if loan.existing_emi is not None:
        custom = round_money(loan.existing_emi)
        if custom > interest_floor(loan.principal, loan.annual_rate):
            return custom, True
        logger.debug("existing EMI %.2f below interest floor; using formula EMI", loan.existing_emi)
    return compute_emi(loan.principal, loan.annual_rate, loan.tenure_months), False


def _simulation_horizon(loan: LoanParameters, emi: float, is_custom: bool) -> int:
    if not is_custom:
        return loan.tenure_months
    # The ledger rounds interest half up, so the first month must retire at
    # least a rupee of principal or the balance never moves.
    if emi - round_money(loan.principal * monthly_rate(loan.annual_rate)) <= 0:
        raise EmiInsufficientError(loan.principal, loan.annual_rate, emi)
    # Raises EmiInsufficientError when the custom EMI never clears the loan.
    projected = solve_tenure_from_emi(loan.principal, loan.annual_rate, emi)
    return max(loan.tenure_months, EXTENDED_HORIZON_MONTHS, projected)


def _build_result(
    kind: ScenarioKind,
    emi: float,
    schedule: list[AmortizationRow],
    start_date: date,
    original: ScenarioResult | None = None,
) -> ScenarioResult:
    tenure = schedule[-1].month if schedule else 0
    total_interest, total_payment = schedule_totals(schedule)
    saved = original.total_interest - total_interest if original is not None else 0.0
    reduced = original.tenure_months - tenure if original is not None else 0
    return ScenarioResult(
        kind=kind,
        emi=emi,
        tenure_months=tenure,
        total_interest=total_interest,
        total_payment=total_payment,
        completion_date=add_months(start_date, tenure),
        interest_saved=saved,
        tenure_reduced_months=reduced,
        schedule=schedule,
    )


def calculate_original(loan: LoanParameters, start_date: date) -> ScenarioResult:
    emi, is_custom = resolve_emi(loan)
    if emi <= 0 or loan.principal <= 0:
        return _build_result(ScenarioKind.original, 0.0, [], start_date)

    horizon = _simulation_horizon(loan, emi, is_custom)
    schedule = generate_schedule(loan.principal, loan.annual_rate, horizon, emi, None, start_date)
    if schedule and schedule[-1].closing_balance > 0:
        raise EmiInsufficientError(loan.principal, loan.annual_rate, emi)
    logger.debug("original: emi=%.0f months=%d custom=%s", emi, len(schedule), is_custom)
    return _build_result(ScenarioKind.original, emi, schedule, start_date)


def calculate_reduce_tenure(
    loan: LoanParameters,
    prepayment: PrepaymentEvent,
    original: ScenarioResult,
    start_date: date,
) -> ScenarioResult:
    if not original.schedule:
        return _build_result(ScenarioKind.reduce_tenure, 0.0, [], start_date, original)

    horizon = max(loan.tenure_months, original.tenure_months)
    schedule = generate_schedule(loan.principal, loan.annual_rate, horizon, original.emi, prepayment, start_date)
    result = _build_result(ScenarioKind.reduce_tenure, original.emi, schedule, start_date, original)
    logger.debug("reduce_tenure: months=%d saved=%.0f", result.tenure_months, result.interest_saved)
    return result


def calculate_reduce_emi(
    loan: LoanParameters,
    prepayment: PrepaymentEvent,
    original: ScenarioResult,
    start_date: date,
) -> ScenarioResult:
    if not original.schedule:
        return _build_result(ScenarioKind.reduce_emi, 0.0, [], start_date, original)

    m = prepayment.month
    payoff = original.tenure_months
    emi = original.emi

    if prepayment.amount <= 0 or m > payoff:
        # The lump sum never lands; the loan runs exactly as scheduled.
        return _build_result(ScenarioKind.reduce_emi, emi, list(original.schedule), start_date, original)

    horizon = max(loan.tenure_months, payoff)
    phase1 = generate_schedule(loan.principal, loan.annual_rate, horizon, emi, None, start_date, max_months=m - 1)
    opening = phase1[-1].closing_balance if phase1 else loan.principal

    prepayment_rows = generate_schedule(
        opening, loan.annual_rate, horizon, emi, prepayment, start_date, month_offset=m - 1, max_months=1
    )
    post_balance = prepayment_rows[-1].closing_balance if prepayment_rows else 0.0

    if post_balance <= 0:
        logger.debug("reduce_emi: prepayment in month %d closes the loan", m)
        return _build_result(ScenarioKind.reduce_emi, 0.0, phase1 + prepayment_rows, start_date, original)

    # A formula EMI is sized for the nominal tenure; the rupee rounding can
    # leave a small residual month after it that must not be re-amortized.
    _, is_custom = resolve_emi(loan)
    end = payoff if is_custom else min(payoff, loan.tenure_months)
    remaining = max(1, end - m)

    # Never below the EMI scaled by the share of balance left after the lump
    # sum: that EMI retires the smaller balance on the original timeline.
    carried = post_balance + prepayment_rows[-1].part_payment
    proportional = float(math.ceil(emi * post_balance / carried))
    new_emi = min(max(compute_emi(post_balance, loan.annual_rate, remaining), proportional), emi)
    phase2 = generate_schedule(post_balance, loan.annual_rate, remaining, new_emi, None, start_date, month_offset=m)

    # Whole-rupee rounding can leave a residual past the payoff month; settle
    # on the smallest EMI that still finishes on time.
    while len(phase2) > remaining and new_emi < emi:
        new_emi = min(new_emi + 1.0, emi)
        phase2 = generate_schedule(post_balance, loan.annual_rate, remaining, new_emi, None, start_date, month_offset=m)

    result = _build_result(ScenarioKind.reduce_emi, new_emi, phase1 + prepayment_rows + phase2, start_date, original)
    logger.debug("reduce_emi: new_emi=%.0f months=%d saved=%.0f", new_emi, result.tenure_months, result.interest_saved)
    return result


def calculate_scenario(
    kind: ScenarioKind,
    loan: LoanParameters,
    prepayment: PrepaymentEvent,
    start_date: date,
    original: ScenarioResult | None = None,
) -> ScenarioResult:
    """Compute one scenario; prepayment scenarios build the original first when it is not supplied."""
    if kind is ScenarioKind.original:
        return calculate_original(loan, start_date)

    base = original if original is not None else calculate_original(loan, start_date)
    if kind is ScenarioKind.reduce_tenure:
        return calculate_reduce_tenure(loan, prepayment, base, start_date)
    if kind is ScenarioKind.reduce_emi:
        return calculate_reduce_emi(loan, prepayment, base, start_date)
    raise ValueError(f"Unknown scenario kind: {kind!r}")


def calculate_scenarios(loan: LoanParameters, prepayment: PrepaymentEvent, start_date: date) -> ScenarioSet:
    original = calculate_scenario(ScenarioKind.original, loan, prepayment, start_date)
    return ScenarioSet(
        original=original,
        reduce_tenure=calculate_scenario(ScenarioKind.reduce_tenure, loan, prepayment, start_date, original),
        reduce_emi=calculate_scenario(ScenarioKind.reduce_emi, loan, prepayment, start_date, original),
    )
