# loan_optimizer/core/allocation/allocator.py
"""
Multi-loan prepayment allocator.

Splits one prepayment budget across a portfolio of loans, then runs the full
single-loan optimizer on every loan with its share.

Strategies
----------
- highest_rate      interest rate descending ("avalanche")
- smallest_balance  principal ascending ("snowball")
- manual            caller percentages of the total budget, in caller order

Greedy strategies give each loan min(remaining budget, principal). Manual
shares are round(total * pct / 100), clamped to the loan's principal and to
what is left of the budget; every clamp and a percentage total other than 100
is reported as an AllocationIssue while allocation continues best-effort.

Invariant: total_prepayment_used + remaining_budget == total_prepayment_amount.
Budget and principals arrive as whole rupees (the input models round them), so
every share is a whole rupee and the invariant holds exactly.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from loan_optimizer.core.engine import run_loan_optimizer
from loan_optimizer.core.finance.emi import round_money
from loan_optimizer.core.strategy.advisor import STRATEGY_EXPLANATIONS, generate_portfolio_recommendations
from loan_optimizer.schemas.labels import AllocationIssueCode, AllocationStrategy
from loan_optimizer.schemas.models import (
    AllocationIssue,
    LoanOptimizerInput,
    LoanRecord,
    MultiLoanAllocation,
    MultiPropertyInput,
    MultiPropertyResult,
    PrepaymentEvent,
)

logger = logging.getLogger(__name__)

_PCT_TOLERANCE = 1e-6


def order_loans(loans: Sequence[LoanRecord], strategy: AllocationStrategy) -> list[LoanRecord]:
    """Strategy order (stable: ties keep caller order)."""
    if strategy is AllocationStrategy.highest_rate:
        return sorted(loans, key=lambda rec: -rec.loan.annual_rate)
    if strategy is AllocationStrategy.smallest_balance:
        return sorted(loans, key=lambda rec: rec.loan.principal)
    return list(loans)


def validate_manual_allocations(data: MultiPropertyInput) -> list[AllocationIssue]:
    """Check that the manual percentages of the portfolio's loans add up to 100."""
    pcts = data.manual_allocations or {}
    total = sum(pcts.get(rec.loan_id, 0.0) for rec in data.loans)
    if abs(total - 100.0) <= _PCT_TOLERANCE:
        return []
    return [
        AllocationIssue(
            code=AllocationIssueCode.percentages_not_summing_100,
            message=f"Manual percentages add up to {total:g}%, not 100%.",
        )
    ]


def plan_allocations(data: MultiPropertyInput) -> tuple[list[tuple[LoanRecord, float]], float, list[AllocationIssue]]:
    """
    Decide each loan's share without running any scenario.

    Returns (ordered (loan, amount) pairs, remaining budget, issues).
    """
    ordered = order_loans(data.loans, data.strategy)
    manual = data.strategy is AllocationStrategy.manual
    pcts = data.manual_allocations or {}
    issues = validate_manual_allocations(data) if manual else []

    remaining = data.total_prepayment_amount
    plan: list[tuple[LoanRecord, float]] = []

    for rec in ordered:
        principal = max(0.0, rec.loan.principal)
        if not manual:
            amount = min(remaining, principal)
        else:
            amount = round_money(data.total_prepayment_amount * pcts.get(rec.loan_id, 0.0) / 100.0)
            if amount > principal:
                issues.append(
                    AllocationIssue(
                        code=AllocationIssueCode.allocation_clamped_to_principal,
                        loan_id=rec.loan_id,
                        message=f"Share {amount:,.0f} exceeds outstanding principal {principal:,.0f}; clamped.",
                    )
                )
                amount = principal
            if amount > remaining:
                issues.append(
                    AllocationIssue(
                        code=AllocationIssueCode.allocation_over_budget,
                        loan_id=rec.loan_id,
                        message=f"Share {amount:,.0f} exceeds the remaining budget {remaining:,.0f}; clamped.",
                    )
                )
                amount = remaining
        remaining -= amount
        plan.append((rec, amount))

    return plan, remaining, issues


def _allocate_one(rec: LoanRecord, amount: float, rank: int, data: MultiPropertyInput) -> MultiLoanAllocation:
    result = run_loan_optimizer(
        LoanOptimizerInput(
            loan=rec.loan,
            prepayment=PrepaymentEvent(amount=amount, month=data.prepayment_month),
            has_emergency_fund=data.has_emergency_fund,
            risk_profile=data.risk_profile,
            start_date=data.start_date,
        )
    )
    return MultiLoanAllocation(
        loan_id=rec.loan_id,
        name=rec.name,
        rank=rank,
        annual_rate=rec.loan.annual_rate,
        principal=rec.loan.principal,
        allocated_amount=amount,
        original_emi=result.original.emi,
        new_emi=result.reduce_emi.emi,
        original_total_interest=result.original.total_interest,
        interest_saved_reduce_tenure=result.reduce_tenure.interest_saved,
        tenure_reduced_months=result.reduce_tenure.tenure_reduced_months,
        interest_saved_reduce_emi=result.reduce_emi.interest_saved,
        result=result,
    )


def allocate_prepayment(data: MultiPropertyInput) -> MultiPropertyResult:
    plan, remaining, issues = plan_allocations(data)
    for issue in issues:
        logger.warning("allocation issue [%s] %s", issue.code.value, issue.message)

    allocations = [_allocate_one(rec, amount, rank, data) for rank, (rec, amount) in enumerate(plan, start=1)]

    funded = [a for a in allocations if a.allocated_amount > 0]
    total_interest_saved = sum(a.interest_saved_reduce_tenure for a in allocations)
    total_tenure_reduced = (
        int(math.floor(sum(a.tenure_reduced_months for a in funded) / len(funded) + 0.5)) if funded else 0
    )

    logger.debug(
        "allocator: strategy=%s loans=%d used=%.0f remaining=%.0f",
        data.strategy.value,
        len(allocations),
        data.total_prepayment_amount - remaining,
        remaining,
    )

    return MultiPropertyResult(
        allocations=allocations,
        total_interest_saved=total_interest_saved,
        total_tenure_reduced=total_tenure_reduced,
        total_prepayment_used=data.total_prepayment_amount - remaining,
        remaining_budget=remaining,
        strategy=data.strategy,
        strategy_explanation=STRATEGY_EXPLANATIONS[data.strategy],
        recommendations=generate_portfolio_recommendations(data, total_interest_saved, remaining),
        issues=issues,
        prepayment_month=data.prepayment_month,
    )
