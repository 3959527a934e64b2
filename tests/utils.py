# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from loan_optimizer.schemas.labels import AllocationStrategy, RiskProfile
from loan_optimizer.schemas.models import (
    LoanOptimizerInput,
    LoanParameters,
    LoanRecord,
    MultiPropertyInput,
    PrepaymentEvent,
)

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_START = date(2025, 1, 1)

# ₹40L @ 8.5% over 20 years; EMI ≈ ₹34,713
DEFAULT_PRINCIPAL = 4_000_000.0
DEFAULT_RATE = 0.085
DEFAULT_TENURE = 240

DEFAULT_PREPAYMENT = 500_000.0
DEFAULT_PREPAYMENT_MONTH = 12


# -----------------------------
# Single-loan factories
# -----------------------------


def make_loan(
    principal: float = DEFAULT_PRINCIPAL,
    annual_rate: float = DEFAULT_RATE,
    tenure_months: int = DEFAULT_TENURE,
    **overrides: Any,
) -> LoanParameters:
    return LoanParameters(principal=principal, annual_rate=annual_rate, tenure_months=tenure_months, **overrides)


def make_prepayment(amount: float = DEFAULT_PREPAYMENT, month: int = DEFAULT_PREPAYMENT_MONTH) -> PrepaymentEvent:
    return PrepaymentEvent(amount=amount, month=month)


def make_request(
    loan: LoanParameters | None = None,
    prepayment: PrepaymentEvent | None = None,
    *,
    has_emergency_fund: bool = True,
    risk_profile: RiskProfile = RiskProfile.medium,
) -> LoanOptimizerInput:
    return LoanOptimizerInput(
        loan=loan or make_loan(),
        prepayment=prepayment or make_prepayment(),
        has_emergency_fund=has_emergency_fund,
        risk_profile=risk_profile,
        start_date=DEFAULT_START,
    )


# -----------------------------
# Portfolio factories
# -----------------------------


def make_record(loan_id: str, principal: float, annual_rate: float, tenure_months: int = 180) -> LoanRecord:
    return LoanRecord(
        loan_id=loan_id,
        name=f"Property {loan_id}",
        loan=make_loan(principal=principal, annual_rate=annual_rate, tenure_months=tenure_months),
    )


def make_portfolio(
    records: list[LoanRecord] | None = None,
    *,
    total: float = 1_000_000.0,
    strategy: AllocationStrategy = AllocationStrategy.highest_rate,
    manual: dict[str, float] | None = None,
    month: int = 1,
    has_emergency_fund: bool = True,
    risk_profile: RiskProfile = RiskProfile.medium,
) -> MultiPropertyInput:
    if records is None:
        records = [
            make_record("a", 3_000_000.0, 0.085, 240),
            make_record("b", 800_000.0, 0.105, 120),
            make_record("c", 1_500_000.0, 0.092, 180),
        ]
    return MultiPropertyInput(
        loans=records,
        total_prepayment_amount=total,
        prepayment_month=month,
        strategy=strategy,
        manual_allocations=manual,
        has_emergency_fund=has_emergency_fund,
        risk_profile=risk_profile,
        start_date=DEFAULT_START,
    )


# -----------------------------
# Canonical JSON payloads
# -----------------------------

SINGLE_PAYLOAD: dict[str, Any] = {
    "loan": {"principal": "40L", "annual_rate": 8.5, "tenure_months": 240},
    "prepayment": {"amount": "5 lakh", "month": 12},
    "has_emergency_fund": True,
    "risk_profile": "medium",
    "start_date": "2025-01-01",
}

PORTFOLIO_PAYLOAD: dict[str, Any] = {
    "loans": [
        {"loan_id": "home", "name": "Flat", "loan": {"principal": "30L", "annual_rate": 0.085, "tenure_months": 240}},
        {"loan_id": "plot", "name": "Plot", "loan": {"principal": "8,00,000", "annual_rate": 10.5, "tenure_months": 120}},
    ],
    "total_prepayment_amount": "10L",
    "prepayment_month": 3,
    "strategy": "smallest_balance",
    "start_date": "2025-01-01",
}
