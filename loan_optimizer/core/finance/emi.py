# loan_optimizer/core/finance/emi.py
"""
EMI engine: the closed-form installment and its inverse.

Monthly reducing-balance convention used by Indian lenders:

    EMI = P * r * (1 + r)^n / ((1 + r)^n - 1),   r = annual_rate / 12

and, for a fixed EMI, the number of months needed to clear P:

    n = ln(EMI / (EMI - P * r)) / ln(1 + r)

Money is rounded to whole rupees, halves up, once per computed value.
"""

from __future__ import annotations

import math

from .errors import EmiInsufficientError


def round_money(x: float) -> float:
    """Nearest whole rupee with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return float(math.floor(x + 0.5))


def monthly_rate(annual_rate: float) -> float:
    return annual_rate / 12.0


def interest_floor(principal: float, annual_rate: float) -> float:
    """Interest-only payment in whole rupees (floored); an EMI must exceed it to be usable."""
    return float(math.floor(principal * monthly_rate(annual_rate)))


def compute_emi(principal: float, annual_rate: float, tenure_months: int) -> float:
    """
    Equated monthly installment for a fully amortizing loan.

    Returns 0.0 when any input is non-positive; callers treat a zero EMI as
    "no real schedule" rather than an error.
    """
    if principal <= 0 or annual_rate <= 0 or tenure_months <= 0:
        return 0.0

    r = monthly_rate(annual_rate)
    growth = (1.0 + r) ** tenure_months
    return round_money(principal * r * growth / (growth - 1.0))


def solve_tenure_from_emi(principal: float, annual_rate: float, emi: float) -> int:
    """
    Months needed to repay ``principal`` with a fixed ``emi`` (rounded up).

    Returns 0 when any input is non-positive.

    Raises:
        EmiInsufficientError: if ``emi`` does not exceed the monthly interest.
    """
    if principal <= 0 or annual_rate <= 0 or emi <= 0:
        return 0

    r = monthly_rate(annual_rate)
    if emi <= principal * r:
        raise EmiInsufficientError(principal, annual_rate, emi)

    n = math.log(emi / (emi - principal * r)) / math.log(1.0 + r)
    return math.ceil(n)
