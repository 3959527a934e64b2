# loan_optimizer/core/finance/errors.py
"""
Typed errors for the loan engine.

Exports
-------
- LoanOptimizerError      (base, a ValueError)
- EmiInsufficientError    (EMI never retires the principal)
- ENGINE_ERRORS

Invalid (non-positive) loan inputs are *not* errors: the engine answers them
with zero results.
"""

from __future__ import annotations

# =========================
# Exception types
# =========================


class LoanOptimizerError(ValueError):
    """Base class for loan engine failures."""


class EmiInsufficientError(LoanOptimizerError):
    """The EMI does not cover the monthly interest, so the loan never amortizes."""

    def __init__(self, principal: float, annual_rate: float, emi: float) -> None:
        self.principal = principal
        self.annual_rate = annual_rate
        self.emi = emi
        self.interest_floor = principal * annual_rate / 12.0
        super().__init__(
            f"EMI {emi:,.2f} does not cover monthly interest {self.interest_floor:,.2f} "
            f"on principal {principal:,.0f} at {annual_rate:.2%}"
        )


ENGINE_ERRORS = (EmiInsufficientError,)

__all__ = [
    "LoanOptimizerError",
    "EmiInsufficientError",
    "ENGINE_ERRORS",
]
