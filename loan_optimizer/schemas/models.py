# loan_optimizer/schemas/models.py

from __future__ import annotations

import math
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from loan_optimizer.schemas.labels import (
    AllocationIssueCode,
    AllocationStrategy,
    BestOption,
    RecommendationKind,
    RiskProfile,
    ScenarioKind,
)

IconTag = Literal["trending-down", "wallet", "chart-up", "alert", "info", "check"]
SeverityTag = Literal["success", "primary", "warning", "danger", "slate"]


def _whole_rupees(v: float) -> float:
    """Round half up to the rupee, matching the ledger rounding."""
    return float(math.floor(v + 0.5))


# =========================
# Core inputs
# =========================


class LoanParameters(BaseModel):
    """
    A borrower's current loan state. All money amounts are whole rupees.

    Zero values are accepted; the engine answers them with zero results
    instead of raising.
    """

    principal: float = Field(..., ge=0, description="Outstanding principal (₹).")
    annual_rate: float = Field(..., ge=0, le=1, description="Annual interest rate as a fraction (e.g., 0.085 = 8.5%).")
    tenure_months: int = Field(..., ge=0, description="Remaining tenure in months.")
    existing_emi: float | None = Field(
        None,
        gt=0,
        description=(
            "EMI the bank actually charges. Overrides the formula EMI when it covers at least the "
            "interest-only payment (bank EMIs rarely match the formula to the rupee)."
        ),
    )
    original_tenure_months: int | None = Field(
        None,
        gt=0,
        description="Total sanctioned tenure of the loan. Used to judge how late in the loan a prepayment lands.",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("principal")
    @classmethod
    def _round_principal(cls, v: float) -> float:
        return _whole_rupees(v)


class PrepaymentEvent(BaseModel):
    """A one-time lump sum applied to principal in the given (1-based) month."""

    amount: float = Field(..., ge=0, description="Lump-sum amount (₹).")
    month: int = Field(..., ge=1, description="Month of the loan (1-indexed) in which the lump sum is paid.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("amount")
    @classmethod
    def _round_amount(cls, v: float) -> float:
        return _whole_rupees(v)


class LoanOptimizerInput(BaseModel):
    """Single-loan optimizer request."""

    loan: LoanParameters
    prepayment: PrepaymentEvent
    has_emergency_fund: bool = Field(True, description="Whether the borrower holds 6-12 months of expenses in reserve.")
    risk_profile: RiskProfile = Field(RiskProfile.medium, description="Appetite for market-linked investments.")
    start_date: date = Field(default_factory=date.today, description="Date of the first EMI; completion dates count from here.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class LoanRecord(BaseModel):
    """One loan of a portfolio, keyed by a caller-supplied stable identifier."""

    loan_id: str = Field(..., min_length=1, description="Stable identifier supplied by the caller (e.g., a ULID).")
    name: str = Field("", description="Display name (property or lender).")
    loan: LoanParameters

    model_config = ConfigDict(frozen=True, extra="ignore")


class MultiPropertyInput(BaseModel):
    """Portfolio request: one prepayment budget shared across several loans."""

    loans: list[LoanRecord] = Field(default_factory=list, description="Loans to consider, in caller order.")
    total_prepayment_amount: float = Field(..., ge=0, description="Budget available for prepayment (₹).")
    prepayment_month: int = Field(1, ge=1, description="Month in which every allocated prepayment is made.")
    strategy: AllocationStrategy = Field(AllocationStrategy.highest_rate, description="Allocation strategy.")
    manual_allocations: dict[str, float] | None = Field(
        None, description="Manual strategy only: loan_id -> percentage of the total budget (0-100)."
    )
    has_emergency_fund: bool = True
    risk_profile: RiskProfile = RiskProfile.medium
    start_date: date = Field(default_factory=date.today)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("total_prepayment_amount")
    @classmethod
    def _round_budget(cls, v: float) -> float:
        return _whole_rupees(v)

    @field_validator("loans")
    @classmethod
    def _unique_ids(cls, v: list[LoanRecord]) -> list[LoanRecord]:
        seen: set[str] = set()
        for rec in v:
            if rec.loan_id in seen:
                raise ValueError(f"duplicate loan_id: {rec.loan_id}")
            seen.add(rec.loan_id)
        return v

    @field_validator("manual_allocations")
    @classmethod
    def _non_negative_pcts(cls, v: dict[str, float] | None) -> dict[str, float] | None:
        if v is not None and any(pct < 0 for pct in v.values()):
            raise ValueError("manual allocation percentages must be >= 0")
        return v


# =========================
# Computed outputs
# =========================


class AmortizationRow(BaseModel):
    """
    One ledger month. Money columns are rounded to whole rupees.

    closing_balance = max(0, opening_balance - principal_component - part_payment)
    """

    month: int = Field(..., description="Month index starting at 1.")
    year: int = Field(..., description="Loan year: ceil(month / 12).")
    opening_balance: float = Field(..., description="Balance before this month's installment.")
    interest_component: float = Field(..., description="round(opening_balance * annual_rate / 12).")
    principal_component: float = Field(..., description="Principal retired by the regular installment.")
    part_payment: float = Field(0.0, description="Lump-sum prepayment applied this month.")
    closing_balance: float = Field(..., description="Balance after installment and part payment.")
    installment: float = Field(..., description="Regular installment actually paid (interest + principal).")
    due_date: date | None = Field(None, description="Installment date when the schedule was anchored to a start date.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class ScenarioResult(BaseModel):
    """Outcome of one prepayment policy; savings are relative to the original scenario of the same loan."""

    kind: ScenarioKind
    emi: float = Field(..., description="Installment in force (post-prepayment EMI for reduce_emi).")
    tenure_months: int = Field(..., description="Months until the balance reaches zero.")
    total_interest: float
    total_payment: float = Field(..., description="Sum of installments and part payments.")
    completion_date: date
    interest_saved: float = 0.0
    tenure_reduced_months: int = 0
    schedule: list[AmortizationRow] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


class Recommendation(BaseModel):
    """Human-readable guidance; lower priority number means more important."""

    kind: RecommendationKind
    priority: int = Field(..., ge=1)
    title: str
    body: str
    icon_tag: IconTag = "info"
    severity_tag: SeverityTag = "slate"

    model_config = ConfigDict(frozen=True, extra="ignore")


class OptimizationSummary(BaseModel):
    best_option: BestOption
    max_interest_saved: float
    max_tenure_reduced: int

    model_config = ConfigDict(frozen=True, extra="ignore")


class OptimizationResult(BaseModel):
    """Three scenarios for one loan plus the advice derived from them."""

    original: ScenarioResult
    reduce_tenure: ScenarioResult
    reduce_emi: ScenarioResult
    recommendations: list[Recommendation] = Field(default_factory=list)
    summary: OptimizationSummary

    model_config = ConfigDict(frozen=True, extra="ignore")


class AllocationIssue(BaseModel):
    """Advisory finding from manual allocation; processing continues best-effort."""

    code: AllocationIssueCode
    message: str
    loan_id: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class MultiLoanAllocation(BaseModel):
    """Budget share and outcome for one loan of a portfolio."""

    loan_id: str
    name: str = ""
    rank: int = Field(..., ge=1, description="Position in the strategy order (1 = served first).")
    annual_rate: float
    principal: float
    allocated_amount: float
    original_emi: float
    new_emi: float = Field(..., description="EMI after prepayment under the reduce_emi policy.")
    original_total_interest: float
    interest_saved_reduce_tenure: float
    tenure_reduced_months: int
    interest_saved_reduce_emi: float
    result: OptimizationResult

    model_config = ConfigDict(frozen=True, extra="ignore")


class MultiPropertyResult(BaseModel):
    """
    Portfolio outcome.

    Invariant: total_prepayment_used + remaining_budget == total prepayment budget.
    """

    allocations: list[MultiLoanAllocation] = Field(default_factory=list)
    total_interest_saved: float = Field(..., description="Sum of reduce-tenure savings across loans.")
    total_tenure_reduced: int = Field(..., description="Mean months saved across loans that received money.")
    total_prepayment_used: float
    remaining_budget: float
    strategy: AllocationStrategy
    strategy_explanation: str
    recommendations: list[Recommendation] = Field(default_factory=list)
    issues: list[AllocationIssue] = Field(default_factory=list)
    prepayment_month: int

    model_config = ConfigDict(frozen=True, extra="ignore")

    def allocation_for(self, loan_id: str) -> MultiLoanAllocation | None:
        return next((a for a in self.allocations if a.loan_id == loan_id), None)
