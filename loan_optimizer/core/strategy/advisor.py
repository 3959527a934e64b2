# loan_optimizer/core/strategy/advisor.py
"""
Rule-based prepayment advisor.

Each rule inspects the loan, the borrower profile and the computed scenarios
and contributes at most one Recommendation. Rules are additive; only the
prepay-vs-invest rule has mutually exclusive branches. Output is sorted by
priority (1 = most important).
"""

from __future__ import annotations

from collections.abc import Sequence

from loan_optimizer.core.finance.scenarios import ScenarioSet
from loan_optimizer.core.normalize.amounts import format_indian_number, format_pct
from loan_optimizer.schemas.labels import AllocationStrategy, BestOption, RecommendationKind, RiskProfile
from loan_optimizer.schemas.models import (
    LoanParameters,
    MultiPropertyInput,
    OptimizationSummary,
    PrepaymentEvent,
    Recommendation,
    ScenarioResult,
)

INVESTMENT_BENCHMARK_RETURN = 0.12  # long-run Nifty 50 average
LOW_INTEREST_THRESHOLD = 0.09  # below this, investing can beat prepaying
FINAL_TENURE_PERCENTAGE = 0.20  # final stretch where EMIs are mostly principal
SURPLUS_BUDGET_THRESHOLD = 5_000.0
PORTFOLIO_INVEST_HORIZON_YEARS = 5


def _rupees(x: float) -> str:
    return f"₹{format_indian_number(x)}"


# -------------------------
# Single-loan rules
# -------------------------


def tenure_fraction_remaining(loan: LoanParameters, original: ScenarioResult) -> float | None:
    """remaining / total tenure; total is the sanctioned tenure when known, else the simulated one."""
    total = loan.original_tenure_months or original.tenure_months
    if total <= 0:
        return None
    return loan.tenure_months / total


def rule_limited_benefit(loan: LoanParameters, prepayment: PrepaymentEvent, original: ScenarioResult) -> Recommendation | None:
    fraction = tenure_fraction_remaining(loan, original)
    if fraction is None or fraction > FINAL_TENURE_PERCENTAGE:
        return None
    return Recommendation(
        kind=RecommendationKind.warning,
        priority=1,
        title="Limited Prepayment Benefit",
        body=(
            f"You're in the final {round(fraction * 100)}% of your loan tenure. At this stage, most of your EMI "
            f"goes toward principal, so prepayment saves less interest. Consider investing the "
            f"{_rupees(prepayment.amount)} instead."
        ),
        icon_tag="alert",
        severity_tag="warning",
    )


def rule_emergency_fund(has_emergency_fund: bool) -> Recommendation | None:
    if has_emergency_fund:
        return None
    return Recommendation(
        kind=RecommendationKind.warning,
        priority=2,
        title="Build Emergency Fund First",
        body=(
            "Financial experts recommend having 6-12 months of expenses saved before making loan prepayments. "
            "Consider building your emergency fund before prepaying your loan."
        ),
        icon_tag="alert",
        severity_tag="danger",
    )


def rule_prepay_vs_invest(
    loan: LoanParameters,
    prepayment: PrepaymentEvent,
    risk_profile: RiskProfile,
    reduce_tenure: ScenarioResult,
) -> Recommendation | None:
    if loan.annual_rate < LOW_INTEREST_THRESHOLD and risk_profile is RiskProfile.high:
        projected = prepayment.amount * INVESTMENT_BENCHMARK_RETURN * (loan.tenure_months / 12)
        return Recommendation(
            kind=RecommendationKind.invest,
            priority=3,
            title="Consider Investing Instead",
            body=(
                f"Your loan rate ({format_pct(loan.annual_rate)}) is below {format_pct(LOW_INTEREST_THRESHOLD, 0)}. "
                f"With a high-risk appetite, investing in equity (avg ~{format_pct(INVESTMENT_BENCHMARK_RETURN, 0)} "
                f"returns) could yield {_rupees(projected)} over your loan tenure, potentially more than the "
                f"interest saved ({_rupees(reduce_tenure.interest_saved)})."
            ),
            icon_tag="chart-up",
            severity_tag="primary",
        )
    if loan.annual_rate >= LOW_INTEREST_THRESHOLD:
        return Recommendation(
            kind=RecommendationKind.info,
            priority=3,
            title="Prepayment is Beneficial",
            body=(
                f"At {format_pct(loan.annual_rate)} interest, prepaying your loan is generally more beneficial than "
                "investing, as guaranteed loan interest savings often outweigh uncertain investment returns."
            ),
            icon_tag="info",
            severity_tag="success",
        )
    return None


def rule_tenure_vs_emi(reduce_tenure: ScenarioResult, reduce_emi: ScenarioResult) -> Recommendation | None:
    if reduce_tenure.interest_saved <= reduce_emi.interest_saved:
        return None
    extra = reduce_tenure.interest_saved - reduce_emi.interest_saved
    return Recommendation(
        kind=RecommendationKind.tenure,
        priority=4,
        title="Recommended: Reduce Tenure",
        body=(
            f"Opting for tenure reduction saves {_rupees(extra)} more in interest compared to EMI reduction. "
            f"You'll also be debt-free {reduce_tenure.tenure_reduced_months} months earlier."
        ),
        icon_tag="trending-down",
        severity_tag="success",
    )


def rule_cash_flow(original: ScenarioResult, reduce_emi: ScenarioResult) -> Recommendation | None:
    if reduce_emi.interest_saved <= 0:
        return None
    relief = original.emi - reduce_emi.emi
    return Recommendation(
        kind=RecommendationKind.emi,
        priority=5,
        title="For Better Cash Flow: Reduce EMI",
        body=(
            f"If monthly cash flow is a priority, reducing EMI saves {_rupees(relief)} per month. "
            f"You'll still save {_rupees(reduce_emi.interest_saved)} in total interest."
        ),
        icon_tag="wallet",
        severity_tag="primary",
    )


def generate_recommendations(
    loan: LoanParameters,
    prepayment: PrepaymentEvent,
    risk_profile: RiskProfile,
    has_emergency_fund: bool,
    scenarios: ScenarioSet,
) -> list[Recommendation]:
    candidates = [
        rule_limited_benefit(loan, prepayment, scenarios.original),
        rule_emergency_fund(has_emergency_fund),
        rule_prepay_vs_invest(loan, prepayment, risk_profile, scenarios.reduce_tenure),
        rule_tenure_vs_emi(scenarios.reduce_tenure, scenarios.reduce_emi),
        rule_cash_flow(scenarios.original, scenarios.reduce_emi),
    ]
    return sorted((r for r in candidates if r is not None), key=lambda r: r.priority)


def summarize(recommendations: Sequence[Recommendation], scenarios: ScenarioSet) -> OptimizationSummary:
    """
    Headline verdict:
      - none   if a priority-1/2 warning fired (late in the loan, or no emergency fund)
      - invest if the invest-instead rule fired
      - tenure / emi by which policy saves more interest (ties go to tenure)
    """
    rt, re_ = scenarios.reduce_tenure, scenarios.reduce_emi
    if any(r.kind is RecommendationKind.warning and r.priority <= 2 for r in recommendations):
        best = BestOption.none
    elif any(r.kind is RecommendationKind.invest and r.priority <= 3 for r in recommendations):
        best = BestOption.invest
    elif rt.interest_saved >= re_.interest_saved:
        best = BestOption.tenure
    else:
        best = BestOption.emi

    return OptimizationSummary(
        best_option=best,
        max_interest_saved=max(rt.interest_saved, re_.interest_saved),
        max_tenure_reduced=rt.tenure_reduced_months,
    )


# -------------------------
# Portfolio rules
# -------------------------

STRATEGY_EXPLANATIONS = {
    AllocationStrategy.highest_rate: "Prioritizes loans with the highest interest rate first, maximizing total interest savings.",
    AllocationStrategy.smallest_balance: (
        "Prioritizes loans with the smallest balance first (debt snowball), allowing you to close loans faster "
        "for psychological momentum."
    ),
    AllocationStrategy.manual: (
        "You chose a custom split: budget is allocated based on your manually set percentages for each property."
    ),
}


def _strategy_affirmation(data: MultiPropertyInput, total_interest_saved: float) -> Recommendation:
    if data.strategy is AllocationStrategy.highest_rate:
        return Recommendation(
            kind=RecommendationKind.info,
            priority=3,
            title="Maximizing Savings",
            body=(
                f"Great choice! The Avalanche method saves you the most money ({_rupees(total_interest_saved)}) "
                "by attacking expensive debt first."
            ),
            icon_tag="trending-down",
            severity_tag="success",
        )
    if data.strategy is AllocationStrategy.smallest_balance:
        clears_one = any(rec.loan.principal <= data.total_prepayment_amount for rec in data.loans)
        return Recommendation(
            kind=RecommendationKind.info,
            priority=3,
            title="Building Momentum",
            body=(
                f"The Snowball method helps you clear {'a loan' if clears_one else 'balances'} quickly. "
                "This psychological win can be very motivating!"
            ),
            icon_tag="check",
            severity_tag="primary",
        )
    return Recommendation(
        kind=RecommendationKind.info,
        priority=3,
        title="Custom Split Applied",
        body=(
            f"You've manually distributed your {_rupees(data.total_prepayment_amount)} prepayment budget across "
            f"{len(data.loans)} properties. Total interest saved: {_rupees(total_interest_saved)}."
        ),
        icon_tag="check",
        severity_tag="primary",
    )


def generate_portfolio_recommendations(
    data: MultiPropertyInput,
    total_interest_saved: float,
    remaining_budget: float,
) -> list[Recommendation]:
    recs: list[Recommendation] = []

    if not data.has_emergency_fund:
        recs.append(
            Recommendation(
                kind=RecommendationKind.warning,
                priority=1,
                title="Build Emergency Fund First",
                body=(
                    "Before prepaying multiple loans, ensure you have 6-12 months of expenses saved. This safety net "
                    "is crucial when managing multiple liabilities."
                ),
                icon_tag="alert",
                severity_tag="danger",
            )
        )

    costliest = max(data.loans, key=lambda rec: rec.loan.annual_rate, default=None)
    if (
        costliest is not None
        and costliest.loan.annual_rate < LOW_INTEREST_THRESHOLD
        and data.risk_profile is RiskProfile.high
    ):
        recs.append(
            Recommendation(
                kind=RecommendationKind.invest,
                priority=2,
                title="Consider Market Investments",
                body=(
                    f"Your most expensive loan is only {format_pct(costliest.loan.annual_rate, 2)}. With a high risk "
                    f"appetite, investing this amount might yield better long-term returns "
                    f"(avg ~{format_pct(INVESTMENT_BENCHMARK_RETURN, 0)}, roughly "
                    f"{_rupees(data.total_prepayment_amount * INVESTMENT_BENCHMARK_RETURN * PORTFOLIO_INVEST_HORIZON_YEARS)} "
                    f"over {PORTFOLIO_INVEST_HORIZON_YEARS} years) than prepaying cheap debt."
                ),
                icon_tag="chart-up",
                severity_tag="primary",
            )
        )

    recs.append(_strategy_affirmation(data, total_interest_saved))

    if remaining_budget > SURPLUS_BUDGET_THRESHOLD:
        recs.append(
            Recommendation(
                kind=RecommendationKind.invest,
                priority=4,
                title="Surplus Budget",
                body=(
                    f"You have {_rupees(remaining_budget)} left after clearing target loans. Consider investing this "
                    "surplus or starting an RD."
                ),
                icon_tag="wallet",
                severity_tag="success",
            )
        )

    return sorted(recs, key=lambda r: r.priority)
