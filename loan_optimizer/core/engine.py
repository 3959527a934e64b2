# loan_optimizer/core/engine.py
from __future__ import annotations

import logging

from loan_optimizer.core.finance.scenarios import calculate_scenarios
from loan_optimizer.core.strategy.advisor import generate_recommendations, summarize
from loan_optimizer.schemas.models import LoanOptimizerInput, OptimizationResult

logger = logging.getLogger(__name__)


def run_loan_optimizer(data: LoanOptimizerInput) -> OptimizationResult:
    """
    Single-loan pipeline: scenarios -> recommendations -> summary.

    Deterministic and side-effect free; every call rebuilds all results from
    the input record.

    Raises:
        EmiInsufficientError: a supplied EMI passes the interest-only floor yet
            still never amortizes the principal.
    """
    scenarios = calculate_scenarios(data.loan, data.prepayment, data.start_date)
    recommendations = generate_recommendations(
        data.loan,
        data.prepayment,
        data.risk_profile,
        data.has_emergency_fund,
        scenarios,
    )
    summary = summarize(recommendations, scenarios)
    logger.debug(
        "optimizer: best=%s saved=%.0f months=%d",
        summary.best_option.value,
        summary.max_interest_saved,
        summary.max_tenure_reduced,
    )
    return OptimizationResult(
        original=scenarios.original,
        reduce_tenure=scenarios.reduce_tenure,
        reduce_emi=scenarios.reduce_emi,
        recommendations=recommendations,
        summary=summary,
    )
