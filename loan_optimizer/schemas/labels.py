# loan_optimizer/schemas/labels.py
from __future__ import annotations

from enum import Enum

# =========================
# Canonical label enums
# =========================


class ScenarioKind(str, Enum):
    """Closed set of prepayment scenarios computed for every loan."""

    original = "original"
    reduce_tenure = "reduce_tenure"
    reduce_emi = "reduce_emi"


class RiskProfile(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class AllocationStrategy(str, Enum):
    """
    How a shared prepayment budget is split across loans.

    highest_rate     -> "avalanche": most expensive debt first
    smallest_balance -> "snowball": smallest outstanding principal first
    manual           -> caller-supplied percentage per loan
    """

    highest_rate = "highest_rate"
    smallest_balance = "smallest_balance"
    manual = "manual"


class RecommendationKind(str, Enum):
    tenure = "tenure"
    emi = "emi"
    invest = "invest"
    warning = "warning"
    info = "info"


class BestOption(str, Enum):
    tenure = "tenure"
    emi = "emi"
    invest = "invest"
    none = "none"


class AllocationIssueCode(str, Enum):
    """Advisory problems detected while allocating a manual split."""

    percentages_not_summing_100 = "percentages_not_summing_100"
    allocation_over_budget = "allocation_over_budget"
    allocation_clamped_to_principal = "allocation_clamped_to_principal"
