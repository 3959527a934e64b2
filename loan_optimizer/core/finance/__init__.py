# loan_optimizer/core/finance/__init__.py

from .amortization import aggregate_by_year, generate_schedule, schedule_totals
from .emi import compute_emi, round_money, solve_tenure_from_emi
from .errors import EmiInsufficientError, LoanOptimizerError
from .scenarios import ScenarioSet, calculate_scenario, calculate_scenarios

__all__ = [
    "compute_emi",
    "solve_tenure_from_emi",
    "round_money",
    "generate_schedule",
    "aggregate_by_year",
    "schedule_totals",
    "calculate_scenario",
    "calculate_scenarios",
    "ScenarioSet",
    "EmiInsufficientError",
    "LoanOptimizerError",
]
