# main.py
"""
Entry Point: Home Loan Prepayment Optimizer

Purpose
-------
Run the optimizer end-to-end and emit a Markdown report:
  1) Load inputs (sample defaults or --config JSON; single loan or portfolio).
  2) Compare No Prepayment / Reduce Tenure / Reduce EMI (per loan).
  3) Allocate a shared budget across loans when a portfolio is given.
  4) Generate a Markdown report.

Usage
-----
    python main.py
    python main.py --config data/sample/loan.json --out plan.md --report-months 24
    LOAN_OPTIMIZER_DEBUG=1 python main.py --config data/sample/portfolio.json
"""

from __future__ import annotations

import argparse
from datetime import date

from loan_optimizer.inputs.inputs import AppInputs, InputsLoader, RunOptions
from loan_optimizer.orchestrator.optimizer import configure_logging, run_optimization
from loan_optimizer.reports.generator import write_report
from loan_optimizer.schemas.labels import RiskProfile
from loan_optimizer.schemas.models import LoanOptimizerInput, LoanParameters, PrepaymentEvent


def build_sample_inputs() -> LoanOptimizerInput:
    """Return a demo request: ₹40L at 8.5% over 20 years, ₹5L prepaid in month 12."""
    today = date.today()
    return LoanOptimizerInput(
        loan=LoanParameters(principal=4_000_000.0, annual_rate=0.085, tenure_months=240),
        prepayment=PrepaymentEvent(amount=500_000.0, month=12),
        has_emergency_fund=True,
        risk_profile=RiskProfile.medium,
        start_date=date(today.year, today.month, 1),
    )


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="Home Loan Prepayment Optimizer")
    p.add_argument("--config", type=str, default=None, help="Path to JSON inputs (single loan, portfolio or AppInputs).")
    p.add_argument("--out", type=str, default=None, help="Output Markdown path (overrides config).")
    p.add_argument(
        "--report-months",
        type=int,
        default=None,
        help="Leading schedule months rendered per scenario (overrides config).",
    )
    return p.parse_args()


def main():
    """Run the optimizer and write loan_optimization.md (or chosen output)."""
    configure_logging()
    print("Running Home Loan Prepayment Optimizer...")
    args = parse_args()

    loader = InputsLoader()

    if args.config:
        cfg: AppInputs = loader.load(args.config)
    else:
        # No config file → demo single-loan request
        cfg = AppInputs(single=build_sample_inputs(), run=RunOptions())
    cfg = loader.with_overrides(cfg, out=args.out, report_months=args.report_months)

    try:
        run = run_optimization(cfg)
        write_report(cfg.run.out, run.markdown)

        print(f"Report written to {cfg.run.out}")
        if run.kind == "single":
            print(f"Best option: {run.result.summary.best_option.value}")
        else:
            print(f"Interest saved across loans: {run.result.total_interest_saved:,.0f}")
    except Exception as e:
        print(f"Error during optimization: {e}")
        raise


if __name__ == "__main__":
    main()
