# loan_optimizer/orchestrator/optimizer.py
"""
Orchestrator (deterministic)

Purpose
-------
Run one validated request end to end:
  1) Single loan -> scenarios, recommendations, summary -> Markdown report
  2) Portfolio   -> allocation across loans (per-loan optimizer) -> Markdown report

Public API
----------
run_optimization(cfg) -> OptimizationRun(kind, result, markdown)
configure_logging()   -> console logging, DEBUG via LOAN_OPTIMIZER_DEBUG
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import Literal

from loan_optimizer.core.allocation.allocator import allocate_prepayment
from loan_optimizer.core.engine import run_loan_optimizer
from loan_optimizer.inputs.inputs import AppInputs
from loan_optimizer.reports.generator import generate_portfolio_report, generate_report
from loan_optimizer.schemas.models import MultiPropertyResult, OptimizationResult

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _debug_enabled() -> bool:
    return os.getenv("LOAN_OPTIMIZER_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(log_dir: str | None = "logs") -> logging.Logger:
    """
    Configure the package logger once.

    Console handler at INFO (DEBUG when LOAN_OPTIMIZER_DEBUG is set). In debug
    mode a rotating file log is also written under ``log_dir``.
    """
    root = logging.getLogger("loan_optimizer")
    level = logging.DEBUG if _debug_enabled() else logging.INFO
    root.setLevel(level)

    # Avoid duplicate handlers if called twice in REPL/tests
    if root.handlers:
        return root

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    root.addHandler(console)

    if level == logging.DEBUG and log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handler = RotatingFileHandler(
                os.path.join(log_dir, "loan_optimizer.log"),
                maxBytes=1_000_000,
                backupCount=3,
                encoding="utf-8",
            )
        except OSError as e:
            root.warning("file logging disabled: %s", e)
        else:
            handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt="(%Y-%m-%d %H:%M:%S)"))
            root.addHandler(handler)

    return root


@dataclass(frozen=True)
class OptimizationRun:
    """Final artifacts of one run."""

    kind: Literal["single", "portfolio"]
    result: OptimizationResult | MultiPropertyResult
    markdown: str


def run_optimization(cfg: AppInputs) -> OptimizationRun:
    """
    Execute the pipeline for whichever request the inputs carry.

    Raises:
        EmiInsufficientError: a supplied EMI never amortizes its loan.
    """
    if cfg.single is not None:
        single = run_loan_optimizer(cfg.single)
        markdown = generate_report(
            cfg.single,
            single,
            report_months=cfg.run.report_months,
            yearly=cfg.run.yearly,
        )
        logger.info(
            "single loan: best=%s interest_saved=%.0f",
            single.summary.best_option.value,
            single.summary.max_interest_saved,
        )
        return OptimizationRun(kind="single", result=single, markdown=markdown)

    assert cfg.portfolio is not None
    portfolio = allocate_prepayment(cfg.portfolio)
    logger.info(
        "portfolio: %d loans, used=%.0f remaining=%.0f interest_saved=%.0f",
        len(portfolio.allocations),
        portfolio.total_prepayment_used,
        portfolio.remaining_budget,
        portfolio.total_interest_saved,
    )
    return OptimizationRun(
        kind="portfolio",
        result=portfolio,
        markdown=generate_portfolio_report(cfg.portfolio, portfolio),
    )
