# tests/conftest.py
from __future__ import annotations

import os
import random

import pytest

from loan_optimizer.core.finance import calculate_scenarios
from tests.utils import DEFAULT_START, make_loan, make_portfolio, make_prepayment, make_request


# -------- Global deterministic seed --------
@pytest.fixture(autouse=True, scope="session")
def _seed_session():
    random.seed(1337)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


# -------- Env isolation --------
@pytest.fixture(autouse=True)
def _clear_optimizer_env(monkeypatch):
    for key in ("OUT", "REPORT_MONTHS", "START_DATE", "DEBUG"):
        monkeypatch.delenv(f"LOAN_OPTIMIZER_{key}", raising=False)
    yield


# -------- Loan fixtures --------
@pytest.fixture
def baseline_loan():
    return make_loan()


@pytest.fixture
def baseline_request():
    """Factory for the canonical single-loan request."""

    def _factory(**kwargs):
        return make_request(**kwargs)

    return _factory


@pytest.fixture
def baseline_scenarios():
    """₹40L @ 8.5% / 240m with ₹5L prepaid in month 12."""
    return calculate_scenarios(make_loan(), make_prepayment(), DEFAULT_START)


@pytest.fixture
def portfolio_input():
    """Factory for a three-loan portfolio."""

    def _factory(**kwargs):
        return make_portfolio(**kwargs)

    return _factory
