# tests/unit/test_dates.py
from datetime import date

import pytest

from loan_optimizer.core.finance.dates import add_months, parse_iso_date


def test_add_months_rolls_year():
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)
    assert add_months(date(2025, 1, 1), 240) == date(2045, 1, 1)
    assert add_months(date(2025, 6, 1), 0) == date(2025, 6, 1)


def test_add_months_clamps_day():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


def test_parse_iso_date():
    assert parse_iso_date("2025-04-10") == date(2025, 4, 10)
    assert parse_iso_date("2025-04") == date(2025, 4, 1)


@pytest.mark.parametrize("text", ["2025", "April 2025", "2025-13-01", ""])
def test_parse_iso_date_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_iso_date(text)
