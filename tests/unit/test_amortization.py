# tests/unit/test_amortization.py
import pytest

from loan_optimizer.core.finance import aggregate_by_year, compute_emi, generate_schedule, round_money, schedule_totals
from loan_optimizer.core.finance.amortization import SAFETY_HORIZON_MONTHS
from loan_optimizer.schemas.models import PrepaymentEvent
from tests.utils import DEFAULT_START


def _emi(principal=1_000_000, rate=0.09, tenure=120):
    return compute_emi(principal, rate, tenure)


def test_schedule_clears_principal():
    sched = generate_schedule(1_000_000, 0.09, 120, _emi())
    assert sched[-1].closing_balance == 0
    assert abs(sum(r.principal_component for r in sched) - 1_000_000) <= 1
    assert len(sched) in (120, 121)


def test_row_identity_holds_every_month():
    sched = generate_schedule(1_000_000, 0.09, 120, _emi(), PrepaymentEvent(amount=200_000, month=24))
    for row in sched:
        expected = max(0.0, row.opening_balance - row.principal_component - row.part_payment)
        # each stored figure is rounded independently
        assert abs(row.closing_balance - expected) <= 2
        assert row.installment == pytest.approx(row.interest_component + row.principal_component, abs=1)
        assert row.year == (row.month - 1) // 12 + 1


def test_zero_prepayment_equals_no_prepayment():
    emi = _emi()
    plain = generate_schedule(1_000_000, 0.09, 120, emi)
    zero = generate_schedule(1_000_000, 0.09, 120, emi, PrepaymentEvent(amount=0, month=6))
    assert plain == zero


def test_prepayment_lands_after_regular_split():
    emi = _emi()
    sched = generate_schedule(1_000_000, 0.09, 120, emi, PrepaymentEvent(amount=100_000, month=3))
    row = sched[2]
    assert row.month == 3
    assert row.part_payment == 100_000
    # interest is charged on the full opening balance of the prepayment month
    assert row.interest_component == round_money(row.opening_balance * 0.09 / 12)
    assert sched[3].opening_balance == row.closing_balance


def test_prepayment_larger_than_balance_closes_loan():
    sched = generate_schedule(500_000, 0.1, 60, compute_emi(500_000, 0.1, 60), PrepaymentEvent(amount=10_000_000, month=2))
    assert len(sched) == 2
    assert sched[-1].closing_balance == 0
    assert sched[-1].part_payment < 500_000


def test_prepayment_after_payoff_is_ignored():
    emi = _emi()
    plain = generate_schedule(1_000_000, 0.09, 120, emi)
    late = generate_schedule(1_000_000, 0.09, 120, emi, PrepaymentEvent(amount=50_000, month=500))
    assert late == plain


def test_underpowered_emi_stops_at_safety_horizon():
    # EMI barely above interest never clears the loan within tenure + safety months
    sched = generate_schedule(1_000_000, 0.12, 12, 10_001)
    assert len(sched) == 12 + SAFETY_HORIZON_MONTHS
    assert sched[-1].closing_balance > 0


def test_max_months_and_offset_continue_a_schedule():
    emi = _emi()
    full = generate_schedule(1_000_000, 0.09, 120, emi)
    head = generate_schedule(1_000_000, 0.09, 120, emi, max_months=10)
    tail = generate_schedule(head[-1].closing_balance, 0.09, 110, emi, month_offset=10)

    assert [r.month for r in head] == list(range(1, 11))
    assert tail[0].month == 11
    assert tail[0].year == 1
    assert tail[2].year == 2
    assert tail[0].opening_balance == full[10].opening_balance


def test_due_dates_follow_start_date():
    sched = generate_schedule(100_000, 0.1, 12, compute_emi(100_000, 0.1, 12), start_date=DEFAULT_START)
    assert sched[0].due_date == DEFAULT_START
    assert sched[11].due_date.month == 12
    assert generate_schedule(100_000, 0.1, 12, 9_000)[0].due_date is None


def test_schedule_totals_include_part_payments():
    sched = generate_schedule(1_000_000, 0.09, 120, _emi(), PrepaymentEvent(amount=100_000, month=5))
    interest, payment = schedule_totals(sched)
    assert interest == sum(r.interest_component for r in sched)
    assert payment == pytest.approx(sum(r.installment for r in sched) + 100_000)
    assert schedule_totals([]) == (0, 0)


def test_aggregate_by_year_rolls_up_months():
    sched = generate_schedule(1_000_000, 0.09, 120, _emi(), PrepaymentEvent(amount=100_000, month=14))
    years = aggregate_by_year(sched)

    assert [y.year for y in years] == sorted({r.year for r in sched})
    assert years[0].opening_balance == sched[0].opening_balance
    assert years[0].closing_balance == sched[11].closing_balance
    assert years[1].part_payment == 100_000
    assert sum(y.interest_component for y in years) == pytest.approx(sum(r.interest_component for r in sched))
    assert all(y.due_date is None for y in years)
