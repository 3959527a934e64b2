# tests/test_report_generator.py
from loan_optimizer.core.allocation.allocator import allocate_prepayment
from loan_optimizer.core.engine import run_loan_optimizer
from loan_optimizer.reports.generator import generate_portfolio_report, generate_report, write_report
from loan_optimizer.schemas.labels import AllocationStrategy
from tests.utils import make_loan, make_portfolio, make_prepayment, make_request


def test_generate_report_has_sections():
    data = make_request()
    result = run_loan_optimizer(data)
    md = generate_report(data, result, report_months=6)

    assert md.startswith("# Home Loan Prepayment Analysis")
    assert "## Scenario Comparison" in md
    assert "## Recommendations" in md
    assert "## Verdict" in md
    assert "Prepay + Reduce Tenure" in md
    assert "₹40,00,000" in md
    assert "- **Best Option:** tenure" in md
    assert "## Schedule - No Prepayment (first 6 months)" in md
    assert "## Yearly Roll-up - Prepay + Reduce EMI" in md


def test_report_schedule_rows_follow_report_months():
    data = make_request()
    result = run_loan_optimizer(data)
    md = generate_report(data, result, report_months=3, yearly=False)
    section = md.split("## Schedule - No Prepayment (first 3 months)")[1].split("\n## ")[0]
    rows = [line for line in section.splitlines() if line.startswith("| ") and line[2].isdigit()]
    assert len(rows) == 3
    assert "Yearly Roll-up" not in md


def test_report_without_schedules():
    data = make_request()
    md = generate_report(data, run_loan_optimizer(data), report_months=0, yearly=False)
    assert "## Schedule" not in md
    assert "## Verdict" in md


def test_report_for_invalid_loan():
    data = make_request(loan=make_loan(principal=0))
    md = generate_report(data, run_loan_optimizer(data))
    assert "No schedule (invalid or zero inputs)." in md


def test_report_shows_custom_emi():
    data = make_request(loan=make_loan(existing_emi=40_000), prepayment=make_prepayment(month=24))
    md = generate_report(data, run_loan_optimizer(data))
    assert "Current EMI (as charged):** ₹40,000" in md


def test_portfolio_report_lists_allocations_and_issues():
    data = make_portfolio(total=400_000, strategy=AllocationStrategy.manual, manual={"a": 50.0, "b": 30.0})
    md = generate_portfolio_report(data, allocate_prepayment(data))

    assert md.startswith("# Multi-Loan Prepayment Plan")
    assert "## Portfolio Totals" in md
    assert "## Allocation\n" in md
    assert "| Property b " in md
    assert "## Allocation Warnings" in md
    assert "percentages_not_summing_100" in md
    assert "## Portfolio Recommendations" in md
    assert "## Recommendations - Property a" in md


def test_portfolio_report_without_issues_has_no_warning_section():
    data = make_portfolio(total=400_000)
    md = generate_portfolio_report(data, allocate_prepayment(data))
    assert "Allocation Warnings" not in md


def test_write_report(tmp_path):
    out = tmp_path / "report.md"
    write_report(str(out), "# Hello\n")
    assert out.read_text(encoding="utf-8") == "# Hello\n"
