# loan_optimizer/reports/generator.py
from __future__ import annotations

from loan_optimizer.core.finance.amortization import aggregate_by_year
from loan_optimizer.core.normalize.amounts import format_inr, format_pct
from loan_optimizer.schemas.models import (
    AllocationIssue,
    AmortizationRow,
    LoanOptimizerInput,
    MultiPropertyInput,
    MultiPropertyResult,
    OptimizationResult,
    Recommendation,
    ScenarioResult,
)

_SCENARIO_LABELS = {
    "original": "No Prepayment",
    "reduce_tenure": "Prepay + Reduce Tenure",
    "reduce_emi": "Prepay + Reduce EMI",
}


def _section(title: str) -> str:
    """
    Render a level-2 heading for Markdown sections.
    """
    return f"\n## {title}\n"


def _fmt_months(months: int) -> str:
    """120 -> '10y 0m'."""
    return f"{months // 12}y {months % 12}m"


# -----------------------
# Single-loan sections
# -----------------------


def _render_header(data: LoanOptimizerInput) -> str:
    loan = data.loan
    lines = [
        "# Home Loan Prepayment Analysis",
        "",
        f"- **Outstanding Principal:** {format_inr(loan.principal)}",
        f"- **Interest Rate:** {format_pct(loan.annual_rate, 2)}",
        f"- **Remaining Tenure:** {loan.tenure_months} months ({_fmt_months(loan.tenure_months)})",
    ]
    if loan.existing_emi is not None:
        lines.append(f"- **Current EMI (as charged):** {format_inr(loan.existing_emi)}")
    lines += [
        f"- **Prepayment:** {format_inr(data.prepayment.amount)} in month {data.prepayment.month}",
        f"- **Emergency Fund:** {'yes' if data.has_emergency_fund else 'no'}",
        f"- **Risk Appetite:** {data.risk_profile.value}",
        f"- **First EMI:** {data.start_date.isoformat()}",
    ]
    return "\n".join(lines) + "\n"


def _render_comparison(result: OptimizationResult) -> str:
    """
    Render the three scenarios side by side.
    """
    header = [
        _section("Scenario Comparison"),
        "| Scenario | EMI | Tenure | Total Interest | Total Payment | Debt-Free By | Interest Saved | Months Saved |",
        "| --- | ---: | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    rows = []
    for sc in (result.original, result.reduce_tenure, result.reduce_emi):
        rows.append(
            f"| {_SCENARIO_LABELS[sc.kind.value]} "
            f"| {format_inr(sc.emi)} "
            f"| {sc.tenure_months} "
            f"| {format_inr(sc.total_interest)} "
            f"| {format_inr(sc.total_payment)} "
            f"| {sc.completion_date.strftime('%b %Y')} "
            f"| {format_inr(sc.interest_saved)} "
            f"| {sc.tenure_reduced_months} |"
        )
    return "\n".join(header + rows) + "\n"


def _render_recommendations(recs: list[Recommendation], title: str = "Recommendations") -> str:
    lines = [_section(title)]
    if not recs:
        lines.append("- None.")
    for r in recs:
        lines.append(f"{r.priority}. **{r.title}** ({r.kind.value}): {r.body}")
    return "\n".join(lines) + "\n"


def _render_summary(result: OptimizationResult) -> str:
    s = result.summary
    lines = [
        _section("Verdict"),
        f"- **Best Option:** {s.best_option.value}",
        f"- **Max Interest Saved:** {format_inr(s.max_interest_saved)}",
        f"- **Max Tenure Reduced:** {s.max_tenure_reduced} months",
    ]
    return "\n".join(lines) + "\n"


def _render_rows(rows: list[AmortizationRow], first_col: str) -> list[str]:
    out = [
        f"| {first_col} | Opening | Interest | Principal | Part Payment | Installment | Closing |",
        "| ---: | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    for row in rows:
        label = row.year if first_col == "Year" else row.month
        out.append(
            f"| {label} "
            f"| {format_inr(row.opening_balance)} "
            f"| {format_inr(row.interest_component)} "
            f"| {format_inr(row.principal_component)} "
            f"| {format_inr(row.part_payment)} "
            f"| {format_inr(row.installment)} "
            f"| {format_inr(row.closing_balance)} |"
        )
    return out


def _render_schedule(sc: ScenarioResult, months: int, yearly: bool) -> str:
    label = _SCENARIO_LABELS[sc.kind.value]
    if not sc.schedule:
        return _section(f"Schedule - {label}") + "No schedule (invalid or zero inputs).\n"

    parts: list[str] = []
    if months > 0:
        lines = [_section(f"Schedule - {label} (first {min(months, len(sc.schedule))} months)")]
        lines += _render_rows(sc.schedule[:months], "Month")
        parts.append("\n".join(lines) + "\n")
    if yearly:
        lines = [_section(f"Yearly Roll-up - {label}")]
        lines += _render_rows(aggregate_by_year(sc.schedule), "Year")
        parts.append("\n".join(lines) + "\n")
    return "".join(parts)


def generate_report(
    data: LoanOptimizerInput,
    result: OptimizationResult,
    *,
    report_months: int = 12,
    yearly: bool = True,
) -> str:
    """
    Generate a Markdown report for one loan.

    Sections:
      - Header: loan state and borrower profile
      - Scenario Comparison: original vs reduce tenure vs reduce EMI
      - Recommendations (priority order)
      - Verdict
      - Schedules: leading months and yearly roll-up per scenario
    """
    parts = [
        _render_header(data),
        _render_comparison(result),
        _render_recommendations(result.recommendations),
        _render_summary(result),
    ]
    for sc in (result.original, result.reduce_tenure, result.reduce_emi):
        parts.append(_render_schedule(sc, report_months, yearly))
    return "".join(parts)


# -----------------------
# Portfolio sections
# -----------------------


def _render_allocations(result: MultiPropertyResult) -> str:
    header = [
        _section("Allocation"),
        "| Rank | Loan | Rate | Principal | Allocated | Interest Saved (Tenure) | Months Saved | New EMI (Reduce EMI) |",
        "| ---: | --- | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    rows = []
    for a in result.allocations:
        rows.append(
            f"| {a.rank} "
            f"| {a.name or a.loan_id} "
            f"| {format_pct(a.annual_rate, 2)} "
            f"| {format_inr(a.principal)} "
            f"| {format_inr(a.allocated_amount)} "
            f"| {format_inr(a.interest_saved_reduce_tenure)} "
            f"| {a.tenure_reduced_months} "
            f"| {format_inr(a.original_emi)} → {format_inr(a.new_emi)} |"
        )
    return "\n".join(header + rows) + "\n"


def _render_totals(data: MultiPropertyInput, result: MultiPropertyResult) -> str:
    lines = [
        _section("Portfolio Totals"),
        f"- **Strategy:** {result.strategy.value}. {result.strategy_explanation}",
        f"- **Budget:** {format_inr(data.total_prepayment_amount)} in month {result.prepayment_month}",
        f"- **Used:** {format_inr(result.total_prepayment_used)}",
        f"- **Remaining:** {format_inr(result.remaining_budget)}",
        f"- **Total Interest Saved (reduce tenure):** {format_inr(result.total_interest_saved)}",
        f"- **Average Months Saved:** {result.total_tenure_reduced}",
    ]
    return "\n".join(lines) + "\n"


def _render_issues(issues: list[AllocationIssue]) -> str:
    if not issues:
        return ""
    lines = [_section("Allocation Warnings")]
    for issue in issues:
        target = f" [{issue.loan_id}]" if issue.loan_id else ""
        lines.append(f"- {issue.code.value}{target}: {issue.message}")
    return "\n".join(lines) + "\n"


def generate_portfolio_report(data: MultiPropertyInput, result: MultiPropertyResult) -> str:
    """
    Generate a Markdown report for a multi-loan allocation.

    Sections:
      - Portfolio Totals (budget invariant, headline savings)
      - Allocation table in strategy order
      - Allocation Warnings (manual split problems)
      - Portfolio recommendations, then per-loan recommendations
    """
    parts = [
        "# Multi-Loan Prepayment Plan\n",
        _render_totals(data, result),
        _render_allocations(result),
        _render_issues(result.issues),
        _render_recommendations(result.recommendations, "Portfolio Recommendations"),
    ]
    for a in result.allocations:
        parts.append(_render_recommendations(a.result.recommendations, f"Recommendations - {a.name or a.loan_id}"))
    return "".join(parts)


def write_report(path: str, markdown: str) -> None:
    """
    Convenience helper to write a generated report to disk.
    """
    with open(path, "w", encoding="utf-8") as f:
        f.write(markdown)
