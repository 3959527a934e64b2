# loan_optimizer/core/normalize/amounts.py
"""
Indian-notation money helpers.

- format_indian_number(5_666_000) -> "56.66 L"
- format_inr(1234567)             -> "₹12,34,567"
- parse_indian_number("1.2Cr")    -> 12_000_000.0
"""

from __future__ import annotations

import re

CRORE = 10_000_000
LAKH = 100_000

_AMOUNT_RE = re.compile(r"^([\d.]+)\s*(cr|crore|crores|l|lakh|lakhs|k)?$", re.IGNORECASE)

_MULTIPLIERS = {
    "cr": CRORE,
    "crore": CRORE,
    "crores": CRORE,
    "l": LAKH,
    "lakh": LAKH,
    "lakhs": LAKH,
    "k": 1_000,
}


def format_indian_number(amount: float) -> str:
    """Compact lakh/crore notation used in advice text (two decimals above one thousand)."""
    if amount >= CRORE:
        return f"{amount / CRORE:.2f} Cr"
    if amount >= LAKH:
        return f"{amount / LAKH:.2f} L"
    if amount >= 1_000:
        return f"{amount / 1_000:.2f} K"
    return f"{amount:.0f}"


def _group_indian(digits: str) -> str:
    # Last three digits, then pairs: 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(amount: float) -> str:
    """Whole-rupee currency with Indian digit grouping."""
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{_group_indian(str(int(abs(amount) + 0.5)))}"


def format_pct(rate: float, digits: int = 1) -> str:
    """Format a fraction as a percentage: 0.085 -> '8.5%'."""
    return f"{rate * 100:.{digits}f}%"


def parse_indian_number(value: str) -> float:
    """
    Parse user-typed amounts such as "56.66L", "1.2 Cr", "45,00,000" or "750k".

    Unparseable text yields 0.0, matching how half-typed form fields are treated.
    """
    cleaned = value.strip().replace(",", "")
    match = _AMOUNT_RE.match(cleaned)
    if not match:
        try:
            return float(cleaned)
        except ValueError:
            return 0.0

    try:
        num = float(match.group(1))
    except ValueError:
        return 0.0
    suffix = (match.group(2) or "").lower()
    return round(num * _MULTIPLIERS.get(suffix, 1), 2)
