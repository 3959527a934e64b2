# loan_optimizer/core/finance/dates.py
from __future__ import annotations

import calendar
from datetime import date


def add_months(dt: date, months: int) -> date:
    """
    Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` (or ``YYYY-MM``, first of month) into a date."""
    try:
        parts = [int(p) for p in value.strip().split("-")]
        if len(parts) == 2:
            return date(parts[0], parts[1], 1)
        if len(parts) == 3:
            return date(parts[0], parts[1], parts[2])
        raise ValueError
    except ValueError as exc:
        raise ValueError(f"Invalid date string: {value!r}") from exc
