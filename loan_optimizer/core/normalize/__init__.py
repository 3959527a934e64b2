# loan_optimizer/core/normalize/__init__.py

from .amounts import format_indian_number, format_inr, format_pct, parse_indian_number

__all__ = [
    "format_indian_number",
    "format_inr",
    "format_pct",
    "parse_indian_number",
]
