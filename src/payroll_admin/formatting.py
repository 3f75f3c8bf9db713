"""Display formatting for money and dates."""

from __future__ import annotations

from datetime import date

from payroll_admin.calculators.line_builder import LineItemBuilder, Numeric

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_currency(amount: Numeric) -> str:
    """Format as US dollars, e.g. "$1,234.56" or "-$18,000.00"."""
    value = LineItemBuilder.round_to_cents(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${value.copy_abs():,.2f}"


def format_date(value: str | date) -> str:
    """Format an ISO date as "Dec 5, 2024"."""
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"
