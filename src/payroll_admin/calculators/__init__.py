"""Payroll calculation engine."""

from payroll_admin.calculators.types import Deduction, Earning, LineItem, PayTotals
from payroll_admin.calculators.line_builder import LineItemBuilder, to_decimal
from payroll_admin.calculators.engine import (
    PayrollEngine,
    calc_gross,
    calc_pension,
    calc_tax,
    calc_totals,
    generate_payslips_for_run,
)

__all__ = [
    "Deduction",
    "Earning",
    "LineItem",
    "PayTotals",
    "LineItemBuilder",
    "to_decimal",
    "PayrollEngine",
    "calc_gross",
    "calc_pension",
    "calc_tax",
    "calc_totals",
    "generate_payslips_for_run",
]
