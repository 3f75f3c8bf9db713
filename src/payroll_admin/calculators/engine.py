"""Payroll calculation engine.

Pure functions: no I/O, no state, no exceptions for odd inputs. Negative
salaries or amounts, empty employee lists and negative net pay are all
returned as the arithmetic produces them; validation belongs to callers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from payroll_admin.calculators.line_builder import LineItemBuilder, Numeric, to_decimal
from payroll_admin.calculators.types import Deduction, Earning, PayTotals
from payroll_admin.models.payroll import Payslip, payslip_id

if TYPE_CHECKING:
    from payroll_admin.config import Settings
    from payroll_admin.models.employee import Employee

DEFAULT_TAX_RATE = Decimal("0.10")
DEFAULT_PENSION_RATE = Decimal("0.08")


@dataclass(frozen=True)
class PayrollEngine:
    """Flat-rate payroll calculator.

    Calculation per employee:
    1) gross = base salary + sum(earnings)
    2) tax = round2(gross * tax_rate)
    3) pension = round2(base salary * pension_rate)
    4) total deductions = round2(tax + pension + sum(deductions))
    5) net = round2(unrounded gross - unrounded total deductions)

    Steps 4 and 5 round independently of each other, so net is derived from
    the pre-rounding figures and not from the rounded totals.
    """

    tax_rate: Decimal = DEFAULT_TAX_RATE
    pension_rate: Decimal = DEFAULT_PENSION_RATE

    @classmethod
    def from_settings(cls, settings: Settings) -> PayrollEngine:
        return cls(tax_rate=settings.tax_rate, pension_rate=settings.pension_rate)

    def calc_gross(self, base_salary: Numeric, earnings: Iterable[Earning]) -> Decimal:
        """Base salary plus all earnings. Not rounded."""
        return to_decimal(base_salary) + LineItemBuilder.sum_amounts(earnings)

    def calc_tax(self, gross_pay: Numeric) -> Decimal:
        return LineItemBuilder.round_to_cents(to_decimal(gross_pay) * self.tax_rate)

    def calc_pension(self, base_salary: Numeric) -> Decimal:
        """Pension is charged on base salary, not gross."""
        return LineItemBuilder.round_to_cents(to_decimal(base_salary) * self.pension_rate)

    def calc_totals(
        self,
        base_salary: Numeric,
        earnings: Iterable[Earning],
        deductions: Iterable[Deduction],
    ) -> PayTotals:
        """Compute gross, total deductions and net for one employee."""
        gross = self.calc_gross(base_salary, earnings)
        tax = self.calc_tax(gross)
        pension = self.calc_pension(base_salary)
        other = LineItemBuilder.sum_amounts(deductions)

        total_deductions = tax + pension + other
        net = gross - total_deductions

        return PayTotals(
            gross_pay=LineItemBuilder.round_to_cents(gross),
            total_deductions=LineItemBuilder.round_to_cents(total_deductions),
            net_pay=LineItemBuilder.round_to_cents(net),
        )

    def generate_payslips_for_run(
        self,
        payroll_run_id: str,
        employees: Sequence[Employee],
        earnings_by_employee_id: Mapping[str, Sequence[Earning]] | None = None,
        deductions_by_employee_id: Mapping[str, Sequence[Deduction]] | None = None,
    ) -> list[Payslip]:
        """Build one payslip per employee, in input order.

        Employees missing from either map get an empty list. Inputs are not
        mutated; each payslip holds its own copy of the line lists.
        """
        earnings_map = earnings_by_employee_id or {}
        deductions_map = deductions_by_employee_id or {}

        payslips: list[Payslip] = []
        for employee in employees:
            earnings = list(earnings_map.get(employee.id, []))
            deductions = list(deductions_map.get(employee.id, []))
            totals = self.calc_totals(employee.base_salary, earnings, deductions)

            payslips.append(
                Payslip(
                    id=payslip_id(payroll_run_id, employee.id),
                    payroll_run_id=payroll_run_id,
                    employee_id=employee.id,
                    earnings=earnings,
                    deductions=deductions,
                    gross_pay=totals.gross_pay,
                    total_deductions=totals.total_deductions,
                    net_pay=totals.net_pay,
                )
            )
        return payslips


_default_engine = PayrollEngine()


def calc_gross(base_salary: Numeric, earnings: Iterable[Earning]) -> Decimal:
    return _default_engine.calc_gross(base_salary, earnings)


def calc_tax(gross_pay: Numeric) -> Decimal:
    """Flat 10% of gross, rounded to cents."""
    return _default_engine.calc_tax(gross_pay)


def calc_pension(base_salary: Numeric) -> Decimal:
    """Flat 8% of base salary, rounded to cents."""
    return _default_engine.calc_pension(base_salary)


def calc_totals(
    base_salary: Numeric,
    earnings: Iterable[Earning],
    deductions: Iterable[Deduction],
) -> PayTotals:
    return _default_engine.calc_totals(base_salary, earnings, deductions)


def generate_payslips_for_run(
    payroll_run_id: str,
    employees: Sequence[Employee],
    earnings_by_employee_id: Mapping[str, Sequence[Earning]] | None = None,
    deductions_by_employee_id: Mapping[str, Sequence[Deduction]] | None = None,
) -> list[Payslip]:
    return _default_engine.generate_payslips_for_run(
        payroll_run_id, employees, earnings_by_employee_id, deductions_by_employee_id
    )
