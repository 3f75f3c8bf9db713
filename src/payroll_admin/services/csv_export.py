"""CSV export of employees and payslips."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from payroll_admin.calculators.line_builder import LineItemBuilder
from payroll_admin.models.employee import Employee
from payroll_admin.models.payroll import Payslip

EMPLOYEE_HEADERS = [
    "Name",
    "Email",
    "Phone",
    "Department",
    "Role",
    "Hire Date",
    "Base Salary",
    "Status",
    "Bank Name",
    "Account No",
]

PAYSLIP_HEADERS = [
    "Employee",
    "Base Salary",
    "Earnings Total",
    "Gross Pay",
    "Tax",
    "Pension",
    "Other Deductions",
    "Total Deductions",
    "Net Pay",
]

# Fixed display rates; they do not follow engine configuration.
CSV_TAX_RATE = Decimal("0.1")
CSV_PENSION_RATE = Decimal("0.08")


def _number(value: Decimal) -> str:
    """Shortest plain rendering: 60000, 1000.5, -18000."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def _fixed2(value: Decimal) -> str:
    return str(LineItemBuilder.round_to_cents(value))


def _render(rows: Iterable[Sequence[str]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return output.getvalue().rstrip("\n")


def export_employees_csv(employees: Iterable[Employee]) -> str:
    """Render employees as CSV text, every field quoted, no trailing newline."""
    rows: list[list[str]] = [EMPLOYEE_HEADERS]
    for emp in employees:
        rows.append([
            emp.full_name,
            emp.email,
            emp.phone,
            emp.department,
            emp.role,
            emp.hire_date,
            _number(emp.base_salary),
            emp.status.value,
            emp.bank_name or "",
            emp.bank_account_no or "",
        ])
    return _render(rows)


def export_payslips_csv(payslips: Iterable[Payslip], employees: Iterable[Employee]) -> str:
    """Render payslips as CSV text.

    Tax and pension columns are recomputed for display from gross pay and
    the employee's base salary. Payslips whose employee no longer exists
    show as "Unknown" with zero base salary and pension.
    """
    by_id = {e.id: e for e in employees}
    rows: list[list[str]] = [PAYSLIP_HEADERS]
    for slip in payslips:
        employee = by_id.get(slip.employee_id)
        tax = slip.gross_pay * CSV_TAX_RATE
        pension = employee.base_salary * CSV_PENSION_RATE if employee else Decimal("0")

        rows.append([
            employee.full_name if employee else "Unknown",
            _number(employee.base_salary) if employee else "0",
            _number(slip.earnings_total),
            _number(slip.gross_pay),
            _fixed2(tax),
            _fixed2(pension),
            _number(slip.other_deductions_total),
            _number(slip.total_deductions),
            _number(slip.net_pay),
        ])
    return _render(rows)


def export_filename(kind: str, today: date | None = None) -> str:
    """Download name such as employees-2024-12-05.csv."""
    return f"{kind}-{(today or date.today()).isoformat()}.csv"
