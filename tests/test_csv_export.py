"""Tests for CSV export."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from payroll_admin.calculators.engine import generate_payslips_for_run
from payroll_admin.calculators.types import LineItem
from payroll_admin.models import Payslip
from payroll_admin.seed import create_seed
from payroll_admin.services.csv_export import (
    export_employees_csv,
    export_filename,
    export_payslips_csv,
)

EMPLOYEE_HEADER = (
    '"Name","Email","Phone","Department","Role","Hire Date",'
    '"Base Salary","Status","Bank Name","Account No"'
)
PAYSLIP_HEADER = (
    '"Employee","Base Salary","Earnings Total","Gross Pay","Tax","Pension",'
    '"Other Deductions","Total Deductions","Net Pay"'
)


class TestEmployeesCsv:
    def test_header_only_when_empty(self):
        assert export_employees_csv([]) == EMPLOYEE_HEADER

    def test_row(self, employee):
        assert export_employees_csv([employee]) == (
            EMPLOYEE_HEADER + "\n"
            '"Ada Lovelace","ada@example.com","+1-555-0100","Engineering","Tech Lead",'
            '"2020-01-15","60000","Active","City Bank","****1234"'
        )

    def test_missing_bank_details_blank(self, employee):
        employee = replace(employee, bank_name=None, bank_account_no=None)

        row = export_employees_csv([employee]).splitlines()[1]

        assert row.endswith('"Active","",""')

    def test_embedded_quotes_doubled(self, employee):
        employee = replace(employee, first_name='Ada "Countess"')

        row = export_employees_csv([employee]).splitlines()[1]

        assert row.startswith('"Ada ""Countess"" Lovelace",')

    def test_no_trailing_newline(self):
        content = export_employees_csv(create_seed().employees)

        assert not content.endswith("\n")
        assert len(content.split("\n")) == 13

    def test_seed_first_row(self):
        row = export_employees_csv(create_seed().employees).split("\n")[1]

        assert row == (
            '"Zoe Wilson","zoe.wilson@company.com","+1-555-1001","Operations",'
            '"Financial Analyst","2021-05-03","103648","Active","Metro Bank","****5139"'
        )


class TestPayslipsCsv:
    def test_engine_payslip(self, employee):
        payslips = generate_payslips_for_run(
            "run-1",
            [employee],
            {employee.id: [LineItem("Bonus", Decimal("1000"))]},
            {employee.id: [LineItem("Loan", Decimal("200"))]},
        )

        assert export_payslips_csv(payslips, [employee]) == (
            PAYSLIP_HEADER + "\n"
            '"Ada Lovelace","60000","1000","61000","6100.00","4800.00","200","11100","49900"'
        )

    def test_fractional_amounts(self, employee):
        slip = Payslip(
            id="payslip-run-1-emp-x",
            payroll_run_id="run-1",
            employee_id=employee.id,
            earnings=[LineItem("Overtime", Decimal("0.5"))],
            deductions=[],
            gross_pay=Decimal("1000.50"),
            total_deductions=Decimal("4900.05"),
            net_pay=Decimal("-3899.55"),
        )

        row = export_payslips_csv([slip], [employee]).split("\n")[1]

        assert row == (
            '"Ada Lovelace","60000","0.5","1000.5","100.05","4800.00","0","4900.05","-3899.55"'
        )

    def test_unknown_employee(self):
        slip = Payslip(
            id="payslip-run-1-emp-gone",
            payroll_run_id="run-1",
            employee_id="emp-gone",
            earnings=[],
            deductions=[],
            gross_pay=Decimal("100"),
            total_deductions=Decimal("0"),
            net_pay=Decimal("100"),
        )

        row = export_payslips_csv([slip], []).split("\n")[1]

        assert row == '"Unknown","0","0","100","10.00","0.00","0","0","100"'

    def test_seed_payslip(self):
        state = create_seed()

        row = export_payslips_csv(state.payslips[:1], state.employees).split("\n")[1]

        # base 103648: pension 8291.84; gross 9562: tax 956.20
        assert row == (
            '"Zoe Wilson","103648","9562","9562","956.20","8291.84","2028","2028","7534"'
        )


class TestExportFilename:
    def test_employees(self):
        assert export_filename("employees", date(2024, 12, 5)) == "employees-2024-12-05.csv"

    def test_defaults_to_today(self):
        assert export_filename("payslips") == f"payslips-{date.today().isoformat()}.csv"
