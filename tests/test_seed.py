"""Tests for deterministic seed data.

Reference values were produced by the browser build of the same generator.
"""

from decimal import Decimal

import pytest

from payroll_admin.models import EmployeeStatus, PayrollRunStatus
from payroll_admin.seed import (
    DEFAULT_SEED,
    create_seed,
    money_round,
    mulberry32,
)


class TestMulberry32:
    def test_reference_sequence(self):
        rng = mulberry32(12345)

        assert rng() == 0.9797282677609473
        assert rng() == 0.3067522644996643
        assert rng() == 0.484205421525985

    def test_values_in_unit_interval(self):
        rng = mulberry32(7)
        values = [rng() for _ in range(500)]

        assert all(0 <= v < 1 for v in values)

    def test_independent_generators(self):
        a = mulberry32(99)
        b = mulberry32(99)

        assert [a() for _ in range(10)] == [b() for _ in range(10)]


class TestMoneyRound:
    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (2.49, 2), (-2.5, -2), (-2.51, -3), (7.0, 7)],
    )
    def test_half_toward_positive_infinity(self, value, expected):
        assert money_round(value) == expected


class TestCreateSeed:
    def test_default_seed(self):
        assert DEFAULT_SEED == 12345

    def test_deterministic(self):
        assert create_seed().to_dict() == create_seed().to_dict()

    def test_different_seed_differs(self):
        assert create_seed(42).to_dict() != create_seed(12345).to_dict()

    def test_reference_lists(self):
        state = create_seed()

        assert [d.name for d in state.departments] == [
            "Engineering", "Operations", "HR", "Finance",
        ]
        assert state.departments[0].id == "dept-1"
        assert len(state.roles) == 10
        assert len(state.earning_types) == 6
        assert len(state.deduction_types) == 6
        assert state.earning_types[0].id == "earning-1"
        assert state.deduction_types[-1].id == "deduction-6"

    def test_first_employee(self):
        emp = create_seed().employees[0]

        assert emp.id == "emp-1"
        assert emp.full_name == "Zoe Wilson"
        assert emp.email == "zoe.wilson@company.com"
        assert emp.phone == "+1-555-1001"
        assert emp.department == "Operations"
        assert emp.role == "Financial Analyst"
        assert emp.hire_date == "2021-05-03"
        assert emp.base_salary == Decimal("103648")
        assert emp.status == EmployeeStatus.ACTIVE
        assert emp.bank_name == "Metro Bank"
        assert emp.bank_account_no == "****5139"

    def test_other_employees(self):
        employees = create_seed().employees

        assert len(employees) == 12
        assert employees[1].full_name == "Zoe Nguyen"
        assert employees[1].base_salary == Decimal("104069")
        assert employees[1].bank_account_no == "****8021"
        assert employees[2].full_name == "Priya Garcia"
        assert employees[2].role == "Junior Developer"
        assert employees[2].hire_date == "2020-03-22"
        last = employees[11]
        assert (last.id, last.full_name, last.department) == ("emp-12", "David Johnson", "HR")
        assert last.base_salary == Decimal("54968")

    def test_other_seed_first_employee(self):
        emp = create_seed(42).employees[0]

        assert emp.full_name == "Chris Taylor"
        assert emp.department == "Finance"
        assert emp.hire_date == "2019-07-08"
        assert emp.base_salary == Decimal("93732")
        assert emp.bank_name == "Trust Bank"
        assert emp.bank_account_no == "****3249"

    def test_payroll_runs(self):
        runs = create_seed().payroll_runs

        assert [r.id for r in runs] == ["run-1", "run-2", "run-3"]
        assert [r.status for r in runs] == [
            PayrollRunStatus.PROCESSED,
            PayrollRunStatus.PROCESSED,
            PayrollRunStatus.DRAFT,
        ]
        assert runs[0].pay_date == "2024-12-05"
        expected_ids = [f"emp-{i}" for i in range(1, 11)]
        assert all(r.employee_ids == expected_ids for r in runs)

    def test_payslips_only_for_processed_runs(self):
        state = create_seed()

        assert len(state.payslips) == 20
        assert {p.payroll_run_id for p in state.payslips} == {"run-1", "run-2"}

    def test_first_payslip(self):
        slip = create_seed().payslips[0]

        assert slip.id == "payslip-run-1-emp-1"
        assert [(e.type, e.amount) for e in slip.earnings] == [
            ("Base Salary", Decimal("8637")),
            ("Overtime", Decimal("925")),
        ]
        assert [(d.type, d.amount) for d in slip.deductions] == [
            ("Tax", Decimal("1828")),
            ("Health Insurance", Decimal("200")),
        ]
        assert slip.gross_pay == Decimal("9562")
        assert slip.total_deductions == Decimal("2028")
        assert slip.net_pay == Decimal("7534")

    def test_bonus_payslip(self):
        slip = create_seed().payslips[2]

        assert slip.id == "payslip-run-1-emp-3"
        assert [(e.type, e.amount) for e in slip.earnings] == [
            ("Base Salary", Decimal("4757")),
            ("Holiday Bonus", Decimal("2295")),
        ]
        assert slip.gross_pay == Decimal("7052")
        assert slip.net_pay == Decimal("5484")

    def test_last_payslip(self):
        slip = create_seed().payslips[-1]

        assert slip.id == "payslip-run-2-emp-10"
        assert slip.gross_pay == Decimal("6542")
        assert slip.total_deductions == Decimal("1416")
        assert slip.net_pay == Decimal("5126")

    def test_payslip_totals_consistent(self):
        for slip in create_seed().payslips:
            assert slip.gross_pay - slip.total_deductions == slip.net_pay
            assert slip.total_deductions == slip.other_deductions_total
