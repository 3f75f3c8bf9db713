"""Deterministic demo data.

create_seed() builds the same employees, runs and payslips for the same
integer seed on every platform. The generator is mulberry32: a fixed 32-bit
integer mixing function, reproduced exactly so fixtures match across
implementations. Money values use half-toward-+inf rounding to whole units.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import TypeVar

from payroll_admin.calculators.line_builder import LineItemBuilder
from payroll_admin.models.app_state import AppState
from payroll_admin.models.employee import Employee, EmployeeStatus
from payroll_admin.models.payroll import PayrollRun, PayrollRunStatus, Payslip, payslip_id
from payroll_admin.models.reference import ReferenceItem

T = TypeVar("T")

DEFAULT_SEED = 12345
EMPLOYEE_COUNT = 12
RUN_EMPLOYEE_LIMIT = 10
HEALTH_INSURANCE = 200

_MASK32 = 0xFFFFFFFF

DEPARTMENTS = ["Engineering", "Operations", "HR", "Finance"]
ROLES = [
    "Junior Developer",
    "Senior Developer",
    "Tech Lead",
    "DevOps Engineer",
    "Operations Coordinator",
    "Operations Manager",
    "HR Specialist",
    "HR Manager",
    "Financial Analyst",
    "Finance Manager",
]
EARNING_TYPES = ["Base Salary", "Overtime", "Allowance", "Bonus", "Holiday Bonus", "Commission"]
DEDUCTION_TYPES = ["Tax", "Pension", "Health Insurance", "Loan Repayment", "Union Dues", "Parking"]
FIRST_NAMES = [
    "John", "Sarah", "Michael", "Emily", "David", "Lisa", "Robert",
    "Amanda", "Chris", "Jessica", "Carlos", "Priya", "Noah", "Zoe",
]
LAST_NAMES = [
    "Smith", "Johnson", "Brown", "Davis", "Wilson", "Martinez", "Taylor",
    "Anderson", "Thomas", "Garcia", "Lee", "Singh", "Nguyen", "Patel",
]
BANK_NAMES = [
    "First National Bank",
    "City Bank",
    "Trust Bank",
    "Community Bank",
    "Metro Bank",
    "Regional Bank",
]
RUN_PERIODS = [
    ("run-1", "2024-11-01", "2024-11-30", "2024-12-05", PayrollRunStatus.PROCESSED,
     "November 2024 payroll"),
    ("run-2", "2024-12-01", "2024-12-31", "2025-01-05", PayrollRunStatus.PROCESSED,
     "December 2024 payroll with holiday bonuses"),
    ("run-3", "2025-01-01", "2025-01-31", "2025-02-05", PayrollRunStatus.DRAFT,
     "January 2025 payroll - draft"),
]


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32x32 multiply."""
    return (a * b) & _MASK32


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) for the given seed."""
    state = seed & _MASK32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    return next_float


def money_round(n: float) -> int:
    """Round half toward +inf, as the stored fixtures were produced."""
    floor = math.floor(n)
    return floor + 1 if n - floor >= 0.5 else floor


def pick(rng: Callable[[], float], items: Sequence[T]) -> T:
    return items[math.floor(rng() * len(items))]


def _reference(prefix: str, names: Sequence[str]) -> list[ReferenceItem]:
    return [ReferenceItem(id=f"{prefix}-{i}", name=name) for i, name in enumerate(names, start=1)]


def _make_employees(rng: Callable[[], float], departments: list[ReferenceItem],
                    roles: list[ReferenceItem]) -> list[Employee]:
    employees: list[Employee] = []
    for i in range(1, EMPLOYEE_COUNT + 1):
        # Draw order matters: every rng() call below shifts all later values.
        first = pick(rng, FIRST_NAMES)
        last = pick(rng, LAST_NAMES)
        dept = pick(rng, departments).name
        role = pick(rng, roles).name
        hire_year = 2018 + math.floor(rng() * 7)
        hire_month = 1 + math.floor(rng() * 12)
        hire_day = 1 + math.floor(rng() * 28)
        base_salary = money_round(50000 + rng() * 70000)
        status = EmployeeStatus.ACTIVE if rng() > 0.15 else EmployeeStatus.INACTIVE
        bank_name = pick(rng, BANK_NAMES)
        account_tail = math.floor(rng() * 9000 + 1000)

        employees.append(
            Employee(
                id=f"emp-{i}",
                first_name=first,
                last_name=last,
                email=f"{first.lower()}.{last.lower()}@company.com",
                phone=f"+1-555-{1000 + i}",
                department=dept,
                role=role,
                hire_date=f"{hire_year}-{hire_month:02d}-{hire_day:02d}",
                base_salary=base_salary,
                status=status,
                bank_name=bank_name,
                bank_account_no=f"****{account_tail}",
            )
        )
    return employees


def _make_payslip(rng: Callable[[], float], run_id: str, employee: Employee) -> Payslip:
    # Seeded history uses its own 15-20% tax line, not the engine's flat rates.
    monthly = float(employee.base_salary) / 12
    bonus = money_round(1000 + rng() * 3000) if rng() > 0.8 else 0
    overtime = money_round(100 + rng() * 1000) if rng() > 0.7 else 0
    gross = money_round(monthly + bonus + overtime)
    tax = money_round(gross * (0.15 + rng() * 0.05))
    total_deductions = tax + HEALTH_INSURANCE

    earnings = [LineItemBuilder.create_line("Base Salary", money_round(monthly))]
    if bonus:
        earnings.append(LineItemBuilder.create_line("Holiday Bonus", bonus))
    if overtime:
        earnings.append(LineItemBuilder.create_line("Overtime", overtime))

    deductions = [
        LineItemBuilder.create_line("Tax", tax),
        LineItemBuilder.create_line("Health Insurance", HEALTH_INSURANCE),
    ]

    return Payslip(
        id=payslip_id(run_id, employee.id),
        payroll_run_id=run_id,
        employee_id=employee.id,
        earnings=earnings,
        deductions=deductions,
        gross_pay=gross,
        total_deductions=total_deductions,
        net_pay=gross - total_deductions,
    )


def create_seed(seed: int = DEFAULT_SEED) -> AppState:
    """Build the demo state for an integer seed."""
    rng = mulberry32(seed)

    departments = _reference("dept", DEPARTMENTS)
    roles = _reference("role", ROLES)
    earning_types = _reference("earning", EARNING_TYPES)
    deduction_types = _reference("deduction", DEDUCTION_TYPES)

    employees = _make_employees(rng, departments, roles)
    run_employee_ids = [e.id for e in employees if e.is_active][:RUN_EMPLOYEE_LIMIT]

    payroll_runs = [
        PayrollRun(
            id=run_id,
            period_start=start,
            period_end=end,
            pay_date=pay_date,
            status=status,
            employee_ids=list(run_employee_ids),
            notes=notes,
        )
        for run_id, start, end, pay_date, status, notes in RUN_PERIODS
    ]

    by_id = {e.id: e for e in employees}
    payslips = [
        _make_payslip(rng, run.id, by_id[employee_id])
        for run in payroll_runs
        if run.status == PayrollRunStatus.PROCESSED
        for employee_id in run.employee_ids
    ]

    return AppState(
        employees=employees,
        payroll_runs=payroll_runs,
        payslips=payslips,
        departments=departments,
        roles=roles,
        earning_types=earning_types,
        deduction_types=deduction_types,
        use_local_storage=True,
    )
