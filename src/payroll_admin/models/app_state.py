"""Whole-application state and its JSON document form."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from payroll_admin.models.employee import Employee
from payroll_admin.models.payroll import PayrollRun, Payslip
from payroll_admin.models.reference import (
    DeductionType,
    Department,
    EarningType,
    ReferenceItem,
    Role,
)


@dataclass
class AppState:
    """The in-memory object graph held by the store."""

    employees: list[Employee] = field(default_factory=list)
    payroll_runs: list[PayrollRun] = field(default_factory=list)
    payslips: list[Payslip] = field(default_factory=list)
    departments: list[Department] = field(default_factory=list)
    roles: list[Role] = field(default_factory=list)
    earning_types: list[EarningType] = field(default_factory=list)
    deduction_types: list[DeductionType] = field(default_factory=list)
    use_local_storage: bool = True

    def copy(self) -> AppState:
        """Shallow copy: new lists, same records."""
        return AppState(
            employees=list(self.employees),
            payroll_runs=list(self.payroll_runs),
            payslips=list(self.payslips),
            departments=list(self.departments),
            roles=list(self.roles),
            earning_types=list(self.earning_types),
            deduction_types=list(self.deduction_types),
            use_local_storage=self.use_local_storage,
        )

    def find_employee(self, employee_id: str) -> Employee | None:
        return next((e for e in self.employees if e.id == employee_id), None)

    def find_payroll_run(self, run_id: str) -> PayrollRun | None:
        return next((r for r in self.payroll_runs if r.id == run_id), None)

    def payslips_for_run(self, run_id: str) -> list[Payslip]:
        return [p for p in self.payslips if p.payroll_run_id == run_id]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase document form (JSON-safe)."""
        return to_json_safe({
            "employees": [e.to_dict() for e in self.employees],
            "payrollRuns": [r.to_dict() for r in self.payroll_runs],
            "payslips": [p.to_dict() for p in self.payslips],
            "departments": [d.to_dict() for d in self.departments],
            "roles": [r.to_dict() for r in self.roles],
            "earningTypes": [t.to_dict() for t in self.earning_types],
            "deductionTypes": [t.to_dict() for t in self.deduction_types],
            "useLocalStorage": self.use_local_storage,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppState:
        return cls(
            employees=[Employee.from_dict(e) for e in data.get("employees", [])],
            payroll_runs=[PayrollRun.from_dict(r) for r in data.get("payrollRuns", [])],
            payslips=[Payslip.from_dict(p) for p in data.get("payslips", [])],
            departments=[ReferenceItem.from_dict(d) for d in data.get("departments", [])],
            roles=[ReferenceItem.from_dict(r) for r in data.get("roles", [])],
            earning_types=[ReferenceItem.from_dict(t) for t in data.get("earningTypes", [])],
            deduction_types=[ReferenceItem.from_dict(t) for t in data.get("deductionTypes", [])],
            use_local_storage=bool(data.get("useLocalStorage", True)),
        )


def to_json_safe(obj: Any) -> Any:
    """Recursively convert Decimals to JSON numbers.

    Integral amounts become ints, everything else floats, matching the
    number-only document the records were originally stored as.
    """
    if isinstance(obj, dict):
        return {k: to_json_safe(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [to_json_safe(v) for v in obj]
    elif isinstance(obj, Decimal):
        if obj == obj.to_integral_value():
            return int(obj)
        return float(obj)
    return obj
