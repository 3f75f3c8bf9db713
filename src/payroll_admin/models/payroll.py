"""Payroll run and payslip records."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_admin.calculators.line_builder import LineItemBuilder, to_decimal
from payroll_admin.calculators.types import Deduction, Earning


class PayrollRunStatus(str, Enum):
    """Payroll run status values."""

    DRAFT = "Draft"
    PROCESSED = "Processed"


@dataclass
class PayrollRun:
    """A batch processing cycle covering a pay period.

    Dates are ISO strings. period_start <= period_end <= pay_date is
    expected but not enforced here.
    """

    id: str
    period_start: str
    period_end: str
    pay_date: str
    status: PayrollRunStatus = PayrollRunStatus.DRAFT
    notes: str | None = None
    employee_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.status = PayrollRunStatus(self.status)
        self.employee_ids = list(self.employee_ids)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "periodStart": self.period_start,
            "periodEnd": self.period_end,
            "payDate": self.pay_date,
            "status": self.status.value,
            "employeeIds": list(self.employee_ids),
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayrollRun:
        return cls(
            id=data["id"],
            period_start=data.get("periodStart", ""),
            period_end=data.get("periodEnd", ""),
            pay_date=data.get("payDate", ""),
            status=data.get("status", PayrollRunStatus.DRAFT.value),
            notes=data.get("notes"),
            employee_ids=data.get("employeeIds", []),
        )


def payslip_id(payroll_run_id: str, employee_id: str) -> str:
    """Payslips are keyed by (run, employee)."""
    return f"payslip-{payroll_run_id}-{employee_id}"


@dataclass
class Payslip:
    """Computed per-employee output of a processed payroll run."""

    id: str
    payroll_run_id: str
    employee_id: str
    earnings: list[Earning]
    deductions: list[Deduction]
    gross_pay: Decimal
    total_deductions: Decimal
    net_pay: Decimal

    def __post_init__(self) -> None:
        self.gross_pay = to_decimal(self.gross_pay)
        self.total_deductions = to_decimal(self.total_deductions)
        self.net_pay = to_decimal(self.net_pay)

    @property
    def earnings_total(self) -> Decimal:
        return LineItemBuilder.sum_amounts(self.earnings)

    @property
    def other_deductions_total(self) -> Decimal:
        return LineItemBuilder.sum_amounts(self.deductions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "payrollRunId": self.payroll_run_id,
            "employeeId": self.employee_id,
            "earnings": [e.to_dict() for e in self.earnings],
            "deductions": [d.to_dict() for d in self.deductions],
            "grossPay": self.gross_pay,
            "totalDeductions": self.total_deductions,
            "netPay": self.net_pay,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Payslip:
        return cls(
            id=data["id"],
            payroll_run_id=data["payrollRunId"],
            employee_id=data["employeeId"],
            earnings=LineItemBuilder.from_dicts(data.get("earnings")),
            deductions=LineItemBuilder.from_dicts(data.get("deductions")),
            gross_pay=data.get("grossPay", 0),
            total_deductions=data.get("totalDeductions", 0),
            net_pay=data.get("netPay", 0),
        )
