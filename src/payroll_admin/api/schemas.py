"""Pydantic schemas for API request/response models.

Field names are snake_case in Python and camelCase on the wire.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from payroll_admin.calculators.types import LineItem
from payroll_admin.models.employee import EmployeeStatus
from payroll_admin.models.payroll import PayrollRunStatus
from payroll_admin.services.payroll_run_service import Adjustments, DraftRun

# Money travels as JSON numbers, not strings.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    detail: str
    code: str | None = None


# ============================================================================
# Line items
# ============================================================================


class LineItemSchema(CamelModel):
    """An earning or deduction: free-text label plus amount."""

    type: str = Field(min_length=1)
    amount: Money

    def to_line_item(self) -> LineItem:
        return LineItem(type=self.type, amount=self.amount)


class AdjustmentsSchema(CamelModel):
    earnings: list[LineItemSchema] = Field(default_factory=list)
    deductions: list[LineItemSchema] = Field(default_factory=list)

    def to_adjustments(self) -> Adjustments:
        return Adjustments(
            earnings=[e.to_line_item() for e in self.earnings],
            deductions=[d.to_line_item() for d in self.deductions],
        )


# ============================================================================
# Employee schemas
# ============================================================================


def _reject_null(value: object) -> object:
    """Patch fields may be omitted but not set to null unless the record allows it."""
    if value is None:
        raise ValueError("may not be null")
    return value


class EmployeeCreate(CamelModel):
    """Schema for creating an employee. Salary is not range-checked."""

    first_name: str
    last_name: str
    email: str
    phone: str = ""
    department: str
    role: str
    hire_date: str
    base_salary: Money
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    bank_name: str | None = None
    bank_account_no: str | None = None


class EmployeeUpdate(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    department: str | None = None
    role: str | None = None
    hire_date: str | None = None
    base_salary: Money | None = None
    status: EmployeeStatus | None = None
    bank_name: str | None = None
    bank_account_no: str | None = None

    @field_validator(
        "first_name",
        "last_name",
        "email",
        "phone",
        "department",
        "role",
        "hire_date",
        "base_salary",
        "status",
        mode="before",
    )
    @classmethod
    def reject_null(cls, value: object) -> object:
        return _reject_null(value)


class EmployeeResponse(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    department: str
    role: str
    hire_date: str
    base_salary: Money
    status: EmployeeStatus
    bank_name: str | None = None
    bank_account_no: str | None = None


class EmployeeListResponse(BaseModel):
    items: list[EmployeeResponse]
    total: int


# ============================================================================
# Payroll run schemas
# ============================================================================


class PayrollRunCreate(CamelModel):
    """Schema for storing a run directly; dates are not validated here."""

    period_start: str
    period_end: str
    pay_date: str
    status: PayrollRunStatus = PayrollRunStatus.DRAFT
    notes: str | None = None
    employee_ids: list[str] = Field(default_factory=list)


class PayrollRunUpdate(CamelModel):
    """Editable run fields. Status changes go through the process endpoint."""

    period_start: str | None = None
    period_end: str | None = None
    pay_date: str | None = None
    notes: str | None = None
    employee_ids: list[str] | None = None

    @field_validator("period_start", "period_end", "pay_date", "employee_ids", mode="before")
    @classmethod
    def reject_null(cls, value: object) -> object:
        return _reject_null(value)


class PayrollRunResponse(CamelModel):
    id: str
    period_start: str
    period_end: str
    pay_date: str
    status: PayrollRunStatus
    notes: str | None = None
    employee_ids: list[str]


class PayrollRunListResponse(BaseModel):
    items: list[PayrollRunResponse]
    total: int


class DraftRunRequest(CamelModel):
    """Draft builder submission."""

    period_start: str = ""
    period_end: str = ""
    pay_date: str = ""
    notes: str = ""
    selected_employee_ids: list[str] = Field(default_factory=list)
    adjustments: dict[str, AdjustmentsSchema] = Field(default_factory=dict)

    def to_draft(self) -> DraftRun:
        return DraftRun(
            period_start=self.period_start,
            period_end=self.period_end,
            pay_date=self.pay_date,
            notes=self.notes,
            selected_employee_ids=list(self.selected_employee_ids),
            adjustments={k: v.to_adjustments() for k, v in self.adjustments.items()},
        )


class ProcessRunRequest(CamelModel):
    """Adjustments applied when processing a stored Draft run."""

    adjustments: dict[str, AdjustmentsSchema] = Field(default_factory=dict)

    def earnings_map(self) -> dict[str, list[LineItem]]:
        return {k: [e.to_line_item() for e in v.earnings] for k, v in self.adjustments.items()}

    def deductions_map(self) -> dict[str, list[LineItem]]:
        return {k: [d.to_line_item() for d in v.deductions] for k, v in self.adjustments.items()}


class EmployeeTotalsResponse(CamelModel):
    employee_id: str
    gross_pay: Money
    total_deductions: Money
    net_pay: Money


class PreviewResponse(CamelModel):
    employees: list[EmployeeTotalsResponse]
    grand_net: Money
    negative_net_employee_ids: list[str]


# ============================================================================
# Payslip schemas
# ============================================================================


class PayslipResponse(CamelModel):
    id: str
    payroll_run_id: str
    employee_id: str
    earnings: list[LineItemSchema]
    deductions: list[LineItemSchema]
    gross_pay: Money
    total_deductions: Money
    net_pay: Money


class PayslipListResponse(BaseModel):
    items: list[PayslipResponse]
    total: int


class ProcessResponse(CamelModel):
    run: PayrollRunResponse
    payslips: list[PayslipResponse]
    total_net: Money


class CalculateRequest(CamelModel):
    """Ad-hoc inputs for a single pay calculation."""

    base_salary: Money
    earnings: list[LineItemSchema] = Field(default_factory=list)
    deductions: list[LineItemSchema] = Field(default_factory=list)


class CalculateResponse(CamelModel):
    gross_pay: Money
    tax: Money
    pension: Money
    total_deductions: Money
    net_pay: Money


# ============================================================================
# Dashboard and settings
# ============================================================================


class ActivityItemResponse(CamelModel):
    id: str
    type: str
    title: str
    description: str
    date: str
    status: str


class DashboardResponse(CamelModel):
    active_employees: int
    inactive_employees: int
    draft_runs: int
    last_processed_run: PayrollRunResponse | None = None
    last_run_total: Money
    next_pay_date: str | None = None
    recent_activity: list[ActivityItemResponse]


class SettingsResponse(CamelModel):
    use_local_storage: bool
    state_key: str
    tax_rate: Money
    pension_rate: Money


class ResetRequest(CamelModel):
    seed: int | None = None
