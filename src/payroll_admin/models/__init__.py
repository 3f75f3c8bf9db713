"""Payroll admin records and ORM models."""

from payroll_admin.models.app_state import AppState
from payroll_admin.models.base import Base, TimestampMixin
from payroll_admin.models.employee import Employee, EmployeeStatus
from payroll_admin.models.payroll import PayrollRun, PayrollRunStatus, Payslip, payslip_id
from payroll_admin.models.reference import (
    DeductionType,
    Department,
    EarningType,
    ReferenceItem,
    Role,
)
from payroll_admin.models.storage import StoredState

__all__ = [
    "AppState",
    "Base",
    "TimestampMixin",
    "Employee",
    "EmployeeStatus",
    "PayrollRun",
    "PayrollRunStatus",
    "Payslip",
    "payslip_id",
    "DeductionType",
    "Department",
    "EarningType",
    "ReferenceItem",
    "Role",
    "StoredState",
]
