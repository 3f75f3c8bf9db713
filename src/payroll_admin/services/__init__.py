"""Payroll admin services."""

from payroll_admin.services.state_machine import InvalidTransitionError, PayrollRunStateMachine
from payroll_admin.services.store import Store
from payroll_admin.services.payroll_run_service import (
    DraftRun,
    DraftValidationError,
    PayrollRunNotFoundError,
    PayrollRunService,
)

__all__ = [
    "InvalidTransitionError",
    "PayrollRunStateMachine",
    "Store",
    "DraftRun",
    "DraftValidationError",
    "PayrollRunNotFoundError",
    "PayrollRunService",
]
