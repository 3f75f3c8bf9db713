"""Payroll run state machine with transition validation."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from payroll_admin.models.payroll import PayrollRunStatus

if TYPE_CHECKING:
    from payroll_admin.models.payroll import PayrollRun


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


def _status_value(status: str | PayrollRunStatus) -> str:
    return status.value if isinstance(status, PayrollRunStatus) else status


class PayrollRunStateMachine:
    """State machine for payroll run status transitions.

    Allowed transitions:
    - Draft → Processed

    Processed is terminal; its payslips are not recalculated.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollRunStatus.DRAFT.value: [PayrollRunStatus.PROCESSED.value],
        PayrollRunStatus.PROCESSED.value: [],
    }

    # Statuses where payslips may be (re)generated
    CALCULATION_ALLOWED = {PayrollRunStatus.DRAFT.value}

    @classmethod
    def can_transition(cls, from_status: str | PayrollRunStatus, to_status: str | PayrollRunStatus) -> bool:
        allowed = cls.VALID_TRANSITIONS.get(_status_value(from_status), [])
        return _status_value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str | PayrollRunStatus, to_status: str | PayrollRunStatus) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(_status_value(from_status), _status_value(to_status))

    @classmethod
    def can_calculate(cls, status: str | PayrollRunStatus) -> bool:
        return _status_value(status) in cls.CALCULATION_ALLOWED

    @classmethod
    def get_next_statuses(cls, current_status: str | PayrollRunStatus) -> list[str]:
        return cls.VALID_TRANSITIONS.get(_status_value(current_status), [])

    @classmethod
    def validate_run_for_transition(
        cls, run: PayrollRun, to_status: str | PayrollRunStatus
    ) -> list[str]:
        """Validate a run for a specific transition, returning any errors.

        Returns list of error messages (empty if valid).
        """
        errors: list[str] = []
        from_status = run.status.value
        to_value = _status_value(to_status)

        if not cls.can_transition(from_status, to_value):
            errors.append(f"Cannot transition from '{from_status}' to '{to_value}'")
            return errors

        if to_value == PayrollRunStatus.PROCESSED.value:
            if not run.employee_ids:
                errors.append("Payroll run has no employees")
            errors.extend(validate_run_dates(run.period_start, run.period_end, run.pay_date))

        return errors


def validate_run_dates(period_start: str | None, period_end: str | None, pay_date: str | None) -> list[str]:
    """Check period_start <= period_end <= pay_date. Returns error messages."""
    if not period_start or not period_end or not pay_date:
        return ["Period start, period end and pay date are required"]

    try:
        start = date.fromisoformat(period_start)
        end = date.fromisoformat(period_end)
        pay = date.fromisoformat(pay_date)
    except ValueError as e:
        return [f"Invalid date: {e}"]

    errors: list[str] = []
    if start > end:
        errors.append("Period start must be on or before period end")
    if pay < end:
        errors.append("Pay date must be on or after period end")
    return errors
