"""Dashboard summary of the application state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from payroll_admin.formatting import format_date
from payroll_admin.models.app_state import AppState
from payroll_admin.models.employee import EmployeeStatus
from payroll_admin.models.payroll import PayrollRun, PayrollRunStatus

logger = logging.getLogger(__name__)

RECENT_RUNS = 3
RECENT_EMPLOYEES = 2
ACTIVITY_LIMIT = 5


@dataclass(frozen=True)
class ActivityItem:
    """One line of the recent activity feed."""

    id: str
    type: str  # "payroll" | "employee"
    title: str
    description: str
    date: str
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "status": self.status,
        }


@dataclass
class DashboardSummary:
    active_employees: int
    inactive_employees: int
    draft_runs: int
    last_processed_run: PayrollRun | None
    last_run_total: Decimal
    next_pay_date: str | None
    recent_activity: list[ActivityItem] = field(default_factory=list)


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.debug("Ignoring unparseable date %r", value)
        return None


def build_dashboard(state: AppState, today: date | None = None) -> DashboardSummary:
    """Summarise headcount, run totals and recent activity.

    The last processed run is the one with the latest pay date. The next
    pay date is the earliest pay date strictly after today across all runs.
    """
    today = today or date.today()

    active = sum(1 for e in state.employees if e.status == EmployeeStatus.ACTIVE)
    drafts = sum(1 for r in state.payroll_runs if r.status == PayrollRunStatus.DRAFT)

    last_run: PayrollRun | None = None
    last_pay: date | None = None
    for run in state.payroll_runs:
        if run.status != PayrollRunStatus.PROCESSED:
            continue
        pay = _parse_date(run.pay_date)
        if pay is not None and (last_pay is None or pay > last_pay):
            last_run, last_pay = run, pay

    last_total = Decimal("0")
    if last_run is not None:
        last_total = sum(
            (p.net_pay for p in state.payslips_for_run(last_run.id)), Decimal("0")
        )

    next_pay: date | None = None
    next_pay_date: str | None = None
    for run in state.payroll_runs:
        pay = _parse_date(run.pay_date)
        if pay is not None and pay > today and (next_pay is None or pay < next_pay):
            next_pay, next_pay_date = pay, run.pay_date

    return DashboardSummary(
        active_employees=active,
        inactive_employees=len(state.employees) - active,
        draft_runs=drafts,
        last_processed_run=last_run,
        last_run_total=last_total,
        next_pay_date=next_pay_date,
        recent_activity=recent_activity(state),
    )


def recent_activity(state: AppState, limit: int = ACTIVITY_LIMIT) -> list[ActivityItem]:
    """Latest runs and hires, newest first."""
    items = [
        ActivityItem(
            id=run.id,
            type="payroll",
            title=f"Payroll Run {run.status.value}",
            description=(
                f"Period: {_display_date(run.period_start)} - {_display_date(run.period_end)}"
            ),
            date=run.pay_date,
            status=run.status.value,
        )
        for run in state.payroll_runs[-RECENT_RUNS:]
    ]
    items += [
        ActivityItem(
            id=emp.id,
            type="employee",
            title="Employee Added",
            description=f"{emp.full_name} joined {emp.department}",
            date=emp.hire_date,
            status=emp.status.value,
        )
        for emp in state.employees[-RECENT_EMPLOYEES:]
    ]

    # Stable: equal dates keep runs ahead of employees
    items.sort(key=lambda item: _parse_date(item.date) or date.min, reverse=True)
    return items[:limit]


def _display_date(value: str) -> str:
    return format_date(value) if _parse_date(value) else value
