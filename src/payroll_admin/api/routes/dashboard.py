"""Dashboard endpoint."""

from fastapi import APIRouter

from payroll_admin.api.dependencies import StoreDep
from payroll_admin.api.schemas import (
    ActivityItemResponse,
    DashboardResponse,
    PayrollRunResponse,
)
from payroll_admin.services.reports import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(store: StoreDep) -> DashboardResponse:
    summary = build_dashboard(store.get_state())
    last_run = summary.last_processed_run
    return DashboardResponse(
        active_employees=summary.active_employees,
        inactive_employees=summary.inactive_employees,
        draft_runs=summary.draft_runs,
        last_processed_run=(
            PayrollRunResponse.model_validate(last_run.to_dict()) if last_run else None
        ),
        last_run_total=summary.last_run_total,
        next_pay_date=summary.next_pay_date,
        recent_activity=[
            ActivityItemResponse.model_validate(item.to_dict())
            for item in summary.recent_activity
        ],
    )
