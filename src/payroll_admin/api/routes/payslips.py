"""Payslip API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, Response

from payroll_admin.api.dependencies import EngineDep, StoreDep
from payroll_admin.api.schemas import (
    CalculateRequest,
    CalculateResponse,
    PayslipListResponse,
    PayslipResponse,
)
from payroll_admin.services.csv_export import export_filename, export_payslips_csv

router = APIRouter(prefix="/payslips", tags=["payslips"])


@router.get("", response_model=PayslipListResponse)
def list_payslips(
    store: StoreDep,
    run_id: Annotated[str | None, Query(alias="runId")] = None,
    employee_id: Annotated[str | None, Query(alias="employeeId")] = None,
) -> PayslipListResponse:
    state = store.get_state()
    payslips = state.payslips_for_run(run_id) if run_id else state.payslips
    if employee_id:
        payslips = [p for p in payslips if p.employee_id == employee_id]
    return PayslipListResponse(
        items=[PayslipResponse.model_validate(p.to_dict()) for p in payslips],
        total=len(payslips),
    )


@router.get("/export")
def export_payslips(
    store: StoreDep,
    run_id: Annotated[str | None, Query(alias="runId")] = None,
) -> Response:
    """Download payslips as CSV, optionally for a single run."""
    state = store.get_state()
    payslips = state.payslips_for_run(run_id) if run_id else state.payslips
    filename = export_filename("payslips")
    return Response(
        content=export_payslips_csv(payslips, state.employees),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/calculate", response_model=CalculateResponse)
def calculate(engine: EngineDep, payload: CalculateRequest) -> CalculateResponse:
    """Compute pay totals for ad-hoc inputs without storing anything."""
    earnings = [e.to_line_item() for e in payload.earnings]
    deductions = [d.to_line_item() for d in payload.deductions]
    totals = engine.calc_totals(payload.base_salary, earnings, deductions)
    gross = engine.calc_gross(payload.base_salary, earnings)
    return CalculateResponse(
        gross_pay=totals.gross_pay,
        tax=engine.calc_tax(gross),
        pension=engine.calc_pension(payload.base_salary),
        total_deductions=totals.total_deductions,
        net_pay=totals.net_pay,
    )
