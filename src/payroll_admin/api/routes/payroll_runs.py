"""Payroll run API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, HTTPException, Path, Query, Response, status

from payroll_admin.api.dependencies import PayrollRunServiceDep, StoreDep
from payroll_admin.api.schemas import (
    DraftRunRequest,
    EmployeeTotalsResponse,
    ErrorResponse,
    PayrollRunCreate,
    PayrollRunListResponse,
    PayrollRunResponse,
    PayrollRunUpdate,
    PayslipResponse,
    PreviewResponse,
    ProcessResponse,
    ProcessRunRequest,
)
from payroll_admin.models.payroll import PayrollRunStatus
from payroll_admin.services.payroll_run_service import PayrollRunNotFoundError, ProcessResult

router = APIRouter(prefix="/payroll-runs", tags=["payroll-runs"])


def _process_response(result: ProcessResult) -> ProcessResponse:
    return ProcessResponse(
        run=PayrollRunResponse.model_validate(result.run.to_dict()),
        payslips=[PayslipResponse.model_validate(p.to_dict()) for p in result.payslips],
        total_net=result.total_net,
    )


# ============================================================================
# Draft builder
# ============================================================================


@router.post("/preview", response_model=PreviewResponse)
def preview_draft(service: PayrollRunServiceDep, payload: DraftRunRequest) -> PreviewResponse:
    """Totals for each selected employee. Nothing is stored."""
    preview = service.preview(payload.to_draft())
    return PreviewResponse(
        employees=[
            EmployeeTotalsResponse(
                employee_id=item.employee_id,
                gross_pay=item.totals.gross_pay,
                total_deductions=item.totals.total_deductions,
                net_pay=item.totals.net_pay,
            )
            for item in preview.employees
        ],
        grand_net=preview.grand_net,
        negative_net_employee_ids=preview.negative_net_employee_ids,
    )


@router.post(
    "/process",
    response_model=ProcessResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
def process_draft(service: PayrollRunServiceDep, payload: DraftRunRequest) -> ProcessResponse:
    """Create a Processed run and its payslips from a draft."""
    return _process_response(service.process(payload.to_draft()))


# ============================================================================
# Payroll run CRUD
# ============================================================================


@router.get("", response_model=PayrollRunListResponse)
def list_payroll_runs(
    store: StoreDep,
    status_filter: Annotated[PayrollRunStatus | None, Query(alias="status")] = None,
) -> PayrollRunListResponse:
    runs = store.get_state().payroll_runs
    if status_filter:
        runs = [r for r in runs if r.status == status_filter]
    return PayrollRunListResponse(
        items=[PayrollRunResponse.model_validate(r.to_dict()) for r in runs],
        total=len(runs),
    )


@router.post(
    "",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_payroll_run(store: StoreDep, payload: PayrollRunCreate) -> PayrollRunResponse:
    """Store a run as given. Use /process to validate and generate payslips."""
    run = store.add_payroll_run(**payload.model_dump())
    return PayrollRunResponse.model_validate(run.to_dict())


@router.get(
    "/{run_id}",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_payroll_run(store: StoreDep, run_id: Annotated[str, Path()]) -> PayrollRunResponse:
    run = store.get_state().find_payroll_run(run_id)
    if run is None:
        raise PayrollRunNotFoundError(run_id)
    return PayrollRunResponse.model_validate(run.to_dict())


@router.patch(
    "/{run_id}",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def update_payroll_run(
    store: StoreDep,
    run_id: Annotated[str, Path()],
    payload: PayrollRunUpdate,
) -> PayrollRunResponse:
    """Edit a Draft run. Processed runs are read-only."""
    with store.locked():
        run = store.get_state().find_payroll_run(run_id)
        if run is None:
            raise PayrollRunNotFoundError(run_id)
        if run.status != PayrollRunStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Payroll run {run_id} is {run.status.value} and cannot be edited",
            )
        updated = store.update_payroll_run(run_id, **payload.model_dump(exclude_unset=True))
        if updated is None:
            raise PayrollRunNotFoundError(run_id)

    return PayrollRunResponse.model_validate(updated.to_dict())


@router.delete(
    "/{run_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete_payroll_run(store: StoreDep, run_id: Annotated[str, Path()]) -> Response:
    """Delete a run together with its payslips."""
    if not store.delete_payroll_run(run_id):
        raise PayrollRunNotFoundError(run_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{run_id}/process",
    response_model=ProcessResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def process_payroll_run(
    service: PayrollRunServiceDep,
    run_id: Annotated[str, Path()],
    payload: Annotated[ProcessRunRequest | None, Body()] = None,
) -> ProcessResponse:
    """Move a stored Draft run to Processed and generate its payslips."""
    payload = payload or ProcessRunRequest()
    result = service.process_existing_run(
        run_id, payload.earnings_map(), payload.deductions_map()
    )
    return _process_response(result)
