"""Employee API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from payroll_admin.api.dependencies import StoreDep
from payroll_admin.api.schemas import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
)
from payroll_admin.models.employee import EmployeeStatus
from payroll_admin.services.csv_export import export_employees_csv, export_filename

router = APIRouter(prefix="/employees", tags=["employees"])


def _not_found(employee_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Employee {employee_id} not found",
    )


@router.get("", response_model=EmployeeListResponse)
def list_employees(
    store: StoreDep,
    status_filter: Annotated[EmployeeStatus | None, Query(alias="status")] = None,
    department: str | None = None,
    search: str | None = None,
) -> EmployeeListResponse:
    """List employees, optionally filtered by status, department or name/email."""
    employees = store.get_state().employees
    if status_filter:
        employees = [e for e in employees if e.status == status_filter]
    if department:
        employees = [e for e in employees if e.department == department]
    if search:
        needle = search.lower()
        employees = [
            e for e in employees
            if needle in e.full_name.lower() or needle in e.email.lower()
        ]

    return EmployeeListResponse(
        items=[EmployeeResponse.model_validate(e.to_dict()) for e in employees],
        total=len(employees),
    )


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_employee(store: StoreDep, payload: EmployeeCreate) -> EmployeeResponse:
    employee = store.add_employee(**payload.model_dump())
    return EmployeeResponse.model_validate(employee.to_dict())


@router.get("/export")
def export_employees(store: StoreDep) -> Response:
    """Download all employees as CSV."""
    content = export_employees_csv(store.get_state().employees)
    filename = export_filename("employees")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_employee(store: StoreDep, employee_id: Annotated[str, Path()]) -> EmployeeResponse:
    employee = store.get_state().find_employee(employee_id)
    if employee is None:
        raise _not_found(employee_id)
    return EmployeeResponse.model_validate(employee.to_dict())


@router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
def update_employee(
    store: StoreDep,
    employee_id: Annotated[str, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    employee = store.update_employee(employee_id, **payload.model_dump(exclude_unset=True))
    if employee is None:
        raise _not_found(employee_id)
    return EmployeeResponse.model_validate(employee.to_dict())


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete_employee(store: StoreDep, employee_id: Annotated[str, Path()]) -> Response:
    """Delete an employee. Existing runs and payslips keep their references."""
    if not store.delete_employee(employee_id):
        raise _not_found(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
