"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from payroll_admin.calculators.engine import PayrollEngine
from payroll_admin.services.payroll_run_service import PayrollRunService
from payroll_admin.services.store import Store


def get_store(request: Request) -> Store:
    """The store the application was created with."""
    return request.app.state.store


def get_engine(request: Request) -> PayrollEngine:
    return request.app.state.engine


def get_payroll_run_service(
    store: Annotated[Store, Depends(get_store)],
    engine: Annotated[PayrollEngine, Depends(get_engine)],
) -> PayrollRunService:
    return PayrollRunService(store, engine)


# Type aliases for cleaner dependency injection
StoreDep = Annotated[Store, Depends(get_store)]
EngineDep = Annotated[PayrollEngine, Depends(get_engine)]
PayrollRunServiceDep = Annotated[PayrollRunService, Depends(get_payroll_run_service)]
