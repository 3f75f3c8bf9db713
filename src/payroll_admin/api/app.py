"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_admin import __version__
from payroll_admin.api.routes import (
    dashboard_router,
    employees_router,
    health_router,
    payroll_runs_router,
    payslips_router,
    settings_router,
)
from payroll_admin.calculators.engine import PayrollEngine
from payroll_admin.config import Settings, get_settings
from payroll_admin.services.payroll_run_service import (
    DraftValidationError,
    PayrollRunNotFoundError,
)
from payroll_admin.services.state_machine import InvalidTransitionError
from payroll_admin.services.store import Store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: a store passed to create_app() wins
    if getattr(app.state, "store", None) is None:
        app.state.store = Store.from_settings(app.state.settings)
        logger.info("Loaded state %s", app.state.store.state_key)
    yield


def create_app(store: Store | None = None, settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Payroll Admin API",
        description="Employees, payroll runs and payslips",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.engine = PayrollEngine.from_settings(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollRunNotFoundError)
    async def run_not_found_handler(
        request: Request, exc: PayrollRunNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "NOT_FOUND"},
        )

    @app.exception_handler(DraftValidationError)
    async def draft_validation_handler(
        request: Request, exc: DraftValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "code": "DRAFT_INVALID", "errors": exc.errors},
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "code": "INVALID_TRANSITION"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(payroll_runs_router, prefix="/api/v1")
    app.include_router(payslips_router, prefix="/api/v1")
    app.include_router(dashboard_router, prefix="/api/v1")
    app.include_router(settings_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
