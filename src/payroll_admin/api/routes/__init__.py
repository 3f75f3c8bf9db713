"""API routes."""

from payroll_admin.api.routes.dashboard import router as dashboard_router
from payroll_admin.api.routes.employees import router as employees_router
from payroll_admin.api.routes.health import router as health_router
from payroll_admin.api.routes.payroll_runs import router as payroll_runs_router
from payroll_admin.api.routes.payslips import router as payslips_router
from payroll_admin.api.routes.settings import router as settings_router

__all__ = [
    "dashboard_router",
    "employees_router",
    "health_router",
    "payroll_runs_router",
    "payslips_router",
    "settings_router",
]
