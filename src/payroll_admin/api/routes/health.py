"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from payroll_admin.api.dependencies import StoreDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
def health_check(store: StoreDep) -> HealthResponse:
    """Check API and state database health."""
    repository = store.repository
    if repository is None:
        db_status = "disabled"
    else:
        db_status = "unhealthy"
        try:
            repository.ping()
            db_status = "healthy"
        except SQLAlchemyError:
            logger.exception("State database health check failed")

    return HealthResponse(
        status="degraded" if db_status == "unhealthy" else "healthy",
        timestamp=datetime.now(timezone.utc),
        database=db_status,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    """Readiness check for container orchestration."""
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
