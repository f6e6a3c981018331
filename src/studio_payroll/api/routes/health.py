"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from studio_payroll.api.dependencies import DbSession, get_clock
from studio_payroll.models import PayrollRuleRow
from studio_payroll.months import Clock, Month

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response.

    ``current_month`` is the month the studio clock allows editing.
    """

    status: str
    timestamp: datetime
    database: str
    current_month: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(
    db: DbSession, clock: Annotated[Clock, Depends(get_clock)]
) -> HealthResponse:
    """Check API and database health."""
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        db_status = "unhealthy"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=db_status,
        current_month=str(Month.of(clock().date())),
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(db: DbSession) -> JSONResponse:
    """Ready once the payroll tables exist."""
    try:
        rules = await db.scalar(select(func.count()).select_from(PayrollRuleRow))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready"},
        )
    return JSONResponse(content={"status": "ready", "rules": rules})


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
