"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from studio_payroll.api.routes import (
    health_router,
    payroll_router,
    records_router,
    rules_router,
)
from studio_payroll.database import create_schema, dispose_db
from studio_payroll.errors import (
    DuplicateInstructorError,
    InstructorNotFoundError,
    InvalidRateError,
    InvalidRecordError,
    NoInstructorsError,
    PayrollError,
    RuleLockedError,
    RuleNotFoundError,
    StoreFailureError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[PayrollError], int] = {
    RuleNotFoundError: status.HTTP_404_NOT_FOUND,
    RuleLockedError: status.HTTP_409_CONFLICT,
    InvalidRateError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoInstructorsError: status.HTTP_409_CONFLICT,
    StoreFailureError: status.HTTP_503_SERVICE_UNAVAILABLE,
    InstructorNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateInstructorError: status.HTTP_409_CONFLICT,
    InvalidRecordError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    await create_schema()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Studio Payroll API",
        description="Instructor payroll rules and monthly aggregation",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(PayrollError)
    async def payroll_error_handler(request: Request, exc: PayrollError) -> JSONResponse:
        """Map engine errors to HTTP statuses."""
        status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, StoreFailureError):
            logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "code": exc.code},
        )

    app.include_router(health_router)
    app.include_router(rules_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(records_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
