"""Roster and record intake endpoints."""

from fastapi import APIRouter, status

from studio_payroll.api.dependencies import RecordServiceDep
from studio_payroll.api.schemas import (
    AttendanceCreate,
    AttendanceResponse,
    ErrorResponse,
    InstructorCreate,
    InstructorListResponse,
    InstructorResponse,
    SaleCreate,
    SaleResponse,
)

router = APIRouter(tags=["records"])


@router.get("/instructors", response_model=InstructorListResponse)
async def list_instructors(records: RecordServiceDep) -> InstructorListResponse:
    """List the instructor roster."""
    instructors = await records.list_instructors()
    return InstructorListResponse(
        instructors=[InstructorResponse.from_instructor(i) for i in instructors]
    )


@router.post(
    "/instructors",
    response_model=InstructorResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def add_instructor(payload: InstructorCreate, records: RecordServiceDep) -> InstructorResponse:
    """Add an instructor to the roster."""
    instructor = await records.add_instructor(payload.to_domain())
    return InstructorResponse.from_instructor(instructor)


@router.post(
    "/attendance",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_attendance(
    payload: AttendanceCreate, records: RecordServiceDep
) -> AttendanceResponse:
    """Record one taught class and its headcount."""
    record = await records.record_attendance(payload.to_domain())
    return AttendanceResponse.from_record(record)


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_sale(payload: SaleCreate, records: RecordServiceDep) -> SaleResponse:
    """Record one product sale credited to an instructor."""
    record = await records.record_sale(payload.to_domain())
    return SaleResponse.from_record(record)
