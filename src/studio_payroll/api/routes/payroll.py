"""Monthly payroll API endpoints."""

from decimal import Decimal

from fastapi import APIRouter, status

from studio_payroll.api.dependencies import AggregatorDep, MonthPath
from studio_payroll.api.schemas import (
    CalculatedMonthsResponse,
    CalculationResponse,
    ErrorResponse,
    InstructorSummaryResponse,
    MonthlyPayrollResponse,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get("/months", response_model=CalculatedMonthsResponse)
async def list_calculated_months(aggregator: AggregatorDep) -> CalculatedMonthsResponse:
    """List months with stored payroll, most recent first."""
    months = await aggregator.calculated_months()
    return CalculatedMonthsResponse(months=[str(m) for m in months])


@router.post(
    "/{month}/calculate",
    response_model=CalculationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def calculate_month(month: MonthPath, aggregator: AggregatorDep) -> CalculationResponse:
    """Calculate and store payroll for a month, replacing earlier results."""
    results = await aggregator.calculate_month(month)
    return CalculationResponse(
        month=str(month),
        calculated=len(results),
        total_pay=sum((r.total_pay for r in results), Decimal("0")),
        results=[InstructorSummaryResponse.from_summary(r) for r in results],
    )


@router.get("/{month}", response_model=MonthlyPayrollResponse)
async def get_month_payroll(month: MonthPath, aggregator: AggregatorDep) -> MonthlyPayrollResponse:
    """Get stored payroll for a month. Does not calculate."""
    aggregate = await aggregator.summary_for_month(month)
    return MonthlyPayrollResponse.from_aggregate(aggregate)
