"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from studio_payroll.calculators.engine import PayrollAggregator
from studio_payroll.config import get_settings
from studio_payroll.database import init_db
from studio_payroll.months import MONTH_PATTERN, Clock, Month
from studio_payroll.services.records import RecordService
from studio_payroll.services.rule_manager import RuleManager
from studio_payroll.stores.base import (
    AttendanceStore,
    InstructorDirectory,
    PayrollSummaryStore,
    RuleStore,
    SalesStore,
)
from studio_payroll.stores.sql import (
    SqlAttendanceStore,
    SqlInstructorDirectory,
    SqlPayrollSummaryStore,
    SqlRuleStore,
    SqlSalesStore,
)


@dataclass(frozen=True)
class Stores:
    """Store implementations used for one request."""

    rules: RuleStore
    instructors: InstructorDirectory
    attendance: AttendanceStore
    sales: SalesStore
    summaries: PayrollSummaryStore


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency, committed when the request succeeds."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_stores(db: DbSession) -> Stores:
    return Stores(
        rules=SqlRuleStore(db),
        instructors=SqlInstructorDirectory(db),
        attendance=SqlAttendanceStore(db),
        sales=SqlSalesStore(db),
        summaries=SqlPayrollSummaryStore(db),
    )


def get_clock() -> Clock:
    return get_settings().clock()


def get_rule_manager(
    stores: Annotated[Stores, Depends(get_stores)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> RuleManager:
    return RuleManager(stores.rules, clock=clock)


def get_aggregator(
    stores: Annotated[Stores, Depends(get_stores)],
    rule_manager: Annotated[RuleManager, Depends(get_rule_manager)],
) -> PayrollAggregator:
    return PayrollAggregator(
        rule_manager,
        stores.instructors,
        stores.attendance,
        stores.sales,
        stores.summaries,
    )


def get_record_service(stores: Annotated[Stores, Depends(get_stores)]) -> RecordService:
    return RecordService(stores.instructors, stores.attendance, stores.sales)


def get_month(month: Annotated[str, Path(pattern=MONTH_PATTERN)]) -> Month:
    """Parse the ``{month}`` path parameter."""
    try:
        return Month.parse(month)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


# Type aliases for cleaner dependency injection
RuleManagerDep = Annotated[RuleManager, Depends(get_rule_manager)]
AggregatorDep = Annotated[PayrollAggregator, Depends(get_aggregator)]
RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]
MonthPath = Annotated[Month, Depends(get_month)]
