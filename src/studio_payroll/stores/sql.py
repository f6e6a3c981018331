"""SQLAlchemy-backed stores.

All stores share one ``AsyncSession``; the caller owns the transaction (the
API request dependency and the CLI commit on success). Rule writes are read
back so callers see the stored values. Any ``SQLAlchemyError`` is surfaced as
``StoreFailureError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studio_payroll.calculators.types import (
    AttendanceRecord,
    Instructor,
    MonthlyPayrollSummary,
    PayrollRule,
    SalesRecord,
)
from studio_payroll.errors import RuleNotFoundError, StoreFailureError
from studio_payroll.models import (
    AttendanceRow,
    InstructorRow,
    MonthlyPayrollSummaryRow,
    PayrollRuleRow,
    SaleRow,
)
from studio_payroll.months import Month


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise StoreFailureError(operation, e) from e


class SqlRuleStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_row(self, month: Month) -> PayrollRuleRow | None:
        result = await self.session.execute(
            select(PayrollRuleRow).where(PayrollRuleRow.effective_month == str(month))
        )
        return result.scalar_one_or_none()

    async def find_by_month(self, month: Month) -> PayrollRule | None:
        with _store_errors("rules.find_by_month"):
            row = await self._get_row(month)
        return row.to_domain() if row is not None else None

    async def list_all(self) -> list[PayrollRule]:
        with _store_errors("rules.list_all"):
            result = await self.session.execute(select(PayrollRuleRow))
            rows = result.scalars().all()
        return [row.to_domain() for row in rows]

    async def upsert(self, rule: PayrollRule) -> PayrollRule:
        with _store_errors("rules.upsert"):
            row = await self._get_row(rule.effective_month)
            if row is None:
                row = PayrollRuleRow(
                    effective_month=str(rule.effective_month),
                    locked=False,
                    locked_at=None,
                )
                self.session.add(row)
            # Lock flag and timestamp are only written by mark_locked
            for name, value in rule.rates.as_dict().items():
                setattr(row, name, value)
            await self.session.flush()
            # Read back what the database kept
            await self.session.refresh(row)
        return row.to_domain()

    async def mark_locked(self, month: Month, timestamp: datetime) -> PayrollRule:
        with _store_errors("rules.mark_locked"):
            row = await self._get_row(month)
            if row is None:
                raise RuleNotFoundError(month)
            row.locked = True
            row.locked_at = timestamp
            await self.session.flush()
            await self.session.refresh(row)
        return row.to_domain()


class SqlInstructorDirectory:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[Instructor]:
        with _store_errors("instructors.list_all"):
            result = await self.session.execute(
                select(InstructorRow).order_by(InstructorRow.instructor_id)
            )
            rows = result.scalars().all()
        return [row.to_domain() for row in rows]

    async def find_by_id(self, instructor_id: str) -> Instructor | None:
        with _store_errors("instructors.find_by_id"):
            row = await self.session.get(InstructorRow, instructor_id)
        return row.to_domain() if row is not None else None

    async def add(self, instructor: Instructor) -> None:
        with _store_errors("instructors.add"):
            self.session.add(InstructorRow(instructor_id=instructor.id, name=instructor.name))
            await self.session.flush()


class SqlAttendanceStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_instructor_and_range(
        self, instructor_id: str, start: date, end: date
    ) -> list[AttendanceRecord]:
        with _store_errors("attendance.find_by_instructor_and_range"):
            result = await self.session.execute(
                select(AttendanceRow)
                .where(
                    AttendanceRow.instructor_id == instructor_id,
                    AttendanceRow.class_date >= start,
                    AttendanceRow.class_date <= end,
                )
                .order_by(AttendanceRow.class_date, AttendanceRow.attendance_record_id)
            )
            rows = result.scalars().all()
        return [row.to_domain() for row in rows]

    async def add(self, record: AttendanceRecord) -> None:
        with _store_errors("attendance.add"):
            self.session.add(
                AttendanceRow(
                    instructor_id=record.instructor_id,
                    course_id=record.course_id,
                    class_date=record.date,
                    student_count=record.student_count,
                )
            )
            await self.session.flush()


class SqlSalesStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_instructor_and_range(
        self, instructor_id: str, start: date, end: date
    ) -> list[SalesRecord]:
        with _store_errors("sales.find_by_instructor_and_range"):
            result = await self.session.execute(
                select(SaleRow)
                .where(
                    SaleRow.instructor_id == instructor_id,
                    SaleRow.sale_date >= start,
                    SaleRow.sale_date <= end,
                )
                .order_by(SaleRow.sale_date, SaleRow.sales_record_id)
            )
            rows = result.scalars().all()
        return [row.to_domain() for row in rows]

    async def add(self, record: SalesRecord) -> None:
        with _store_errors("sales.add"):
            self.session.add(
                SaleRow(
                    instructor_id=record.instructor_id,
                    sale_date=record.date,
                    product=record.product,
                    quantity=record.quantity,
                    unit_price=record.unit_price,
                )
            )
            await self.session.flush()


class SqlPayrollSummaryStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace_month(
        self, month: Month, summaries: Sequence[MonthlyPayrollSummary]
    ) -> None:
        with _store_errors("summaries.replace_month"):
            await self.session.execute(
                delete(MonthlyPayrollSummaryRow).where(
                    MonthlyPayrollSummaryRow.month == str(month)
                )
            )
            self.session.add_all(
                [MonthlyPayrollSummaryRow.from_domain(s) for s in summaries]
            )
            await self.session.flush()

    async def find_by_month(self, month: Month) -> list[MonthlyPayrollSummary]:
        with _store_errors("summaries.find_by_month"):
            result = await self.session.execute(
                select(MonthlyPayrollSummaryRow)
                .where(MonthlyPayrollSummaryRow.month == str(month))
                .order_by(MonthlyPayrollSummaryRow.monthly_payroll_summary_id)
            )
            rows = result.scalars().all()
        return [row.to_domain() for row in rows]

    async def list_months(self) -> list[Month]:
        with _store_errors("summaries.list_months"):
            result = await self.session.execute(
                select(MonthlyPayrollSummaryRow.month).distinct()
            )
            months = result.scalars().all()
        return [Month.parse(m) for m in months]
