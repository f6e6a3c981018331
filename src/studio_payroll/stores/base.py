"""Store protocols consumed by the rule manager, the payroll aggregator and
the record service.

Any storage technology can sit behind these; the engine only relies on
read-your-writes consistency within one operation.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from studio_payroll.calculators.types import (
    AttendanceRecord,
    Instructor,
    MonthlyPayrollSummary,
    PayrollRule,
    SalesRecord,
)
from studio_payroll.months import Month


class RuleStore(Protocol):
    """One payroll rule per effective month."""

    async def find_by_month(self, month: Month) -> PayrollRule | None:
        ...

    async def list_all(self) -> list[PayrollRule]:
        """All rules, in no particular order."""
        ...

    async def upsert(self, rule: PayrollRule) -> PayrollRule:
        """Insert or replace the rates of the rule for its month.

        Returns the stored value.
        """
        ...

    async def mark_locked(self, month: Month, timestamp: datetime) -> PayrollRule:
        """Set the lock flag and timestamp for a month's rule."""
        ...


class AttendanceStore(Protocol):
    """Attendance records queryable by instructor and date range."""

    async def find_by_instructor_and_range(
        self, instructor_id: str, start: date, end: date
    ) -> list[AttendanceRecord]:
        """Records with ``start <= date <= end``."""
        ...

    async def add(self, record: AttendanceRecord) -> None:
        ...


class SalesStore(Protocol):
    """Sales records queryable by instructor and date range."""

    async def find_by_instructor_and_range(
        self, instructor_id: str, start: date, end: date
    ) -> list[SalesRecord]:
        """Records with ``start <= date <= end``."""
        ...

    async def add(self, record: SalesRecord) -> None:
        ...


class InstructorDirectory(Protocol):
    """Roster of known instructors."""

    async def list_all(self) -> list[Instructor]:
        ...

    async def find_by_id(self, instructor_id: str) -> Instructor | None:
        ...

    async def add(self, instructor: Instructor) -> None:
        ...


class PayrollSummaryStore(Protocol):
    """Computed monthly summaries, replaceable per month."""

    async def replace_month(
        self, month: Month, summaries: Sequence[MonthlyPayrollSummary]
    ) -> None:
        """Discard every stored summary for the month, then store these."""
        ...

    async def find_by_month(self, month: Month) -> list[MonthlyPayrollSummary]:
        ...

    async def list_months(self) -> list[Month]:
        """Months that have stored summaries."""
        ...
