"""In-memory stores for local development and testing.

Replace with the SQL stores (or another adapter) for production.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from studio_payroll.calculators.types import (
    AttendanceRecord,
    Instructor,
    MonthlyPayrollSummary,
    PayrollRule,
    SalesRecord,
)
from studio_payroll.errors import RuleNotFoundError
from studio_payroll.months import Month


class InMemoryRuleStore:
    """Rules keyed by month. Values are frozen, so reads are snapshots."""

    def __init__(self, rules: Sequence[PayrollRule] = ()):
        self._rules: dict[Month, PayrollRule] = {r.effective_month: r for r in rules}

    async def find_by_month(self, month: Month) -> PayrollRule | None:
        return self._rules.get(month)

    async def list_all(self) -> list[PayrollRule]:
        return list(self._rules.values())

    async def upsert(self, rule: PayrollRule) -> PayrollRule:
        existing = self._rules.get(rule.effective_month)
        if existing is not None:
            # Lock bookkeeping is owned by mark_locked
            rule = existing.with_rates(rule.rates)
        self._rules[rule.effective_month] = rule
        return rule

    async def mark_locked(self, month: Month, timestamp: datetime) -> PayrollRule:
        existing = self._rules.get(month)
        if existing is None:
            raise RuleNotFoundError(month)
        locked = existing.as_locked(timestamp)
        self._rules[month] = locked
        return locked


class InMemoryInstructorDirectory:
    def __init__(self, instructors: Sequence[Instructor] = ()):
        self._instructors: list[Instructor] = list(instructors)

    async def list_all(self) -> list[Instructor]:
        return list(self._instructors)

    async def find_by_id(self, instructor_id: str) -> Instructor | None:
        return next((i for i in self._instructors if i.id == instructor_id), None)

    async def add(self, instructor: Instructor) -> None:
        self._instructors.append(instructor)

    def remove(self, instructor_id: str) -> None:
        self._instructors = [i for i in self._instructors if i.id != instructor_id]


class InMemoryAttendanceStore:
    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self._records: list[AttendanceRecord] = list(records)

    async def add(self, record: AttendanceRecord) -> None:
        self._records.append(record)

    async def find_by_instructor_and_range(
        self, instructor_id: str, start: date, end: date
    ) -> list[AttendanceRecord]:
        return [
            r
            for r in self._records
            if r.instructor_id == instructor_id and start <= r.date <= end
        ]


class InMemorySalesStore:
    def __init__(self, records: Sequence[SalesRecord] = ()):
        self._records: list[SalesRecord] = list(records)

    async def add(self, record: SalesRecord) -> None:
        self._records.append(record)

    async def find_by_instructor_and_range(
        self, instructor_id: str, start: date, end: date
    ) -> list[SalesRecord]:
        return [
            r
            for r in self._records
            if r.instructor_id == instructor_id and start <= r.date <= end
        ]


class InMemoryPayrollSummaryStore:
    def __init__(self) -> None:
        self._by_month: dict[Month, list[MonthlyPayrollSummary]] = {}

    async def replace_month(
        self, month: Month, summaries: Sequence[MonthlyPayrollSummary]
    ) -> None:
        self._by_month.pop(month, None)
        if summaries:
            self._by_month[month] = list(summaries)

    async def find_by_month(self, month: Month) -> list[MonthlyPayrollSummary]:
        return list(self._by_month.get(month, []))

    async def list_months(self) -> list[Month]:
        return list(self._by_month)
