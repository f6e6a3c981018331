"""Tests for roster and record intake."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from studio_payroll.calculators.types import Instructor
from studio_payroll.errors import (
    DuplicateInstructorError,
    InstructorNotFoundError,
    InvalidRecordError,
)
from studio_payroll.months import Month
from tests.factories import FEB_2026, attend, sell

pytestmark = pytest.mark.asyncio


class TestInstructors:
    """Test roster changes."""

    async def test_add_instructor(self, record_service, instructors):
        added = await record_service.add_instructor(Instructor("coach-c", "Cleo"))

        assert added == Instructor("coach-c", "Cleo")
        assert await instructors.find_by_id("coach-c") == added
        roster = await record_service.list_instructors()
        assert [i.id for i in roster] == ["coach-a", "coach-b", "coach-c"]

    async def test_duplicate_id_rejected(self, record_service):
        with pytest.raises(DuplicateInstructorError) as exc_info:
            await record_service.add_instructor(Instructor("coach-a", "Another Amy"))
        assert exc_info.value.code == "DUPLICATE_INSTRUCTOR"

    @pytest.mark.parametrize("instructor", [Instructor(" ", "Cleo"), Instructor("coach-c", "")])
    async def test_blank_fields_rejected(self, record_service, instructor):
        with pytest.raises(InvalidRecordError):
            await record_service.add_instructor(instructor)


class TestAttendance:
    """Test class intake."""

    async def test_record_attendance(self, record_service, attendance):
        record = attend("coach-a", date(2026, 2, 3), 12)
        assert await record_service.record_attendance(record) == record

        stored = await attendance.find_by_instructor_and_range(
            "coach-a", FEB_2026.first_day, FEB_2026.last_day
        )
        assert stored == [record]

    async def test_empty_class_accepted(self, record_service):
        record = attend("coach-a", date(2026, 2, 3), 0)
        assert await record_service.record_attendance(record) == record

    async def test_negative_headcount_rejected(self, record_service, attendance):
        with pytest.raises(InvalidRecordError) as exc_info:
            await record_service.record_attendance(attend("coach-a", date(2026, 2, 3), -1))
        assert exc_info.value.field == "student_count"

        assert await attendance.find_by_instructor_and_range(
            "coach-a", date(2026, 1, 1), date(2026, 12, 31)
        ) == []

    async def test_unknown_instructor_rejected(self, record_service):
        with pytest.raises(InstructorNotFoundError) as exc_info:
            await record_service.record_attendance(attend("coach-z", date(2026, 2, 3), 5))
        assert exc_info.value.code == "INSTRUCTOR_NOT_FOUND"


class TestSales:
    """Test sale intake."""

    async def test_record_sale(self, record_service, sales):
        record = sell("coach-b", date(2026, 2, 5), "five-session package", quantity=2)
        assert await record_service.record_sale(record) == record

        march = Month(2026, 3)
        assert await sales.find_by_instructor_and_range(
            "coach-b", march.first_day, march.last_day
        ) == []
        assert await sales.find_by_instructor_and_range(
            "coach-b", FEB_2026.first_day, FEB_2026.last_day
        ) == [record]

    async def test_free_item_accepted(self, record_service):
        record = replace(sell("coach-a", date(2026, 2, 5), "trial class"), unit_price=Decimal("0"))
        assert await record_service.record_sale(record) == record

    @pytest.mark.parametrize(
        "changes",
        [
            {"quantity": 0},
            {"product": "  "},
            {"unit_price": Decimal("-1")},
            {"unit_price": Decimal("19.999")},
            {"unit_price": Decimal("NaN")},
        ],
    )
    async def test_invalid_sale_rejected(self, record_service, sales, changes):
        record = replace(sell("coach-a", date(2026, 2, 5), "ten-session package"), **changes)
        with pytest.raises(InvalidRecordError):
            await record_service.record_sale(record)

        assert await sales.find_by_instructor_and_range(
            "coach-a", FEB_2026.first_day, FEB_2026.last_day
        ) == []

    async def test_unknown_instructor_rejected(self, record_service):
        with pytest.raises(InstructorNotFoundError):
            await record_service.record_sale(sell("coach-z", date(2026, 2, 5), "extra"))


class TestIntakeFeedsPayroll:
    """Records taken in are the ones the aggregator prices."""

    async def test_new_instructor_paid(self, record_service, aggregator):
        await record_service.add_instructor(Instructor("coach-c", "Cleo"))
        await record_service.record_attendance(attend("coach-c", date(2026, 2, 14), 20))
        await record_service.record_sale(sell("coach-c", date(2026, 2, 14), "ten-session package"))

        results = await aggregator.calculate_month(FEB_2026)
        cleo = next(r for r in results if r.instructor_id == "coach-c")
        assert cleo.attendance_pay == Decimal("1500")
        assert cleo.sales_bonus == Decimal("200")
