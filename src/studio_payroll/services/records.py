"""Roster and raw record intake.

Attendance and sales are only accepted for instructors on the roster, so a
later calculation never meets a record it cannot attribute.
"""

from __future__ import annotations

import logging

from studio_payroll.calculators.types import AttendanceRecord, Instructor, SalesRecord
from studio_payroll.errors import (
    DuplicateInstructorError,
    InstructorNotFoundError,
    InvalidRecordError,
)
from studio_payroll.services.rule_manager import CENT
from studio_payroll.stores.base import AttendanceStore, InstructorDirectory, SalesStore

logger = logging.getLogger(__name__)


class RecordService:
    """Adds instructors, classes and sales for the aggregator to price."""

    def __init__(
        self,
        instructors: InstructorDirectory,
        attendance: AttendanceStore,
        sales: SalesStore,
    ):
        self.instructors = instructors
        self.attendance = attendance
        self.sales = sales

    async def list_instructors(self) -> list[Instructor]:
        return await self.instructors.list_all()

    async def add_instructor(self, instructor: Instructor) -> Instructor:
        """Put an instructor on the roster.

        Raises:
            InvalidRecordError: Blank id or name.
            DuplicateInstructorError: The id is already taken.
        """
        if not instructor.id.strip():
            raise InvalidRecordError("id", instructor.id, "must not be blank")
        if not instructor.name.strip():
            raise InvalidRecordError("name", instructor.name, "must not be blank")
        if await self.instructors.find_by_id(instructor.id) is not None:
            raise DuplicateInstructorError(instructor.id)

        await self.instructors.add(instructor)
        logger.info("Added instructor %s (%s)", instructor.id, instructor.name)
        return instructor

    async def record_attendance(self, record: AttendanceRecord) -> AttendanceRecord:
        """Store one taught class. An empty class (0 students) is allowed.

        Raises:
            InvalidRecordError: Negative headcount.
            InstructorNotFoundError: Instructor not on the roster.
        """
        if record.student_count < 0:
            raise InvalidRecordError("student_count", record.student_count, "must be >= 0")
        await self._require_instructor(record.instructor_id)

        await self.attendance.add(record)
        logger.info(
            "Recorded class for %s on %s: %d students",
            record.instructor_id,
            record.date,
            record.student_count,
        )
        return record

    async def record_sale(self, record: SalesRecord) -> SalesRecord:
        """Store one product sale.

        Raises:
            InvalidRecordError: Blank product, quantity below 1, or a price
                that is negative or not in whole cents.
            InstructorNotFoundError: Instructor not on the roster.
        """
        if not record.product.strip():
            raise InvalidRecordError("product", record.product, "must not be blank")
        if record.quantity < 1:
            raise InvalidRecordError("quantity", record.quantity, "must be >= 1")
        price = record.unit_price
        if not price.is_finite() or price < 0 or price != price.quantize(CENT):
            raise InvalidRecordError("unit_price", price, "must be >= 0 in whole cents")
        await self._require_instructor(record.instructor_id)

        await self.sales.add(record)
        logger.info(
            "Recorded sale for %s on %s: %d x %s",
            record.instructor_id,
            record.date,
            record.quantity,
            record.product,
        )
        return record

    async def _require_instructor(self, instructor_id: str) -> None:
        if await self.instructors.find_by_id(instructor_id) is None:
            raise InstructorNotFoundError(instructor_id)
