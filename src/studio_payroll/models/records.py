"""Instructor, attendance and sales models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_payroll.calculators.types import AttendanceRecord, Instructor, SalesRecord
from studio_payroll.models.base import Base, TimestampMixin


class InstructorRow(Base, TimestampMixin):
    """Instructor on the studio roster."""

    __tablename__ = "instructor"

    instructor_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    def to_domain(self) -> Instructor:
        return Instructor(id=self.instructor_id, name=self.name)


class AttendanceRow(Base, TimestampMixin):
    """One taught class and its headcount."""

    __tablename__ = "attendance_record"

    attendance_record_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instructor_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("instructor.instructor_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id: Mapped[str] = mapped_column(String, nullable=False)
    class_date: Mapped[date] = mapped_column(Date, nullable=False)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("attendance_instructor_date_idx", "instructor_id", "class_date"),
    )

    def to_domain(self) -> AttendanceRecord:
        return AttendanceRecord(
            instructor_id=self.instructor_id,
            course_id=self.course_id,
            date=self.class_date,
            student_count=self.student_count,
        )


class SaleRow(Base, TimestampMixin):
    """One product sale credited to an instructor."""

    __tablename__ = "sales_record"

    sales_record_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instructor_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("instructor.instructor_id", ondelete="CASCADE"),
        nullable=False,
    )
    sale_date: Mapped[date] = mapped_column(Date, nullable=False)
    product: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="sales_record_quantity_check"),
        CheckConstraint("unit_price >= 0", name="sales_record_unit_price_check"),
        Index("sales_instructor_date_idx", "instructor_id", "sale_date"),
    )

    def to_domain(self) -> SalesRecord:
        return SalesRecord(
            instructor_id=self.instructor_id,
            date=self.sale_date,
            product=self.product,
            quantity=self.quantity,
            unit_price=Decimal(self.unit_price),
        )
