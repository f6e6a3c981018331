"""Monthly payroll summary model."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from studio_payroll.calculators.types import MonthlyPayrollSummary
from studio_payroll.models.base import Base, MonthKey, TimestampMixin
from studio_payroll.months import Month


class MonthlyPayrollSummaryRow(Base, TimestampMixin):
    """Computed payroll for one instructor in one month.

    Rows carry no foreign key to the roster: a summary outlives the
    instructor until its month is recalculated.
    """

    __tablename__ = "monthly_payroll_summary"

    monthly_payroll_summary_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    month: Mapped[MonthKey]
    instructor_id: Mapped[str] = mapped_column(String, nullable=False)
    instructor_name: Mapped[str] = mapped_column(String, nullable=False)
    class_count: Mapped[int] = mapped_column(Integer, nullable=False)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False)
    attendance_pay: Mapped[Decimal] = mapped_column(nullable=False)
    sales_bonus: Mapped[Decimal] = mapped_column(nullable=False)
    total_pay: Mapped[Decimal] = mapped_column(nullable=False)

    __table_args__ = (
        UniqueConstraint("month", "instructor_id", name="monthly_payroll_summary_unique"),
        CheckConstraint(
            "attendance_pay >= 0 AND sales_bonus >= 0 AND total_pay >= 0",
            name="monthly_payroll_summary_non_negative_check",
        ),
    )

    @classmethod
    def from_domain(cls, summary: MonthlyPayrollSummary) -> MonthlyPayrollSummaryRow:
        return cls(
            month=str(summary.month),
            instructor_id=summary.instructor_id,
            instructor_name=summary.instructor_name,
            class_count=summary.class_count,
            student_count=summary.student_count,
            attendance_pay=summary.attendance_pay,
            sales_bonus=summary.sales_bonus,
            total_pay=summary.total_pay,
        )

    def to_domain(self) -> MonthlyPayrollSummary:
        return MonthlyPayrollSummary(
            month=Month.parse(self.month),
            instructor_id=self.instructor_id,
            instructor_name=self.instructor_name,
            class_count=self.class_count,
            student_count=self.student_count,
            attendance_pay=Decimal(self.attendance_pay),
            sales_bonus=Decimal(self.sales_bonus),
            total_pay=Decimal(self.total_pay),
        )
