"""SQLAlchemy ORM models."""

from studio_payroll.models.base import Base, TimestampMixin
from studio_payroll.models.records import AttendanceRow, InstructorRow, SaleRow
from studio_payroll.models.rules import PayrollRuleRow
from studio_payroll.models.summary import MonthlyPayrollSummaryRow

__all__ = [
    "Base",
    "TimestampMixin",
    "AttendanceRow",
    "InstructorRow",
    "SaleRow",
    "PayrollRuleRow",
    "MonthlyPayrollSummaryRow",
]
