"""Payroll calculation."""

from studio_payroll.calculators.engine import PayrollAggregator
from studio_payroll.calculators.sales_bonus import package_size, sale_bonus, unit_bonus
from studio_payroll.calculators.tiers import AttendanceTier, attendance_pay_for, resolve_tier

__all__ = [
    "PayrollAggregator",
    "AttendanceTier",
    "attendance_pay_for",
    "resolve_tier",
    "package_size",
    "sale_bonus",
    "unit_bonus",
]
