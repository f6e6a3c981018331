"""Type definitions for rules, raw records and payroll summaries."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from studio_payroll.months import Month

ZERO = Decimal("0")


@dataclass(frozen=True)
class RuleRates:
    """The five monetary fields of a payroll rule."""

    tier_1_to_5: Decimal
    tier_6_to_10: Decimal
    tier_11_to_15: Decimal
    tier_16_plus: Decimal
    sales_bonus_unit: Decimal

    FIELDS = (
        "tier_1_to_5",
        "tier_6_to_10",
        "tier_11_to_15",
        "tier_16_plus",
        "sales_bonus_unit",
    )

    def as_dict(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in self.FIELDS}


DEFAULT_RATES = RuleRates(
    tier_1_to_5=Decimal("500"),
    tier_6_to_10=Decimal("800"),
    tier_11_to_15=Decimal("1200"),
    tier_16_plus=Decimal("1500"),
    sales_bonus_unit=Decimal("20"),
)


@dataclass(frozen=True)
class PayrollRule:
    """Payroll rule version for one effective month."""

    effective_month: Month
    tier_1_to_5: Decimal
    tier_6_to_10: Decimal
    tier_11_to_15: Decimal
    tier_16_plus: Decimal
    sales_bonus_unit: Decimal
    locked: bool = False
    locked_at: datetime | None = None

    @classmethod
    def from_rates(cls, month: Month, rates: RuleRates) -> PayrollRule:
        """Build an unlocked rule for a month."""
        return cls(effective_month=month, **rates.as_dict())

    @property
    def rates(self) -> RuleRates:
        return RuleRates(
            tier_1_to_5=self.tier_1_to_5,
            tier_6_to_10=self.tier_6_to_10,
            tier_11_to_15=self.tier_11_to_15,
            tier_16_plus=self.tier_16_plus,
            sales_bonus_unit=self.sales_bonus_unit,
        )

    def with_rates(self, rates: RuleRates) -> PayrollRule:
        return replace(self, **rates.as_dict())

    def as_locked(self, locked_at: datetime) -> PayrollRule:
        return replace(self, locked=True, locked_at=locked_at)


@dataclass(frozen=True)
class Instructor:
    """Instructor as listed by the directory."""

    id: str
    name: str


@dataclass(frozen=True)
class AttendanceRecord:
    """One taught class."""

    instructor_id: str
    course_id: str
    date: date
    student_count: int


@dataclass(frozen=True)
class SalesRecord:
    """One product sale credited to an instructor."""

    instructor_id: str
    date: date
    product: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class MonthlyPayrollSummary:
    """Payroll totals for one instructor in one month."""

    month: Month
    instructor_id: str
    instructor_name: str
    class_count: int
    student_count: int
    attendance_pay: Decimal
    sales_bonus: Decimal
    total_pay: Decimal

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for comparison (deterministic ordering)."""
        return {
            "month": str(self.month),
            "instructor_id": self.instructor_id,
            "instructor_name": self.instructor_name,
            "class_count": self.class_count,
            "student_count": self.student_count,
            "attendance_pay": str(self.attendance_pay),
            "sales_bonus": str(self.sales_bonus),
            "total_pay": str(self.total_pay),
        }


@dataclass(frozen=True)
class MonthlyPayrollAggregate:
    """Read-only view over the stored summaries of a month."""

    month: Month
    per_instructor: tuple[MonthlyPayrollSummary, ...] = ()
    total_pay: Decimal = ZERO
    total_classes: int = 0
    instructor_count: int = 0

    @property
    def is_calculated(self) -> bool:
        return self.instructor_count > 0
