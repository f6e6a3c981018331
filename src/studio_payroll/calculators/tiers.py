"""Attendance tier resolution by class headcount."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from studio_payroll.calculators.types import ZERO, PayrollRule


class AttendanceTier(str, Enum):
    """Headcount bands, each priced by one rule field."""

    TIER_1_TO_5 = "tier_1_to_5"
    TIER_6_TO_10 = "tier_6_to_10"
    TIER_11_TO_15 = "tier_11_to_15"
    TIER_16_PLUS = "tier_16_plus"


# Closed, ascending, non-overlapping: (lowest headcount, highest or None, tier)
TIER_BANDS: tuple[tuple[int, int | None, AttendanceTier], ...] = (
    (1, 5, AttendanceTier.TIER_1_TO_5),
    (6, 10, AttendanceTier.TIER_6_TO_10),
    (11, 15, AttendanceTier.TIER_11_TO_15),
    (16, None, AttendanceTier.TIER_16_PLUS),
)


def resolve_tier(student_count: int) -> AttendanceTier | None:
    """Return the band a headcount falls in.

    Headcounts of zero or below fall in no band.
    """
    for low, high, tier in TIER_BANDS:
        if student_count >= low and (high is None or student_count <= high):
            return tier
    return None


def attendance_pay_for(student_count: int, rule: PayrollRule) -> Decimal:
    """Pay for one class under a rule; zero for an empty class."""
    tier = resolve_tier(student_count)
    if tier is None:
        return ZERO
    return getattr(rule, tier.value)
