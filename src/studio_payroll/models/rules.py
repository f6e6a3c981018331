"""Payroll rule version model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from studio_payroll.calculators.types import PayrollRule
from studio_payroll.models.base import Base, MonthKey, TimestampMixin
from studio_payroll.months import Month


class PayrollRuleRow(Base, TimestampMixin):
    """One rule version per effective month."""

    __tablename__ = "payroll_rule"

    payroll_rule_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    effective_month: Mapped[MonthKey] = mapped_column(unique=True)
    tier_1_to_5: Mapped[Decimal] = mapped_column(nullable=False)
    tier_6_to_10: Mapped[Decimal] = mapped_column(nullable=False)
    tier_11_to_15: Mapped[Decimal] = mapped_column(nullable=False)
    tier_16_plus: Mapped[Decimal] = mapped_column(nullable=False)
    sales_bonus_unit: Mapped[Decimal] = mapped_column(nullable=False)
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "tier_1_to_5 >= 0 AND tier_6_to_10 >= 0 AND tier_11_to_15 >= 0 "
            "AND tier_16_plus >= 0 AND sales_bonus_unit >= 0",
            name="payroll_rule_non_negative_check",
        ),
        CheckConstraint(
            "NOT locked OR locked_at IS NOT NULL",
            name="payroll_rule_locked_at_check",
        ),
    )

    def to_domain(self) -> PayrollRule:
        return PayrollRule(
            effective_month=Month.parse(self.effective_month),
            tier_1_to_5=Decimal(self.tier_1_to_5),
            tier_6_to_10=Decimal(self.tier_6_to_10),
            tier_11_to_15=Decimal(self.tier_11_to_15),
            tier_16_plus=Decimal(self.tier_16_plus),
            sales_bonus_unit=Decimal(self.sales_bonus_unit),
            locked=bool(self.locked),
            locked_at=self.locked_at,
        )
