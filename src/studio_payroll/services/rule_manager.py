"""Payroll rule lifecycle: edit window, copy-forward defaults and locking."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from studio_payroll.calculators.types import DEFAULT_RATES, PayrollRule, RuleRates
from studio_payroll.errors import InvalidRateError, RuleLockedError, RuleNotFoundError
from studio_payroll.months import Clock, Month
from studio_payroll.stores.base import RuleStore

logger = logging.getLogger(__name__)

# Money columns are NUMERIC(12, 2)
CENT = Decimal("0.01")
MAX_RATE = Decimal("9999999999.99")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def coerce_rate(field: str, value: Any) -> Decimal:
    """Convert a monetary rule value to a finite, non-negative Decimal in whole cents."""
    if isinstance(value, bool) or value is None:
        raise InvalidRateError(field, value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidRateError(field, value) from None
    if not amount.is_finite() or not 0 <= amount <= MAX_RATE:
        raise InvalidRateError(field, value)
    if amount != amount.quantize(CENT):
        raise InvalidRateError(field, value)
    return amount


def coerce_rates(rates: RuleRates | Mapping[str, Any]) -> RuleRates:
    """Validate all five monetary fields of a rule."""
    if isinstance(rates, RuleRates):
        values = rates.as_dict()
    else:
        values = {name: rates.get(name) for name in RuleRates.FIELDS}
    return RuleRates(**{name: coerce_rate(name, values[name]) for name in RuleRates.FIELDS})


class RuleManager:
    """Owns the monthly rule history and its edit-lock contract.

    Only the current calendar month is ever editable, and only while its
    rule is unlocked. Past and future months are read-only regardless of
    lock state. The current month comes from the injected clock.
    """

    def __init__(
        self,
        rules: RuleStore,
        clock: Clock | None = None,
        default_rates: RuleRates = DEFAULT_RATES,
    ):
        self.rules = rules
        self.clock = clock or _utc_now
        self.default_rates = default_rates

    def current_month(self) -> Month:
        return Month.of(self.clock().date())

    async def resolve_effective_rule(self, month: Month) -> PayrollRule:
        """Return the rule for a month, creating the current month's on first access.

        A new current-month rule copies the rates of the most recent earlier
        rule, or the default table when there is none.

        Raises:
            RuleNotFoundError: No rule exists and the month is not current.
        """
        existing = await self.rules.find_by_month(month)
        if existing is not None:
            return existing

        if month != self.current_month():
            raise RuleNotFoundError(month)

        prior = [r for r in await self.rules.list_all() if r.effective_month < month]
        if prior:
            source = max(prior, key=lambda r: r.effective_month)
            rates = source.rates
            logger.info("Creating rule for %s from %s", month, source.effective_month)
        else:
            rates = self.default_rates
            logger.info("Creating rule for %s from default rates", month)

        return await self.rules.upsert(PayrollRule.from_rates(month, rates))

    async def is_editable(self, month: Month) -> bool:
        if month != self.current_month():
            return False
        rule = await self.rules.find_by_month(month)
        return rule is None or not rule.locked

    async def update_rule(
        self, month: Month, rates: RuleRates | Mapping[str, Any]
    ) -> PayrollRule:
        """Replace the rates of an editable month's rule.

        Raises:
            RuleLockedError: The month is outside the edit window or locked.
            InvalidRateError: A rate is negative, not finite, or finer than a cent.
        """
        if not await self.is_editable(month):
            current = self.current_month()
            if month == current:
                raise RuleLockedError(month, "rule is locked")
            raise RuleLockedError(month, f"only {current} can be edited")

        validated = coerce_rates(rates)
        stored = await self.rules.upsert(PayrollRule.from_rates(month, validated))
        logger.info("Updated rule for %s: %s", month, validated.as_dict())
        return stored

    async def lock_rule(self, month: Month) -> PayrollRule:
        """Lock a month's rule. Locking an already locked rule changes nothing.

        Raises:
            RuleNotFoundError: No rule exists for the month.
        """
        rule = await self.rules.find_by_month(month)
        if rule is None:
            raise RuleNotFoundError(month)
        if rule.locked:
            return rule

        locked = await self.rules.mark_locked(month, self.clock())
        logger.info("Locked rule for %s at %s", month, locked.locked_at)
        return locked

    async def history(self) -> list[PayrollRule]:
        """All rules, most recent month first."""
        rules = await self.rules.list_all()
        return sorted(rules, key=lambda r: r.effective_month, reverse=True)

    async def lock_previous_month_if_payday(self, payment_day: int) -> PayrollRule | None:
        """Payday job: lock last month's rule when today is the payment day.

        A payment day past the end of a short month falls on its last day.
        Returns the locked rule, or None when nothing was locked.
        """
        today = self.clock().date()
        this_month = Month.of(today)
        effective_day = min(payment_day, this_month.last_day.day)
        if today.day != effective_day:
            return None

        previous = this_month.previous()
        if await self.rules.find_by_month(previous) is None:
            logger.warning("Payday %s: no rule for %s to lock", today, previous)
            return None
        return await self.lock_rule(previous)
