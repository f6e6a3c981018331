"""Tests for the rule lifecycle: resolution, edit window and locking."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from studio_payroll.calculators.types import DEFAULT_RATES, RuleRates
from studio_payroll.errors import InvalidRateError, RuleLockedError, RuleNotFoundError
from studio_payroll.months import Month
from studio_payroll.services.rule_manager import RuleManager
from studio_payroll.stores.memory import InMemoryRuleStore
from tests.factories import FEB_2026, JAN_2026, make_rule

pytestmark = pytest.mark.asyncio

NEW_RATES = {
    "tier_1_to_5": "550",
    "tier_6_to_10": "850",
    "tier_11_to_15": "1250",
    "tier_16_plus": "1600",
    "sales_bonus_unit": "25",
}


class TestResolveEffectiveRule:
    """Test rule lookup and first-access creation."""

    async def test_returns_stored_rule(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(JAN_2026, tier_1_to_5="450"))
        rule = await rule_manager.resolve_effective_rule(JAN_2026)
        assert rule.tier_1_to_5 == Decimal("450")

    async def test_missing_past_month_is_not_found(self, rule_manager):
        with pytest.raises(RuleNotFoundError) as exc_info:
            await rule_manager.resolve_effective_rule(JAN_2026)
        assert exc_info.value.month == JAN_2026

    async def test_missing_future_month_is_not_found(self, rule_manager):
        with pytest.raises(RuleNotFoundError):
            await rule_manager.resolve_effective_rule(Month(2026, 3))

    async def test_current_month_starts_from_defaults(self, rule_manager, rule_store):
        rule = await rule_manager.resolve_effective_rule(FEB_2026)
        assert rule.effective_month == FEB_2026
        assert rule.rates == DEFAULT_RATES
        assert not rule.locked
        assert await rule_store.find_by_month(FEB_2026) == rule

    async def test_current_month_copies_most_recent_prior_rule(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(Month(2025, 11), tier_1_to_5="400"))
        await rule_store.upsert(make_rule(Month(2025, 12), tier_1_to_5="600", sales_bonus_unit="30"))
        # A later month must not be a copy source
        await rule_store.upsert(make_rule(Month(2026, 4), tier_1_to_5="999"))

        rule = await rule_manager.resolve_effective_rule(FEB_2026)

        assert rule.tier_1_to_5 == Decimal("600")
        assert rule.sales_bonus_unit == Decimal("30")
        assert not rule.locked
        assert rule.locked_at is None

    async def test_copy_does_not_inherit_lock(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(JAN_2026))
        await rule_store.mark_locked(JAN_2026, datetime(2026, 2, 5, tzinfo=timezone.utc))

        rule = await rule_manager.resolve_effective_rule(FEB_2026)
        assert not rule.locked

    async def test_second_access_returns_same_rule(self, rule_manager, rule_store):
        first = await rule_manager.resolve_effective_rule(FEB_2026)
        second = await rule_manager.resolve_effective_rule(FEB_2026)
        assert first == second
        assert len(await rule_store.list_all()) == 1

    async def test_custom_default_rates(self, clock):
        rates = RuleRates(
            tier_1_to_5=Decimal("1"),
            tier_6_to_10=Decimal("2"),
            tier_11_to_15=Decimal("3"),
            tier_16_plus=Decimal("4"),
            sales_bonus_unit=Decimal("5"),
        )
        manager = RuleManager(InMemoryRuleStore(), clock=clock, default_rates=rates)
        rule = await manager.resolve_effective_rule(FEB_2026)
        assert rule.rates == rates


class TestEditWindow:
    """Test that only the current, unlocked month is editable."""

    async def test_current_month_is_editable(self, rule_manager):
        assert await rule_manager.is_editable(FEB_2026)

    async def test_past_and_future_months_are_not_editable(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(JAN_2026))
        assert not await rule_manager.is_editable(JAN_2026)
        assert not await rule_manager.is_editable(Month(2026, 3))

    async def test_locked_current_month_is_not_editable(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(FEB_2026, locked=True))
        assert not await rule_manager.is_editable(FEB_2026)

    async def test_update_current_month(self, rule_manager):
        rule = await rule_manager.update_rule(FEB_2026, NEW_RATES)
        assert rule.tier_1_to_5 == Decimal("550")
        assert rule.sales_bonus_unit == Decimal("25")
        assert not rule.locked

        fetched = await rule_manager.resolve_effective_rule(FEB_2026)
        assert fetched == rule

    async def test_update_accepts_rule_rates(self, rule_manager):
        rates = RuleRates(**{k: Decimal(v) for k, v in NEW_RATES.items()})
        rule = await rule_manager.update_rule(FEB_2026, rates)
        assert rule.rates == rates

    async def test_update_past_month_is_rejected(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(JAN_2026))
        with pytest.raises(RuleLockedError) as exc_info:
            await rule_manager.update_rule(JAN_2026, NEW_RATES)
        assert "2026-02" in str(exc_info.value)
        assert (await rule_store.find_by_month(JAN_2026)).tier_1_to_5 == Decimal("500")

    async def test_update_unlocked_past_month_is_rejected(self, rule_manager, rule_store):
        # Unlocked but outside the window
        await rule_store.upsert(make_rule(Month(2025, 12)))
        with pytest.raises(RuleLockedError):
            await rule_manager.update_rule(Month(2025, 12), NEW_RATES)

    async def test_update_locked_current_month_is_rejected(self, rule_manager, rule_store):
        await rule_store.upsert(make_rule(FEB_2026, locked=True))
        with pytest.raises(RuleLockedError) as exc_info:
            await rule_manager.update_rule(FEB_2026, NEW_RATES)
        assert exc_info.value.reason == "rule is locked"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("tier_1_to_5", "-1"),
            ("tier_6_to_10", "NaN"),
            ("tier_16_plus", "Infinity"),
            ("sales_bonus_unit", None),
            ("tier_11_to_15", "abc"),
            ("tier_1_to_5", True),
        ],
    )
    async def test_invalid_rates_are_rejected(self, rule_manager, field, value):
        rates = dict(NEW_RATES, **{field: value})
        with pytest.raises(InvalidRateError) as exc_info:
            await rule_manager.update_rule(FEB_2026, rates)
        assert exc_info.value.field == field

    async def test_missing_rate_is_rejected(self, rule_manager):
        rates = {k: v for k, v in NEW_RATES.items() if k != "tier_16_plus"}
        with pytest.raises(InvalidRateError):
            await rule_manager.update_rule(FEB_2026, rates)

    async def test_invalid_update_leaves_rule_unchanged(self, rule_manager, rule_store):
        await rule_manager.update_rule(FEB_2026, NEW_RATES)
        with pytest.raises(InvalidRateError):
            await rule_manager.update_rule(FEB_2026, dict(NEW_RATES, tier_1_to_5="-5"))
        assert (await rule_store.find_by_month(FEB_2026)).tier_1_to_5 == Decimal("550")

    async def test_zero_is_a_valid_rate(self, rule_manager):
        rule = await rule_manager.update_rule(FEB_2026, dict(NEW_RATES, sales_bonus_unit=0))
        assert rule.sales_bonus_unit == Decimal("0")

    async def test_month_rollover_closes_previous_window(self, rule_manager, clock):
        await rule_manager.update_rule(FEB_2026, NEW_RATES)
        assert await rule_manager.is_editable(FEB_2026)

        clock.set(datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc))

        assert not await rule_manager.is_editable(FEB_2026)
        with pytest.raises(RuleLockedError):
            await rule_manager.update_rule(FEB_2026, NEW_RATES)
        assert await rule_manager.is_editable(Month(2026, 3))


class TestLocking:
    """Test one-way locking."""

    async def test_lock_sets_timestamp_from_clock(self, rule_manager, rule_store, clock):
        await rule_store.upsert(make_rule(JAN_2026))
        rule = await rule_manager.lock_rule(JAN_2026)
        assert rule.locked
        assert rule.locked_at == clock()

    async def test_lock_is_idempotent(self, rule_manager, rule_store, clock):
        await rule_store.upsert(make_rule(JAN_2026))
        first = await rule_manager.lock_rule(JAN_2026)

        clock.set(datetime(2026, 2, 20, tzinfo=timezone.utc))
        second = await rule_manager.lock_rule(JAN_2026)

        assert second.locked
        assert second.locked_at == first.locked_at

    async def test_lock_missing_rule(self, rule_manager):
        with pytest.raises(RuleNotFoundError):
            await rule_manager.lock_rule(JAN_2026)

    async def test_lock_current_month_blocks_edits(self, rule_manager):
        await rule_manager.resolve_effective_rule(FEB_2026)
        await rule_manager.lock_rule(FEB_2026)
        with pytest.raises(RuleLockedError):
            await rule_manager.update_rule(FEB_2026, NEW_RATES)

    async def test_rate_upsert_keeps_lock(self, rule_store):
        await rule_store.upsert(make_rule(JAN_2026, locked=True))
        stored = await rule_store.upsert(make_rule(JAN_2026, tier_1_to_5="1"))
        assert stored.locked
        assert stored.locked_at is not None


class TestHistory:
    async def test_history_is_most_recent_first(self, rule_manager, rule_store):
        for month in (Month(2025, 11), Month(2026, 1), Month(2025, 12)):
            await rule_store.upsert(make_rule(month))
        await rule_manager.resolve_effective_rule(FEB_2026)

        history = await rule_manager.history()

        assert [str(r.effective_month) for r in history] == [
            "2026-02",
            "2026-01",
            "2025-12",
            "2025-11",
        ]

    async def test_history_empty(self, rule_manager):
        assert await rule_manager.history() == []


class TestPaydayLock:
    """Test the payday job that locks last month's rule."""

    async def test_locks_previous_month_on_payment_day(self, rule_manager, rule_store, clock):
        await rule_store.upsert(make_rule(JAN_2026))
        clock.set(datetime(2026, 2, 5, 9, 0, tzinfo=timezone.utc))

        locked = await rule_manager.lock_previous_month_if_payday(5)

        assert locked is not None
        assert locked.effective_month == JAN_2026
        assert (await rule_store.find_by_month(JAN_2026)).locked

    async def test_other_days_do_nothing(self, rule_manager, rule_store, clock):
        await rule_store.upsert(make_rule(JAN_2026))
        clock.set(datetime(2026, 2, 6, tzinfo=timezone.utc))

        assert await rule_manager.lock_previous_month_if_payday(5) is None
        assert not (await rule_store.find_by_month(JAN_2026)).locked

    async def test_no_previous_rule(self, rule_manager, clock):
        clock.set(datetime(2026, 2, 5, tzinfo=timezone.utc))
        assert await rule_manager.lock_previous_month_if_payday(5) is None

    async def test_payment_day_clamped_to_short_month(self, rule_manager, rule_store, clock):
        await rule_store.upsert(make_rule(JAN_2026))
        clock.set(datetime(2026, 2, 28, tzinfo=timezone.utc))

        locked = await rule_manager.lock_previous_month_if_payday(31)

        assert locked is not None
        assert locked.effective_month == JAN_2026

    async def test_year_boundary(self, rule_manager, rule_store, clock):
        await rule_store.upsert(make_rule(Month(2025, 12)))
        clock.set(datetime(2026, 1, 5, tzinfo=timezone.utc))

        locked = await rule_manager.lock_previous_month_if_payday(5)

        assert locked.effective_month == Month(2025, 12)
