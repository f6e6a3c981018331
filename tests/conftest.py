"""Pytest fixtures for studio payroll tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from studio_payroll.calculators.engine import PayrollAggregator
from studio_payroll.calculators.types import Instructor
from studio_payroll.models import Base
from studio_payroll.services.records import RecordService
from studio_payroll.services.rule_manager import RuleManager
from studio_payroll.stores.memory import (
    InMemoryAttendanceStore,
    InMemoryInstructorDirectory,
    InMemoryPayrollSummaryStore,
    InMemoryRuleStore,
    InMemorySalesStore,
)
from tests.factories import FixedClock

# Use in-memory SQLite for tests (with async support)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed in the middle of February 2026."""
    return FixedClock(datetime(2026, 2, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def rule_store() -> InMemoryRuleStore:
    return InMemoryRuleStore()


@pytest.fixture
def rule_manager(rule_store: InMemoryRuleStore, clock: FixedClock) -> RuleManager:
    return RuleManager(rule_store, clock=clock)


@pytest.fixture
def instructors() -> InMemoryInstructorDirectory:
    return InMemoryInstructorDirectory(
        [Instructor("coach-a", "Amy"), Instructor("coach-b", "Ben")]
    )


@pytest.fixture
def attendance() -> InMemoryAttendanceStore:
    return InMemoryAttendanceStore()


@pytest.fixture
def sales() -> InMemorySalesStore:
    return InMemorySalesStore()


@pytest.fixture
def summaries() -> InMemoryPayrollSummaryStore:
    return InMemoryPayrollSummaryStore()


@pytest.fixture
def aggregator(
    rule_manager: RuleManager,
    instructors: InMemoryInstructorDirectory,
    attendance: InMemoryAttendanceStore,
    sales: InMemorySalesStore,
    summaries: InMemoryPayrollSummaryStore,
) -> PayrollAggregator:
    return PayrollAggregator(rule_manager, instructors, attendance, sales, summaries)


@pytest.fixture
def record_service(
    instructors: InMemoryInstructorDirectory,
    attendance: InMemoryAttendanceStore,
    sales: InMemorySalesStore,
) -> RecordService:
    return RecordService(instructors, attendance, sales)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()
