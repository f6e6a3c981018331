"""Integration test fixtures with a real database and the HTTP app."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from studio_payroll.api.app import create_app
from studio_payroll.api.dependencies import get_clock, get_db_session
from studio_payroll.calculators.types import Instructor
from studio_payroll.stores.sql import SqlAttendanceStore, SqlInstructorDirectory, SqlSalesStore
from tests.factories import FixedClock, attend, sell


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession], clock: FixedClock
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client bound to the test database and clock."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def seeded_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Two instructors with February 2026 classes and sales.

    coach-a: 10 and 16 students, one ten-session package -> 2500
    coach-b: nothing -> 0
    """
    async with session_factory() as session:
        directory = SqlInstructorDirectory(session)
        await directory.add(Instructor("coach-a", "Amy"))
        await directory.add(Instructor("coach-b", "Ben"))

        attendance = SqlAttendanceStore(session)
        await attendance.add(attend("coach-a", date(2026, 2, 2), 10))
        await attendance.add(attend("coach-a", date(2026, 2, 9), 16))
        await attendance.add(attend("coach-a", date(2026, 3, 2), 16))

        await SqlSalesStore(session).add(
            sell("coach-a", date(2026, 2, 10), "ten-session package")
        )
        await session.commit()
    return session_factory
