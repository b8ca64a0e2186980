"""Pytest fixtures for payroll engine tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from labor_payroll.models import Base, Employee
from labor_payroll.services.payroll_service import PayrollService
from labor_payroll.services.repository import (
    SqlAlchemyCalculationRepository,
    SqlAlchemyEmployeeRegistry,
)
from tests.factories import ALICE_ID, BOB_ID, CAROL_ID, DAVE_ID, FIXED_NOW

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def engine():
    """Create test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def employees(session_factory) -> dict[str, Employee]:
    """Seed the employee registry (committed, visible to every session)."""
    rows = {
        "alice": Employee(
            employee_id=ALICE_ID,
            name="Alice Smith",
            base_rate=Decimal("20.00"),
            pay_type="hourly",
        ),
        "bob": Employee(
            employee_id=BOB_ID,
            name="Bob Jones",
            base_rate=Decimal("30.00"),
            pay_type="hourly",
        ),
        "carol": Employee(
            employee_id=CAROL_ID,
            name="Carol White",
            base_rate=Decimal("45.00"),
            pay_type="salary",
        ),
        "dave": Employee(
            employee_id=DAVE_ID,
            name="Dave Brown",
            base_rate=Decimal("15.50"),
            pay_type="hourly",
            status="inactive",
        ),
    }
    async with session_factory() as seed_session:
        seed_session.add_all(rows.values())
        await seed_session.commit()
    return rows


@pytest.fixture
def service(session, employees) -> PayrollService:
    """Payroll service on the per-test session with a fixed clock."""
    return PayrollService(
        repository=SqlAlchemyCalculationRepository(session),
        employees=SqlAlchemyEmployeeRegistry(session),
        clock=lambda: FIXED_NOW,
    )
