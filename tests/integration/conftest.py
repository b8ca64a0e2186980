"""Integration test fixtures: the FastAPI app on the in-memory database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labor_payroll.api.app import create_app
from labor_payroll.api.dependencies import get_db_session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession], employees
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing.

    Each request gets its own session from the test engine and commits on
    success, the same as in production.
    """
    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
