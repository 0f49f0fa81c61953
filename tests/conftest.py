"""
Pytest configuration and shared test fixtures.

Environment overrides are applied before the application is imported so the
cached settings point at an in-memory SQLite database with rate limiting
switched off. Service tests use the in-memory unit of work from
``tests.fakes``; repository and HTTP tests run against a fresh aiosqlite
database file per test, one connection per session.
"""

import os
from pathlib import Path

os.environ["APP_ENVIRONMENT"] = "test"
os.environ["APP_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_RATE_LIMIT_ENABLED"] = "false"
os.environ["APP_LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)

from stockroom.database.connection import (  # noqa: E402
    create_engine,
    create_session_factory,
    create_tables,
    get_db,
)
from stockroom.main import app  # noqa: E402
from stockroom.services.orders.locks import ProductLockRegistry  # noqa: E402
from tests.fakes import InMemoryUnitOfWork  # noqa: E402


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    """
    Create an empty in-memory unit of work.

    Returns:
        InMemoryUnitOfWork: Fresh stores with no rows
    """
    return InMemoryUnitOfWork()


@pytest.fixture
def locks() -> ProductLockRegistry:
    """Lock registry private to one test."""
    return ProductLockRegistry()


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a SQLite engine on a temporary database file with all tables.

    Yields:
        AsyncEngine: Engine handing each session its own connection
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'stockroom.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Open a session on the test database.

    Yields:
        AsyncSession: Session closed after the test
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an asynchronous test client wired to the test database.

    The ``get_db`` dependency is overridden so every request gets its own
    session on the in-memory engine.

    Yields:
        AsyncClient: Asynchronous test client for the FastAPI app

    Example:
        async def test_health_endpoint_async(async_client):
            response = await async_client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
