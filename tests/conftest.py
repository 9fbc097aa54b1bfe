"""
Shared fixtures for all tests.

Uses an in-memory SQLite database per test; the app's session dependency is
overridden so every request in a test shares one session.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vmdash.config import Settings
from vmdash.db.base import Base
from vmdash.db.session import Database, get_database, get_db

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app(test_engine, test_session: AsyncSession) -> Generator[FastAPI, None, None]:
    """The app with its database dependencies pointed at the in-memory DB."""
    from vmdash.main import create_app

    test_app = create_app(Settings(database_url=None, _env_file=None))

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_session

    # No annotations so FastAPI does not inspect the return type
    async def override_get_database():  # type: ignore[no-untyped-def]
        return Database(test_engine)

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_database] = override_get_database
    yield test_app
    test_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return an HTTPX AsyncClient wired to the test app with an in-memory DB."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def unconfigured_client() -> AsyncGenerator[AsyncClient, None]:
    """An app started without DATABASE_URL and without any overrides."""
    from vmdash.main import create_app

    test_app = create_app(Settings(database_url=None, _env_file=None))
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
