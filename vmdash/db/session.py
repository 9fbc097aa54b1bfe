"""Database handle with an explicit lifecycle.

A single ``Database`` is built by ``create_app`` from ``settings.database_url``
and stored on ``app.state``; request handlers reach it only through the
dependencies below, so tests can substitute their own engine or session.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from vmdash.core.exceptions import DatabaseNotConfiguredError
from vmdash.db.base import Base


class Database:
    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "Database":
        return cls(create_async_engine(url, echo=echo, pool_pre_ping=True))

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_database(request: Request) -> Database | None:
    """Return the application's Database, or None when DATABASE_URL is unset."""
    return request.app.state.database


async def get_db(
    database: Annotated[Database | None, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    if database is None:
        raise DatabaseNotConfiguredError()
    async with database.session_factory() as session:
        yield session
