"""Async SQLAlchemy engine and session factory helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from newsletter_service.infrastructure.db.metadata import metadata


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL."""

    return bind_session_factory(create_async_engine(database_url))


def bind_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an existing engine."""

    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""

    async with engine.begin() as connection:
        await connection.run_sync(metadata.create_all)
