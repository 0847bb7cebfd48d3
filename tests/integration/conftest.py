"""Fixtures for SQLite-backed integration tests."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from changelogs.config import DatabaseConfig
from changelogs.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
)


@pytest_asyncio.fixture
async def engine():
    """Per-test in-memory database with all tables created."""
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine):
    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()
