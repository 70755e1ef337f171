"""Unit tests for the database engine and session factory lifecycle."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_session_factory,
    get_registry_engine,
)


@pytest_asyncio.fixture
async def reset_engine():
    """Dispose any engine created by a test."""
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_registry_engine(reset_engine):
    engine = get_registry_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_engine_is_singleton(reset_engine):
    assert get_registry_engine() is get_registry_engine()


@pytest.mark.asyncio
async def test_session_factory_is_bound_to_engine(reset_engine):
    engine = get_registry_engine()
    factory = get_session_factory()

    session = factory()
    try:
        assert isinstance(session, AsyncSession)
        assert session.bind is engine
    finally:
        await session.close()


@pytest.mark.asyncio
async def test_close_database_connections_resets_engine():
    engine = get_registry_engine()

    await close_database_connections()
    new_engine = get_registry_engine()

    assert new_engine is not engine
    await close_database_connections()


@pytest.mark.asyncio
async def test_close_without_engine_is_noop():
    await close_database_connections()
    await close_database_connections()
