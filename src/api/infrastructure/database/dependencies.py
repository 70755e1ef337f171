"""Registry engine and session factory lifecycle.

The tenant registry opens its own sessions, including from background
workflows that outlive the request that started them, so it receives
the session factory rather than a request-scoped session.
"""

from __future__ import annotations

import threading

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_registry_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()


def get_registry_engine() -> AsyncEngine:
    """Get the registry engine, creating it on first use.

    The session factory is created together with the engine.
    """
    global _engine, _session_factory
    if _engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _engine is None:
                settings = get_database_settings()
                engine = create_registry_engine(settings)
                _session_factory = async_sessionmaker(
                    engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _engine = engine
                _probe.engine_created(
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_max_connections,
                )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker bound to the registry engine."""
    get_registry_engine()
    assert _session_factory is not None
    return _session_factory


async def close_database_connections() -> None:
    """Dispose the registry engine on application shutdown.

    A later get_registry_engine() call creates a fresh engine.
    """
    global _engine, _session_factory

    if _engine is None:
        return

    engine = _engine
    _engine = None
    _session_factory = None
    await engine.dispose()
    _probe.pool_closed()
