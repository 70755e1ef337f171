"""Engine factory for the tenant registry database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "APPLICATION_NAME",
    "build_async_url",
    "create_registry_engine",
]

# Shown in pg_stat_activity for every registry connection
APPLICATION_NAME = "storefleet-api"


def create_registry_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine backing the tenant registry.

    Request handlers and background lifecycle workflows share one pool.
    A workflow holds a connection only for the duration of a single
    registry call, never across cluster or helm calls, so the pool is
    sized by concurrent registry calls rather than by workflows.

    Args:
        settings: Database connection settings

    Returns:
        Configured async engine
    """
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_max_connections,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args={"server_settings": {"application_name": APPLICATION_NAME}},
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Build the asyncpg connection URL.

    Credentials are percent-encoded by SQLAlchemy's URL builder, so the
    result is safe to parse back even when they contain ``@`` or ``/``.
    """
    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    ).render_as_string(hide_password=False)
