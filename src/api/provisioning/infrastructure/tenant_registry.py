"""SQLAlchemy implementation of the TenantRegistry port.

Each operation opens its own session from the injected session factory,
so the registry can be used both by request handlers and by lifecycle
workflows running in background tasks after the request has finished.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantId, TenantKind, TenantStatus
from provisioning.infrastructure.models import TenantModel
from provisioning.infrastructure.observability import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)
from provisioning.ports.exceptions import DuplicateTenantNameError
from provisioning.ports.registry import TenantRegistry


class SqlAlchemyTenantRegistry(TenantRegistry):
    """Registry storing tenant records in the application database."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: TenantRegistryProbe | None = None,
    ) -> None:
        """Initialize registry with a session factory.

        Args:
            session_factory: Factory for creating database sessions
            probe: Optional domain probe for observability
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultTenantRegistryProbe()

    async def add(self, tenant: Tenant) -> None:
        """Insert a new tenant record.

        Raises:
            DuplicateTenantNameError: If the tenant name is already in use
        """
        async with self._session_factory() as session:
            stmt = select(TenantModel.id).where(TenantModel.name == tenant.name)
            result = await session.execute(stmt)
            if result.scalar_one_or_none() is not None:
                self._probe.duplicate_tenant_name(tenant.name)
                raise DuplicateTenantNameError(f"Tenant '{tenant.name}' already exists")

            session.add(
                TenantModel(
                    id=tenant.id.value,
                    name=tenant.name,
                    kind=tenant.kind.value,
                    status=tenant.status.value,
                    url=tenant.url,
                    created_at=tenant.created_at,
                )
            )
            try:
                await session.commit()
            except IntegrityError as e:
                # Concurrent insert with the same name
                await session.rollback()
                self._probe.duplicate_tenant_name(tenant.name)
                raise DuplicateTenantNameError(
                    f"Tenant '{tenant.name}' already exists"
                ) from e

        self._probe.tenant_added(tenant.id.value, tenant.name)

    async def get(self, tenant_id: TenantId) -> Tenant | None:
        async with self._session_factory() as session:
            stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

        return self._to_domain(model) if model else None

    async def get_by_name(self, name: str) -> Tenant | None:
        async with self._session_factory() as session:
            stmt = select(TenantModel).where(TenantModel.name == name)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

        return self._to_domain(model) if model else None

    async def list_all(self) -> list[Tenant]:
        """List all tenants, newest first."""
        async with self._session_factory() as session:
            stmt = select(TenantModel).order_by(TenantModel.created_at.desc())
            result = await session.execute(stmt)
            models = result.scalars().all()

        return [self._to_domain(model) for model in models]

    async def count(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count()).select_from(TenantModel))
            return int(result.scalar_one())

    async def update_status(
        self,
        tenant_id: TenantId,
        status: TenantStatus,
        url: str | None = None,
    ) -> None:
        """Persist a tenant's status and url.

        Updating a record that no longer exists is logged, not raised:
        the tenant may have been removed by a concurrent deprovisioning.
        """
        async with self._session_factory() as session:
            stmt = (
                update(TenantModel)
                .where(TenantModel.id == tenant_id.value)
                .values(status=status.value, url=url)
            )
            result = await session.execute(stmt)
            await session.commit()

        if result.rowcount == 0:
            self._probe.tenant_record_missing(tenant_id.value, "update_status")
            return

        self._probe.tenant_status_updated(tenant_id.value, status.value)

    async def delete_record(self, tenant_id: TenantId) -> None:
        async with self._session_factory() as session:
            stmt = delete(TenantModel).where(TenantModel.id == tenant_id.value)
            result = await session.execute(stmt)
            await session.commit()

        if result.rowcount == 0:
            self._probe.tenant_record_missing(tenant_id.value, "delete_record")
            return

        self._probe.tenant_record_deleted(tenant_id.value)

    def _to_domain(self, model: TenantModel) -> Tenant:
        """Convert a TenantModel to a Tenant aggregate."""
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            kind=TenantKind(model.kind),
            status=TenantStatus(model.status),
            url=model.url,
            created_at=model.created_at,
        )
