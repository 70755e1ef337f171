"""Tenant registry protocols (ports).

The lifecycle orchestrator depends only on TenantStatusWriter, the
narrow update contract. The triggering layer uses the full
TenantRegistry to insert, query and list tenant records.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantId, TenantStatus


@runtime_checkable
class TenantStatusWriter(Protocol):
    """Registry operations used by the lifecycle orchestrator."""

    async def update_status(
        self,
        tenant_id: TenantId,
        status: TenantStatus,
        url: str | None = None,
    ) -> None:
        """Persist a tenant's status and url.

        The url is stored as given; passing None clears it.
        """
        ...

    async def delete_record(self, tenant_id: TenantId) -> None:
        """Remove a tenant record. Removing a missing record is not an error."""
        ...


@runtime_checkable
class TenantRegistry(TenantStatusWriter, Protocol):
    """Durable store of tenant records."""

    async def add(self, tenant: Tenant) -> None:
        """Insert a new tenant record.

        Raises:
            DuplicateTenantNameError: If the tenant name is already in use
        """
        ...

    async def get(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by id, or None if absent."""
        ...

    async def get_by_name(self, name: str) -> Tenant | None:
        """Retrieve a tenant by name, or None if absent."""
        ...

    async def list_all(self) -> list[Tenant]:
        """List all tenants, newest first."""
        ...

    async def count(self) -> int:
        """Count tenant records."""
        ...
