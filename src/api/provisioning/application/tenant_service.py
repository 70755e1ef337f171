"""Tenant application service for the provisioning bounded context.

Validates and records lifecycle requests, then hands the actual work to
the lifecycle dispatcher. Every lifecycle method returns as soon as the
workflow is accepted.
"""

from __future__ import annotations

from provisioning.application.dispatcher import LifecycleDispatcher
from provisioning.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantId, TenantKind, TenantStatus
from provisioning.ports.exceptions import (
    DuplicateTenantNameError,
    TenantBusyError,
    TenantCapacityReachedError,
    TenantNotFoundError,
)
from provisioning.ports.registry import TenantRegistry


class TenantService:
    """Application service for tenant lifecycle requests.

    Lifecycle calls for a single tenant are serialized by rejecting a
    call while a workflow for that tenant is still in flight.
    """

    def __init__(
        self,
        registry: TenantRegistry,
        dispatcher: LifecycleDispatcher,
        max_tenants: int,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            registry: Durable store of tenant records
            dispatcher: Background runner for lifecycle workflows
            max_tenants: Platform-wide cap on tenant records
            probe: Optional domain probe for observability
        """
        self._registry = registry
        self._dispatcher = dispatcher
        self._max_tenants = max_tenants
        self._probe = probe or DefaultTenantServiceProbe()

    async def create_tenant(self, name: str, kind: str | TenantKind) -> Tenant:
        """Create a tenant and start provisioning it.

        Args:
            name: DNS-label safe tenant name, unique across tenants
            kind: Application template to deploy

        Returns:
            The created Tenant in PROVISIONING status

        Raises:
            InvalidTenantError: If the name or kind is invalid
            TenantCapacityReachedError: If max_tenants records already exist
            DuplicateTenantNameError: If the name is already in use
        """
        tenant = Tenant.create(name=name, kind=kind)

        if await self._registry.count() >= self._max_tenants:
            self._probe.capacity_reached(self._max_tenants)
            raise TenantCapacityReachedError(self._max_tenants)

        try:
            await self._registry.add(tenant)
        except DuplicateTenantNameError:
            self._probe.duplicate_tenant_name(name=name)
            raise

        self._dispatcher.submit_provision(tenant)
        self._probe.tenant_created(
            tenant_id=tenant.id.value,
            name=tenant.name,
            kind=tenant.kind.value,
        )
        return tenant

    async def delete_tenant(self, tenant_id: TenantId) -> Tenant:
        """Mark a tenant DELETING and start deprovisioning it.

        A tenant already in DELETING with nothing in flight (for instance
        after a restart) is resubmitted as is.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            TenantBusyError: If a workflow for the tenant is in flight
        """
        tenant = await self._claim_idle_tenant(tenant_id, operation="delete")

        try:
            if tenant.status is not TenantStatus.DELETING:
                tenant.mark_deleting()
                await self._registry.update_status(
                    tenant.id, TenantStatus.DELETING, url=tenant.url
                )

            self._dispatcher.submit_deprovision(tenant)
        finally:
            self._dispatcher.release(tenant_id)

        self._probe.tenant_deletion_requested(tenant.id.value)
        return tenant

    async def reprovision_tenant(self, tenant_id: TenantId) -> Tenant:
        """Re-trigger provisioning for a FAILED tenant.

        Steps that already completed are idempotent, so the workflow
        picks up wherever the previous run stopped.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            TenantBusyError: If a workflow for the tenant is in flight
            InvalidStatusTransitionError: If the tenant is not FAILED
        """
        tenant = await self._claim_idle_tenant(tenant_id, operation="reprovision")

        try:
            tenant.mark_reprovisioning()
            await self._registry.update_status(
                tenant.id, TenantStatus.PROVISIONING, url=None
            )

            self._dispatcher.submit_provision(tenant)
        finally:
            self._dispatcher.release(tenant_id)

        self._probe.tenant_reprovision_requested(tenant.id.value)
        return tenant

    async def list_tenants(self) -> list[Tenant]:
        """List all tenants, newest first."""
        return await self._registry.list_all()

    async def get_tenant(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by ID, or None if it does not exist."""
        return await self._registry.get(tenant_id)

    async def _claim_idle_tenant(self, tenant_id: TenantId, operation: str) -> Tenant:
        """Load a tenant and claim it on the dispatcher.

        The claim is taken with no await between the check and the
        reservation. Callers must release it once they have submitted a
        workflow or given up.
        """
        tenant = await self._registry.get(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant {tenant_id.value} not found")

        if not self._dispatcher.reserve(tenant_id):
            self._probe.tenant_busy(tenant_id.value, operation)
            raise TenantBusyError(
                f"Tenant {tenant_id.value} has a lifecycle operation in progress"
            )

        return tenant
