"""Unit tests for TenantService."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from provisioning.application.dispatcher import LifecycleDispatcher
from provisioning.application.observability import (
    DispatcherProbe,
    TenantServiceProbe,
)
from provisioning.application.orchestrator import (
    TenantLifecycleOrchestrator,
    WorkflowReport,
)
from provisioning.application.tenant_service import TenantService
from provisioning.domain.exceptions import (
    InvalidStatusTransitionError,
    InvalidTenantError,
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

TENANT_ID = TenantId(value="ab12cd34")


@pytest.fixture
def registry():
    registry = Mock(spec=TenantRegistry)
    registry.count.return_value = 0
    registry.get.return_value = None
    return registry


@pytest.fixture
def dispatcher():
    dispatcher = Mock(spec=LifecycleDispatcher)
    dispatcher.reserve.return_value = True
    return dispatcher


@pytest.fixture
def probe():
    return Mock(spec=TenantServiceProbe)


@pytest.fixture
def service(registry, dispatcher, probe):
    return TenantService(
        registry=registry, dispatcher=dispatcher, max_tenants=10, probe=probe
    )


class TestCreateTenant:
    """Tests for tenant creation."""

    @pytest.mark.asyncio
    async def test_inserts_record_and_submits_provisioning(
        self, service, registry, dispatcher, probe
    ):
        tenant = await service.create_tenant(name="acme-shop", kind="woocommerce")

        assert tenant.status is TenantStatus.PROVISIONING
        assert tenant.kind is TenantKind.WOOCOMMERCE
        registry.add.assert_awaited_once_with(tenant)
        dispatcher.submit_provision.assert_called_once_with(tenant)
        probe.tenant_created.assert_called_once_with(
            tenant_id=tenant.id.value, name="acme-shop", kind="woocommerce"
        )

    @pytest.mark.asyncio
    async def test_invalid_name_is_rejected_before_any_write(
        self, service, registry, dispatcher
    ):
        with pytest.raises(InvalidTenantError):
            await service.create_tenant(name="Acme Shop", kind="woocommerce")

        registry.add.assert_not_awaited()
        dispatcher.submit_provision.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_kind_is_rejected(self, service, registry):
        with pytest.raises(InvalidTenantError):
            await service.create_tenant(name="acme-shop", kind="magento")

        registry.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_capacity_reached(self, service, registry, dispatcher, probe):
        registry.count.return_value = 10

        with pytest.raises(TenantCapacityReachedError) as exc_info:
            await service.create_tenant(name="acme-shop", kind="woocommerce")

        assert exc_info.value.max_tenants == 10
        registry.add.assert_not_awaited()
        dispatcher.submit_provision.assert_not_called()
        probe.capacity_reached.assert_called_once_with(10)

    @pytest.mark.asyncio
    async def test_duplicate_name(self, service, registry, dispatcher, probe):
        registry.add.side_effect = DuplicateTenantNameError("taken")

        with pytest.raises(DuplicateTenantNameError):
            await service.create_tenant(name="acme-shop", kind="woocommerce")

        dispatcher.submit_provision.assert_not_called()
        probe.duplicate_tenant_name.assert_called_once_with(name="acme-shop")


class TestDeleteTenant:
    """Tests for tenant deletion."""

    @pytest.mark.asyncio
    async def test_marks_deleting_and_submits(
        self, service, registry, dispatcher, ready_tenant
    ):
        registry.get.return_value = ready_tenant

        tenant = await service.delete_tenant(TENANT_ID)

        assert tenant.status is TenantStatus.DELETING
        registry.update_status.assert_awaited_once_with(
            TENANT_ID, TenantStatus.DELETING, url="http://acme-shop.localtest.me"
        )
        dispatcher.submit_deprovision.assert_called_once_with(tenant)

    @pytest.mark.asyncio
    async def test_failed_tenant_can_be_deleted(
        self, service, registry, dispatcher, failed_tenant
    ):
        registry.get.return_value = failed_tenant

        await service.delete_tenant(TENANT_ID)

        dispatcher.submit_deprovision.assert_called_once()

    @pytest.mark.asyncio
    async def test_stuck_deleting_tenant_is_resubmitted(
        self, service, registry, dispatcher, ready_tenant
    ):
        ready_tenant.mark_deleting()
        registry.get.return_value = ready_tenant

        await service.delete_tenant(TENANT_ID)

        registry.update_status.assert_not_awaited()
        dispatcher.submit_deprovision.assert_called_once_with(ready_tenant)

    @pytest.mark.asyncio
    async def test_missing_tenant(self, service, dispatcher):
        with pytest.raises(TenantNotFoundError):
            await service.delete_tenant(TENANT_ID)

        dispatcher.submit_deprovision.assert_not_called()

    @pytest.mark.asyncio
    async def test_busy_tenant_is_rejected(
        self, service, registry, dispatcher, probe, provisioning_tenant
    ):
        registry.get.return_value = provisioning_tenant
        dispatcher.reserve.return_value = False

        with pytest.raises(TenantBusyError):
            await service.delete_tenant(TENANT_ID)

        registry.update_status.assert_not_awaited()
        dispatcher.submit_deprovision.assert_not_called()
        probe.tenant_busy.assert_called_once_with("ab12cd34", "delete")
        dispatcher.release.assert_not_called()

    @pytest.mark.asyncio
    async def test_claim_is_released_after_submission(
        self, service, registry, dispatcher, ready_tenant
    ):
        registry.get.return_value = ready_tenant

        await service.delete_tenant(TENANT_ID)

        dispatcher.reserve.assert_called_once_with(TENANT_ID)
        dispatcher.release.assert_called_once_with(TENANT_ID)

    @pytest.mark.asyncio
    async def test_claim_is_released_when_status_update_fails(
        self, service, registry, dispatcher, ready_tenant
    ):
        registry.get.return_value = ready_tenant
        registry.update_status.side_effect = RuntimeError("registry unavailable")

        with pytest.raises(RuntimeError):
            await service.delete_tenant(TENANT_ID)

        dispatcher.submit_deprovision.assert_not_called()
        dispatcher.release.assert_called_once_with(TENANT_ID)


class TestReprovisionTenant:
    """Tests for re-triggering provisioning."""

    @pytest.mark.asyncio
    async def test_failed_tenant_is_resubmitted(
        self, service, registry, dispatcher, failed_tenant
    ):
        registry.get.return_value = failed_tenant

        tenant = await service.reprovision_tenant(TENANT_ID)

        assert tenant.status is TenantStatus.PROVISIONING
        registry.update_status.assert_awaited_once_with(
            TENANT_ID, TenantStatus.PROVISIONING, url=None
        )
        dispatcher.submit_provision.assert_called_once_with(tenant)

    @pytest.mark.asyncio
    async def test_ready_tenant_cannot_be_reprovisioned(
        self, service, registry, dispatcher, ready_tenant
    ):
        registry.get.return_value = ready_tenant

        with pytest.raises(InvalidStatusTransitionError):
            await service.reprovision_tenant(TENANT_ID)

        registry.update_status.assert_not_awaited()
        dispatcher.submit_provision.assert_not_called()
        dispatcher.release.assert_called_once_with(TENANT_ID)

    @pytest.mark.asyncio
    async def test_busy_tenant_is_rejected(
        self, service, registry, dispatcher, failed_tenant
    ):
        registry.get.return_value = failed_tenant
        dispatcher.reserve.return_value = False

        with pytest.raises(TenantBusyError):
            await service.reprovision_tenant(TENANT_ID)

    @pytest.mark.asyncio
    async def test_missing_tenant(self, service):
        with pytest.raises(TenantNotFoundError):
            await service.reprovision_tenant(TENANT_ID)


class SlowRegistry:
    """Registry double whose reads and writes yield to the event loop.

    Every get returns a fresh FAILED tenant, as separate requests would
    each load their own copy of the record.
    """

    def __init__(self) -> None:
        self.status_updates: list[TenantStatus] = []

    async def get(self, tenant_id: TenantId) -> Tenant:
        await asyncio.sleep(0)
        return Tenant(
            id=tenant_id,
            name="acme-shop",
            kind=TenantKind.WOOCOMMERCE,
            status=TenantStatus.FAILED,
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
        )

    async def update_status(
        self, tenant_id: TenantId, status: TenantStatus, url: str | None = None
    ) -> None:
        await asyncio.sleep(0)
        self.status_updates.append(status)


class TestConcurrentLifecycleRequests:
    """Tests for overlapping lifecycle calls on one tenant."""

    @pytest.mark.asyncio
    async def test_delete_and_reprovision_race_admits_one(self, probe):
        gate = asyncio.Event()

        async def blocked(tenant):
            await gate.wait()
            return WorkflowReport(
                tenant_id=tenant.id.value,
                workflow="provision",
                results=(),
                final_status=None,
            )

        orchestrator = Mock(spec=TenantLifecycleOrchestrator)
        orchestrator.provision.side_effect = blocked
        orchestrator.deprovision.side_effect = blocked
        dispatcher = LifecycleDispatcher(
            orchestrator=orchestrator, probe=Mock(spec=DispatcherProbe)
        )
        registry = SlowRegistry()
        service = TenantService(
            registry=registry, dispatcher=dispatcher, max_tenants=10, probe=probe
        )

        outcomes = await asyncio.gather(
            service.delete_tenant(TENANT_ID),
            service.reprovision_tenant(TENANT_ID),
            return_exceptions=True,
        )

        rejected = [o for o in outcomes if isinstance(o, TenantBusyError)]
        accepted = [o for o in outcomes if isinstance(o, Tenant)]
        assert len(rejected) == 1
        assert len(accepted) == 1
        assert len(registry.status_updates) == 1
        assert dispatcher.in_flight == 1
        probe.tenant_busy.assert_called_once()

        gate.set()
        await dispatcher.drain()
        assert not dispatcher.is_busy(TENANT_ID)


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_tenants(self, service, registry, ready_tenant):
        registry.list_all.return_value = [ready_tenant]

        assert await service.list_tenants() == [ready_tenant]

    @pytest.mark.asyncio
    async def test_get_tenant(self, service, registry, ready_tenant):
        registry.get.return_value = ready_tenant

        assert await service.get_tenant(TENANT_ID) is ready_tenant
        registry.get.assert_awaited_once_with(TENANT_ID)
