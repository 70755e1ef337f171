"""Unit tests for LifecycleDispatcher."""

import asyncio
from unittest.mock import Mock

import pytest

from provisioning.application.dispatcher import LifecycleDispatcher
from provisioning.application.observability import DispatcherProbe
from provisioning.application.orchestrator import (
    TenantLifecycleOrchestrator,
    WorkflowReport,
)
from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantStatus
from provisioning.ports.exceptions import TenantBusyError


def _report(tenant_id: str, workflow: str) -> WorkflowReport:
    return WorkflowReport(
        tenant_id=tenant_id,
        workflow=workflow,
        results=(),
        final_status=TenantStatus.READY if workflow == "provision" else None,
    )


@pytest.fixture
def orchestrator():
    orchestrator = Mock(spec=TenantLifecycleOrchestrator)
    orchestrator.provision.side_effect = lambda tenant: _report(
        tenant.id.value, "provision"
    )
    orchestrator.deprovision.side_effect = lambda tenant: _report(
        tenant.id.value, "deprovision"
    )
    return orchestrator


@pytest.fixture
def probe():
    return Mock(spec=DispatcherProbe)


@pytest.fixture
def dispatcher(orchestrator, probe):
    return LifecycleDispatcher(orchestrator=orchestrator, probe=probe)


class TestSubmit:
    """Tests for fire-and-forget submission."""

    @pytest.mark.asyncio
    async def test_submit_returns_task_without_awaiting(
        self, dispatcher, provisioning_tenant
    ):
        task = dispatcher.submit_provision(provisioning_tenant)

        assert isinstance(task, asyncio.Task)
        assert not task.done()
        assert dispatcher.is_busy(provisioning_tenant.id)
        assert dispatcher.in_flight == 1

        report = await task
        assert report.final_status is TenantStatus.READY

    @pytest.mark.asyncio
    async def test_tenant_is_idle_after_completion(
        self, dispatcher, probe, provisioning_tenant
    ):
        await dispatcher.submit_provision(provisioning_tenant)
        await asyncio.sleep(0)

        assert not dispatcher.is_busy(provisioning_tenant.id)
        assert dispatcher.in_flight == 0
        probe.task_completed.assert_called_once_with("ab12cd34", "provision")

    @pytest.mark.asyncio
    async def test_submit_deprovision_runs_deprovision(
        self, dispatcher, orchestrator, ready_tenant
    ):
        report = await dispatcher.submit_deprovision(ready_tenant)

        orchestrator.deprovision.assert_awaited_once_with(ready_tenant)
        assert report.workflow == "deprovision"

    @pytest.mark.asyncio
    async def test_submission_is_reported(self, dispatcher, probe, provisioning_tenant):
        task = dispatcher.submit_provision(provisioning_tenant)

        probe.task_submitted.assert_called_once_with("ab12cd34", "provision", 1)
        await task


class TestReservations:
    """Tests for claiming a tenant ahead of submission."""

    def test_reserve_marks_tenant_busy(self, dispatcher, provisioning_tenant):
        assert dispatcher.reserve(provisioning_tenant.id)

        assert dispatcher.is_busy(provisioning_tenant.id)
        assert not dispatcher.reserve(provisioning_tenant.id)
        assert dispatcher.in_flight == 0

    def test_release_makes_tenant_idle(self, dispatcher, provisioning_tenant):
        dispatcher.reserve(provisioning_tenant.id)
        dispatcher.release(provisioning_tenant.id)

        assert not dispatcher.is_busy(provisioning_tenant.id)
        assert dispatcher.reserve(provisioning_tenant.id)

    @pytest.mark.asyncio
    async def test_submission_consumes_the_claim(
        self, dispatcher, provisioning_tenant
    ):
        dispatcher.reserve(provisioning_tenant.id)
        task = dispatcher.submit_provision(provisioning_tenant)
        dispatcher.release(provisioning_tenant.id)

        assert dispatcher.is_busy(provisioning_tenant.id)
        assert not dispatcher.reserve(provisioning_tenant.id)

        await task
        await asyncio.sleep(0)
        assert not dispatcher.is_busy(provisioning_tenant.id)

    @pytest.mark.asyncio
    async def test_second_submission_for_running_tenant_is_rejected(
        self, dispatcher, probe, provisioning_tenant
    ):
        first = dispatcher.submit_provision(provisioning_tenant)

        with pytest.raises(TenantBusyError):
            dispatcher.submit_deprovision(provisioning_tenant)

        assert dispatcher.in_flight == 1
        probe.task_submitted.assert_called_once()
        await first


class TestCrashes:
    """Tests for workflows that raise."""

    @pytest.mark.asyncio
    async def test_crash_is_reported_and_retrieved(
        self, dispatcher, orchestrator, probe, provisioning_tenant
    ):
        orchestrator.provision.side_effect = RuntimeError("registry unavailable")

        task = dispatcher.submit_provision(provisioning_tenant)
        await dispatcher.drain()

        assert task.done()
        probe.task_crashed.assert_called_once_with(
            "ab12cd34", "provision", "RuntimeError: registry unavailable"
        )
        assert not dispatcher.is_busy(provisioning_tenant.id)


class TestDrain:
    """Tests for waiting on in-flight workflows."""

    @pytest.mark.asyncio
    async def test_drain_waits_for_all_tasks(self, orchestrator, probe):
        release = asyncio.Event()

        async def slow_provision(tenant):
            await release.wait()
            return _report(tenant.id.value, "provision")

        orchestrator.provision.side_effect = slow_provision
        dispatcher = LifecycleDispatcher(orchestrator=orchestrator, probe=probe)

        tenants = [Tenant.create(name=f"shop-{i}", kind="woocommerce") for i in range(3)]
        tasks = [dispatcher.submit_provision(t) for t in tenants]
        assert dispatcher.in_flight == 3

        drain = asyncio.create_task(dispatcher.drain())
        await asyncio.sleep(0)
        assert not drain.done()

        release.set()
        await drain

        assert all(task.done() for task in tasks)
        assert dispatcher.in_flight == 0
        probe.drain_started.assert_called_once_with(3)

    @pytest.mark.asyncio
    async def test_drain_with_nothing_in_flight(self, dispatcher, probe):
        await dispatcher.drain()

        probe.drain_started.assert_called_once_with(0)
