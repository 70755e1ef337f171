"""Fire-and-forget dispatch of tenant lifecycle workflows.

The request path only needs to know that a workflow was accepted. The
dispatcher creates one asyncio task per workflow, tracks it by tenant id
until it finishes, and reports completion or crashes through its probe.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Coroutine

from provisioning.application.observability import (
    DefaultDispatcherProbe,
    DispatcherProbe,
)
from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantId
from provisioning.ports.exceptions import TenantBusyError

if TYPE_CHECKING:
    from provisioning.application.orchestrator import (
        TenantLifecycleOrchestrator,
        WorkflowReport,
    )


class LifecycleDispatcher:
    """Runs lifecycle workflows as background tasks.

    At most one task per tenant is tracked. Callers claim a tenant with
    ``reserve`` before their first await and either submit or ``release``
    it; the dispatcher itself does not queue.
    """

    def __init__(
        self,
        orchestrator: TenantLifecycleOrchestrator,
        probe: DispatcherProbe | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._probe = probe or DefaultDispatcherProbe()
        self._tasks: dict[str, asyncio.Task[WorkflowReport]] = {}
        self._reserved: set[str] = set()

    @property
    def in_flight(self) -> int:
        """Number of workflows currently running."""
        return len(self._tasks)

    def is_busy(self, tenant_id: TenantId) -> bool:
        """Check whether a workflow is running or claimed for a tenant."""
        return tenant_id.value in self._tasks or tenant_id.value in self._reserved

    def reserve(self, tenant_id: TenantId) -> bool:
        """Claim a tenant for an upcoming submission.

        Returns False when the tenant already has a workflow running or
        another caller holds the claim. Submitting consumes the claim.
        """
        if self.is_busy(tenant_id):
            return False
        self._reserved.add(tenant_id.value)
        return True

    def release(self, tenant_id: TenantId) -> None:
        """Drop a claim that did not lead to a submission."""
        self._reserved.discard(tenant_id.value)

    def submit_provision(self, tenant: Tenant) -> asyncio.Task[WorkflowReport]:
        """Start provisioning a tenant in the background."""
        return self._submit(tenant, "provision", self._orchestrator.provision(tenant))

    def submit_deprovision(self, tenant: Tenant) -> asyncio.Task[WorkflowReport]:
        """Start deprovisioning a tenant in the background."""
        return self._submit(
            tenant, "deprovision", self._orchestrator.deprovision(tenant)
        )

    async def drain(self) -> None:
        """Wait until every in-flight workflow has finished.

        Workflows are never cancelled; a crashed workflow has already
        been reported by the time this returns.
        """
        self._probe.drain_started(self.in_flight)
        while self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    def _submit(
        self,
        tenant: Tenant,
        workflow: str,
        coro: Coroutine[Any, Any, WorkflowReport],
    ) -> asyncio.Task[WorkflowReport]:
        tenant_id = tenant.id.value
        if tenant_id in self._tasks:
            coro.close()
            raise TenantBusyError(
                f"Tenant {tenant_id} has a lifecycle operation in progress"
            )

        self._reserved.discard(tenant_id)
        task = asyncio.create_task(coro, name=f"{workflow}:{tenant_id}")
        self._tasks[tenant_id] = task
        task.add_done_callback(
            lambda done: self._on_done(tenant_id, workflow, done)
        )
        self._probe.task_submitted(tenant_id, workflow, self.in_flight)
        return task

    def _on_done(
        self,
        tenant_id: str,
        workflow: str,
        task: asyncio.Task[WorkflowReport],
    ) -> None:
        if self._tasks.get(tenant_id) is task:
            del self._tasks[tenant_id]

        if task.cancelled():
            self._probe.task_crashed(tenant_id, workflow, "cancelled")
            return

        # Retrieving the exception here keeps it out of the loop's
        # "exception was never retrieved" handler.
        error = task.exception()
        if error is not None:
            self._probe.task_crashed(
                tenant_id, workflow, f"{type(error).__name__}: {error}"
            )
            return

        self._probe.task_completed(tenant_id, workflow)
