"""Tenant lifecycle orchestrator.

Sequences cluster resource creation/destruction and the release tool
into the two tenant lifecycle workflows:

Provision (entry status PROVISIONING, abort on first failure):
1. create namespace
2. create resource quota
3. create limit range
4. create the three network policies
5. install or upgrade the release
Then exactly one terminal status write: READY with the public url, or
FAILED without one. Completed steps are neither retried nor rolled
back, so a FAILED tenant may keep a partially provisioned namespace.
Steps 1-4 treat "already exists" as success, which makes re-triggering
provisioning for a tenant stuck mid-sequence safe.

Deprovision (entry status DELETING, continue on error):
1. uninstall the release (it may legitimately not exist)
2. delete the namespace
Failures are logged as warnings. The registry record is removed
unconditionally afterwards: cluster cleanup is best-effort, record
removal is guaranteed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping

from provisioning.application.observability import (
    DefaultLifecycleProbe,
    LifecycleProbe,
)
from provisioning.application.workflow import (
    Diagnostic,
    FailurePolicy,
    Step,
    StepResult,
    run_workflow,
)
from provisioning.domain.templates import (
    ReleaseTemplate,
    build_limit_range,
    build_network_policies,
    build_quota,
)
from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantKind, TenantStatus
from provisioning.ports.cluster import ClusterResourceClient
from provisioning.ports.exceptions import ClusterOperationError
from provisioning.ports.registry import TenantStatusWriter
from provisioning.ports.releases import ReleaseManager, ReleaseParams, ReleaseResult

TENANT_ID_LABEL = "storefleet.io/tenant-id"

STEP_CREATE_NAMESPACE = "create_namespace"
STEP_CREATE_QUOTA = "create_quota"
STEP_CREATE_LIMIT_RANGE = "create_limit_range"
STEP_CREATE_NETWORK_POLICIES = "create_network_policies"
STEP_INSTALL_RELEASE = "install_release"
STEP_UNINSTALL_RELEASE = "uninstall_release"
STEP_DELETE_NAMESPACE = "delete_namespace"


@dataclass(frozen=True)
class WorkflowReport:
    """What a lifecycle workflow did.

    Attributes:
        tenant_id: Tenant the workflow ran for
        workflow: "provision" or "deprovision"
        results: Results of the steps that ran, in order
        final_status: Status written to the registry, None once the
            record was removed
        url: Url written to the registry, if any
    """

    tenant_id: str
    workflow: str
    results: tuple[StepResult, ...]
    final_status: TenantStatus | None
    url: str | None = None

    @property
    def succeeded(self) -> bool:
        return all(result.succeeded for result in self.results)

    @property
    def failed_steps(self) -> list[str]:
        return [result.step for result in self.results if not result.succeeded]


class TenantLifecycleOrchestrator:
    """Runs provisioning and deprovisioning workflows for tenants.

    All collaborators are injected; the orchestrator holds no cluster
    or registry state of its own.
    """

    def __init__(
        self,
        cluster: ClusterResourceClient,
        releases: ReleaseManager,
        registry: TenantStatusWriter,
        release_templates: Mapping[TenantKind, ReleaseTemplate],
        base_domain: str,
        release_timeout_seconds: int = 300,
        probe: LifecycleProbe | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            cluster: Cluster resource client
            releases: Release manager
            registry: Registry status writer
            release_templates: Release template per tenant kind
            base_domain: Domain under which tenant hostnames are created
            release_timeout_seconds: Timeout for the release install wait
            probe: Optional domain probe for observability

        Raises:
            ValueError: If a tenant kind has no release template
        """
        missing = [kind.value for kind in TenantKind if kind not in release_templates]
        if missing:
            raise ValueError(
                f"No release template for tenant kinds: {', '.join(missing)}"
            )

        self._cluster = cluster
        self._releases = releases
        self._registry = registry
        self._templates = dict(release_templates)
        self._base_domain = base_domain
        self._release_timeout = release_timeout_seconds
        self._probe = probe or DefaultLifecycleProbe()

    async def provision(self, tenant: Tenant) -> WorkflowReport:
        """Provision a tenant and write its terminal status.

        Returns:
            WorkflowReport with final status READY or FAILED
        """
        tenant_id = tenant.id.value
        self._probe.provisioning_started(tenant_id, tenant.namespace_name)

        def report_failure(step: str, diagnostic: Diagnostic) -> None:
            self._probe.provisioning_step_failed(
                tenant_id=tenant_id,
                step=step,
                message=diagnostic.message,
                status=diagnostic.status,
                output=diagnostic.output,
            )

        results = await run_workflow(
            self._provision_steps(tenant),
            FailurePolicy.ABORT,
            on_step_started=lambda step: self._probe.step_started(tenant_id, step),
            on_failure=report_failure,
        )

        if all(result.succeeded for result in results):
            url = tenant.public_url(self._base_domain)
            await self._registry.update_status(tenant.id, TenantStatus.READY, url=url)
            self._probe.provisioning_succeeded(tenant_id, url)
            return WorkflowReport(
                tenant_id=tenant_id,
                workflow="provision",
                results=tuple(results),
                final_status=TenantStatus.READY,
                url=url,
            )

        await self._registry.update_status(tenant.id, TenantStatus.FAILED, url=None)
        self._probe.provisioning_failed(tenant_id, results[-1].step)
        return WorkflowReport(
            tenant_id=tenant_id,
            workflow="provision",
            results=tuple(results),
            final_status=TenantStatus.FAILED,
        )

    async def deprovision(self, tenant: Tenant) -> WorkflowReport:
        """Tear down a tenant's cluster resources and remove its record.

        The record is removed even if the workflow driver itself raises.

        Returns:
            WorkflowReport whose failed steps are the logged warnings
        """
        tenant_id = tenant.id.value
        self._probe.deprovisioning_started(tenant_id, tenant.namespace_name)

        def report_warning(step: str, diagnostic: Diagnostic) -> None:
            self._probe.deprovisioning_step_warning(
                tenant_id=tenant_id,
                step=step,
                message=diagnostic.message,
                status=diagnostic.status,
                output=diagnostic.output,
            )

        try:
            results = await run_workflow(
                self._deprovision_steps(tenant),
                FailurePolicy.CONTINUE,
                on_step_started=lambda step: self._probe.step_started(tenant_id, step),
                on_failure=report_warning,
            )
        finally:
            await self._registry.delete_record(tenant.id)

        warnings = sum(1 for result in results if not result.succeeded)
        self._probe.deprovisioning_completed(tenant_id, warnings)
        return WorkflowReport(
            tenant_id=tenant_id,
            workflow="deprovision",
            results=tuple(results),
            final_status=None,
        )

    def _provision_steps(self, tenant: Tenant) -> list[Step]:
        namespace = tenant.namespace_name
        template = self._templates[tenant.kind]

        async def create_network_policies() -> None:
            policies = build_network_policies(
                tenant.release_name,
                frontend_component=template.frontend_component,
                database_component=template.database_component,
            )
            for policy in policies:
                await self._cluster.create_network_policy(namespace, policy)

        params = ReleaseParams(
            release_name=tenant.release_name,
            namespace=namespace,
            chart=template.chart,
            overrides={
                "ingress.host": tenant.hostname(self._base_domain),
                template.title_key: tenant.name,
            },
            wait=True,
            timeout_seconds=self._release_timeout,
        )

        return [
            _cluster_step(
                STEP_CREATE_NAMESPACE,
                lambda: self._cluster.create_namespace(
                    namespace, labels={TENANT_ID_LABEL: tenant.id.value}
                ),
            ),
            _cluster_step(
                STEP_CREATE_QUOTA,
                lambda: self._cluster.create_quota(namespace, build_quota()),
            ),
            _cluster_step(
                STEP_CREATE_LIMIT_RANGE,
                lambda: self._cluster.create_limit_range(namespace, build_limit_range()),
            ),
            _cluster_step(STEP_CREATE_NETWORK_POLICIES, create_network_policies),
            _release_step(
                STEP_INSTALL_RELEASE,
                lambda: self._releases.install_or_upgrade(params),
            ),
        ]

    def _deprovision_steps(self, tenant: Tenant) -> list[Step]:
        namespace = tenant.namespace_name
        # Release bookkeeping lives outside the namespace cascade, so the
        # release goes first.
        return [
            _release_step(
                STEP_UNINSTALL_RELEASE,
                lambda: self._releases.uninstall(tenant.release_name, namespace),
            ),
            _cluster_step(
                STEP_DELETE_NAMESPACE,
                lambda: self._cluster.delete_namespace(namespace),
            ),
        ]


def _cluster_step(name: str, call: Callable[[], Awaitable[None]]) -> Step:
    """Wrap a cluster call, turning ClusterOperationError into a diagnostic."""

    async def action() -> StepResult:
        try:
            await call()
        except ClusterOperationError as e:
            return StepResult.failed(
                name,
                Diagnostic(message=str(e), status=e.status, output=e.body),
            )
        return StepResult.ok(name)

    return Step(name=name, action=action)


def _release_step(name: str, call: Callable[[], Awaitable[ReleaseResult]]) -> Step:
    """Wrap a release tool call, turning an unsuccessful result into a diagnostic."""

    async def action() -> StepResult:
        result = await call()
        if result.succeeded:
            return StepResult.ok(name)

        output = "\n".join(part for part in (result.stdout, result.stderr) if part)
        return StepResult.failed(
            name,
            Diagnostic(
                message=f"{name} failed: {result.summary}",
                status=result.exit_code,
                output=output or None,
            ),
        )

    return Step(name=name, action=action)
