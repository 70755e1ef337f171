"""Kubernetes implementation of the ClusterResourceClient port.

Wraps the kubernetes_asyncio CoreV1 and NetworkingV1 APIs. A 409
Conflict from a create call means the resource already exists and is
treated as success, which makes re-running a provisioning workflow safe.
Every other API failure is raised as ClusterOperationError with the
control plane's status, reason and body preserved for diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from kubernetes_asyncio import client, config
from kubernetes_asyncio.client.exceptions import ApiException

from provisioning.domain.templates import (
    LimitRangeSpec,
    NetworkPolicySpec,
    ResourceQuotaSpec,
)
from provisioning.infrastructure.observability import (
    ClusterClientProbe,
    DefaultClusterClientProbe,
)
from provisioning.ports.cluster import ClusterResourceClient
from provisioning.ports.exceptions import ClusterOperationError

if TYPE_CHECKING:
    from infrastructure.settings import ProvisioningSettings

HTTP_CONFLICT = 409

MANAGED_BY_LABELS = {"app.kubernetes.io/managed-by": "storefleet"}


class KubernetesResourceClient(ClusterResourceClient):
    """Idempotent-aware Kubernetes client for tenant namespaces.

    The API objects are injected so tests can substitute mocks; use
    connect() to build a client from provisioning settings.
    """

    def __init__(
        self,
        core_api: Any,
        networking_api: Any,
        api_client: client.ApiClient | None = None,
        probe: ClusterClientProbe | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            core_api: CoreV1Api instance (namespaces, quotas, limit ranges)
            networking_api: NetworkingV1Api instance (network policies)
            api_client: Underlying ApiClient, closed by close()
            probe: Optional domain probe for observability
        """
        self._core = core_api
        self._networking = networking_api
        self._api_client = api_client
        self._probe = probe or DefaultClusterClientProbe()

    @classmethod
    async def connect(
        cls,
        settings: ProvisioningSettings,
        probe: ClusterClientProbe | None = None,
    ) -> KubernetesResourceClient:
        """Load cluster credentials and build a client.

        Uses the pod's service account when running in-cluster, otherwise
        the local kubeconfig (optionally a specific context).
        """
        if settings.kube_in_cluster:
            config.load_incluster_config()
        else:
            await config.load_kube_config(context=settings.kube_context)

        api_client = client.ApiClient()
        return cls(
            core_api=client.CoreV1Api(api_client),
            networking_api=client.NetworkingV1Api(api_client),
            api_client=api_client,
            probe=probe,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._api_client is not None:
            await self._api_client.close()

    async def create_namespace(
        self, name: str, labels: dict[str, str] | None = None
    ) -> None:
        """Create a namespace, labelled as managed by this service."""
        body = {
            "apiVersion": "v1",
            "kind": "Namespace",
            "metadata": {
                "name": name,
                "labels": {**MANAGED_BY_LABELS, **(labels or {})},
            },
        }
        await self._create(
            operation="create_namespace",
            kind="Namespace",
            name=name,
            namespace=None,
            call=lambda: self._core.create_namespace(body=body),
        )

    async def delete_namespace(self, name: str) -> None:
        """Request deletion of a namespace.

        The control plane deletes everything inside the namespace
        asynchronously; this returns once the request is accepted.
        """
        try:
            await self._core.delete_namespace(name=name)
        except ApiException as e:
            raise self._failure("delete_namespace", name, e) from e

        self._probe.namespace_deletion_requested(name=name)

    async def create_quota(self, namespace: str, spec: ResourceQuotaSpec) -> None:
        await self._create(
            operation="create_quota",
            kind="ResourceQuota",
            name=spec.name,
            namespace=namespace,
            call=lambda: self._core.create_namespaced_resource_quota(
                namespace=namespace, body=spec.to_manifest()
            ),
        )

    async def create_limit_range(self, namespace: str, spec: LimitRangeSpec) -> None:
        await self._create(
            operation="create_limit_range",
            kind="LimitRange",
            name=spec.name,
            namespace=namespace,
            call=lambda: self._core.create_namespaced_limit_range(
                namespace=namespace, body=spec.to_manifest()
            ),
        )

    async def create_network_policy(
        self, namespace: str, spec: NetworkPolicySpec
    ) -> None:
        await self._create(
            operation="create_network_policy",
            kind="NetworkPolicy",
            name=spec.name,
            namespace=namespace,
            call=lambda: self._networking.create_namespaced_network_policy(
                namespace=namespace, body=spec.to_manifest()
            ),
        )

    async def _create(
        self,
        operation: str,
        kind: str,
        name: str,
        namespace: str | None,
        call: Callable[[], Awaitable[Any]],
    ) -> None:
        """Run a create call, resolving conflicts as success."""
        try:
            await call()
        except ApiException as e:
            if e.status == HTTP_CONFLICT:
                self._probe.resource_already_exists(
                    kind=kind, name=name, namespace=namespace
                )
                return
            raise self._failure(operation, name, e) from e

        self._probe.resource_created(kind=kind, name=name, namespace=namespace)

    def _failure(
        self, operation: str, name: str, error: ApiException
    ) -> ClusterOperationError:
        self._probe.cluster_call_failed(
            operation=operation,
            name=name,
            status=error.status,
            reason=error.reason,
        )
        return ClusterOperationError(
            operation=operation,
            status=error.status,
            reason=error.reason,
            body=_body_text(error.body),
        )


def _body_text(body: Any) -> str | None:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        return body
    return None
