"""Cluster resource client protocol (port).

Defines the cluster operations the lifecycle orchestrator depends on,
allowing the Kubernetes implementation to be replaced by fakes in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from provisioning.domain.templates import (
    LimitRangeSpec,
    NetworkPolicySpec,
    ResourceQuotaSpec,
)


@runtime_checkable
class ClusterResourceClient(Protocol):
    """Idempotent-aware access to the cluster control plane.

    Create operations resolve successfully when the resource already
    exists. Every other failure raises ClusterOperationError carrying the
    control plane's status and message.
    """

    async def create_namespace(
        self, name: str, labels: dict[str, str] | None = None
    ) -> None:
        """Create a namespace.

        Raises:
            ClusterOperationError: On any failure other than a conflict
        """
        ...

    async def delete_namespace(self, name: str) -> None:
        """Delete a namespace and, by cascade, everything inside it.

        Raises:
            ClusterOperationError: If the deletion request fails
        """
        ...

    async def create_quota(self, namespace: str, spec: ResourceQuotaSpec) -> None:
        """Create a resource quota in a namespace."""
        ...

    async def create_limit_range(self, namespace: str, spec: LimitRangeSpec) -> None:
        """Create a limit range in a namespace."""
        ...

    async def create_network_policy(
        self, namespace: str, spec: NetworkPolicySpec
    ) -> None:
        """Create a network policy in a namespace."""
        ...
