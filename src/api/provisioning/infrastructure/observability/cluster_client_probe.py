"""Protocol for cluster resource client observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ClusterClientProbe(Protocol):
    """Domain probe for cluster API operations."""

    def resource_created(self, kind: str, name: str, namespace: str | None) -> None:
        """Record that a cluster resource was created."""
        ...

    def resource_already_exists(
        self, kind: str, name: str, namespace: str | None
    ) -> None:
        """Record that a create call hit an existing resource."""
        ...

    def namespace_deletion_requested(self, name: str) -> None:
        """Record that a namespace deletion was accepted."""
        ...

    def cluster_call_failed(
        self,
        operation: str,
        name: str,
        status: int | None,
        reason: str | None,
    ) -> None:
        """Record that a cluster API call failed."""
        ...

    def with_context(self, context: ObservationContext) -> ClusterClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultClusterClientProbe:
    """Default implementation of ClusterClientProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultClusterClientProbe:
        """Create a new probe with observation context bound."""
        return DefaultClusterClientProbe(logger=self._logger, context=context)

    def resource_created(self, kind: str, name: str, namespace: str | None) -> None:
        """Record that a cluster resource was created."""
        self._logger.info(
            "cluster_resource_created",
            kind=kind,
            name=name,
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def resource_already_exists(
        self, kind: str, name: str, namespace: str | None
    ) -> None:
        """Record that a create call hit an existing resource."""
        self._logger.info(
            "cluster_resource_already_exists",
            kind=kind,
            name=name,
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def namespace_deletion_requested(self, name: str) -> None:
        """Record that a namespace deletion was accepted."""
        self._logger.info(
            "cluster_namespace_deletion_requested",
            name=name,
            **self._get_context_kwargs(),
        )

    def cluster_call_failed(
        self,
        operation: str,
        name: str,
        status: int | None,
        reason: str | None,
    ) -> None:
        """Record that a cluster API call failed."""
        self._logger.warning(
            "cluster_call_failed",
            operation=operation,
            name=name,
            status=status,
            reason=reason,
            **self._get_context_kwargs(),
        )
