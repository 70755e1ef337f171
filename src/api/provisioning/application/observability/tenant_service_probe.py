"""Protocol for tenant service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant triggering operations."""

    def tenant_created(self, tenant_id: str, name: str, kind: str) -> None:
        """Record that a tenant record was inserted and provisioning submitted."""
        ...

    def duplicate_tenant_name(self, name: str) -> None:
        """Record that a tenant name was already taken."""
        ...

    def capacity_reached(self, max_tenants: int) -> None:
        """Record that tenant creation hit the platform guardrail."""
        ...

    def tenant_deletion_requested(self, tenant_id: str) -> None:
        """Record that deprovisioning was submitted."""
        ...

    def tenant_reprovision_requested(self, tenant_id: str) -> None:
        """Record that a FAILED tenant was resubmitted for provisioning."""
        ...

    def tenant_busy(self, tenant_id: str, operation: str) -> None:
        """Record a lifecycle call rejected because a workflow is in flight."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, name: str, kind: str) -> None:
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            name=name,
            kind=kind,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_name(self, name: str) -> None:
        self._logger.warning(
            "duplicate_tenant_name",
            name=name,
            **self._get_context_kwargs(),
        )

    def capacity_reached(self, max_tenants: int) -> None:
        self._logger.warning(
            "tenant_capacity_reached",
            max_tenants=max_tenants,
            **self._get_context_kwargs(),
        )

    def tenant_deletion_requested(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_deletion_requested",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_reprovision_requested(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_reprovision_requested",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_busy(self, tenant_id: str, operation: str) -> None:
        self._logger.warning(
            "tenant_lifecycle_busy",
            tenant_id=tenant_id,
            operation=operation,
            **self._get_context_kwargs(),
        )
