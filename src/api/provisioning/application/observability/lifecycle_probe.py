"""Protocol for tenant lifecycle orchestrator observability.

Defines the interface for domain probes that capture the progress and
outcome of provisioning and deprovisioning workflows. The failing step's
diagnostics are only ever visible through these events, so they carry
the captured status and output in full.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class LifecycleProbe(Protocol):
    """Domain probe for tenant lifecycle workflows."""

    def provisioning_started(self, tenant_id: str, namespace: str) -> None:
        """Record that a provisioning workflow started."""
        ...

    def step_started(self, tenant_id: str, step: str) -> None:
        """Record that a workflow step started."""
        ...

    def provisioning_step_failed(
        self,
        tenant_id: str,
        step: str,
        message: str,
        status: int | None,
        output: str | None,
    ) -> None:
        """Record the diagnostics of the step that aborted provisioning."""
        ...

    def provisioning_succeeded(self, tenant_id: str, url: str) -> None:
        """Record that a tenant was provisioned and is ready."""
        ...

    def provisioning_failed(self, tenant_id: str, failed_step: str) -> None:
        """Record that a tenant was marked FAILED."""
        ...

    def deprovisioning_started(self, tenant_id: str, namespace: str) -> None:
        """Record that a deprovisioning workflow started."""
        ...

    def deprovisioning_step_warning(
        self,
        tenant_id: str,
        step: str,
        message: str,
        status: int | None,
        output: str | None,
    ) -> None:
        """Record a cleanup step that failed without aborting deprovisioning."""
        ...

    def deprovisioning_completed(self, tenant_id: str, warning_count: int) -> None:
        """Record that the tenant record was removed."""
        ...

    def with_context(self, context: ObservationContext) -> LifecycleProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultLifecycleProbe:
    """Default implementation of LifecycleProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultLifecycleProbe:
        """Create a new probe with observation context bound."""
        return DefaultLifecycleProbe(logger=self._logger, context=context)

    def provisioning_started(self, tenant_id: str, namespace: str) -> None:
        self._logger.info(
            "tenant_provisioning_started",
            tenant_id=tenant_id,
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def step_started(self, tenant_id: str, step: str) -> None:
        self._logger.debug(
            "lifecycle_step_started",
            tenant_id=tenant_id,
            step=step,
            **self._get_context_kwargs(),
        )

    def provisioning_step_failed(
        self,
        tenant_id: str,
        step: str,
        message: str,
        status: int | None,
        output: str | None,
    ) -> None:
        self._logger.error(
            "provisioning_step_failed",
            tenant_id=tenant_id,
            step=step,
            message=message,
            status=status,
            output=output,
            **self._get_context_kwargs(),
        )

    def provisioning_succeeded(self, tenant_id: str, url: str) -> None:
        self._logger.info(
            "tenant_provisioning_succeeded",
            tenant_id=tenant_id,
            url=url,
            **self._get_context_kwargs(),
        )

    def provisioning_failed(self, tenant_id: str, failed_step: str) -> None:
        self._logger.error(
            "tenant_provisioning_failed",
            tenant_id=tenant_id,
            failed_step=failed_step,
            **self._get_context_kwargs(),
        )

    def deprovisioning_started(self, tenant_id: str, namespace: str) -> None:
        self._logger.info(
            "tenant_deprovisioning_started",
            tenant_id=tenant_id,
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def deprovisioning_step_warning(
        self,
        tenant_id: str,
        step: str,
        message: str,
        status: int | None,
        output: str | None,
    ) -> None:
        self._logger.warning(
            "deprovisioning_step_warning",
            tenant_id=tenant_id,
            step=step,
            message=message,
            status=status,
            output=output,
            **self._get_context_kwargs(),
        )

    def deprovisioning_completed(self, tenant_id: str, warning_count: int) -> None:
        self._logger.info(
            "tenant_deprovisioning_completed",
            tenant_id=tenant_id,
            warning_count=warning_count,
            **self._get_context_kwargs(),
        )
