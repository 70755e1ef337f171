"""Observability probes for the lifecycle dispatcher."""

from __future__ import annotations

from typing import Protocol

import structlog

logger = structlog.get_logger()


class DispatcherProbe(Protocol):
    """Protocol for lifecycle task observability."""

    def task_submitted(self, tenant_id: str, workflow: str, in_flight: int) -> None:
        """Called when a lifecycle workflow task is created."""
        ...

    def task_completed(self, tenant_id: str, workflow: str) -> None:
        """Called when a lifecycle workflow task finishes."""
        ...

    def task_crashed(self, tenant_id: str, workflow: str, error: str) -> None:
        """Called when a lifecycle workflow task raises.

        Workflows report step failures through the registry, so a crash
        means the registry write itself failed or a bug escaped.
        """
        ...

    def drain_started(self, in_flight: int) -> None:
        """Called when the dispatcher waits for in-flight tasks."""
        ...


class DefaultDispatcherProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="lifecycle_dispatcher")

    def task_submitted(self, tenant_id: str, workflow: str, in_flight: int) -> None:
        self._log.info(
            "lifecycle_task_submitted",
            tenant_id=tenant_id,
            workflow=workflow,
            in_flight=in_flight,
        )

    def task_completed(self, tenant_id: str, workflow: str) -> None:
        self._log.info(
            "lifecycle_task_completed", tenant_id=tenant_id, workflow=workflow
        )

    def task_crashed(self, tenant_id: str, workflow: str, error: str) -> None:
        self._log.error(
            "lifecycle_task_crashed",
            tenant_id=tenant_id,
            workflow=workflow,
            error=error,
        )

    def drain_started(self, in_flight: int) -> None:
        if in_flight > 0:
            self._log.info("lifecycle_dispatcher_draining", in_flight=in_flight)
