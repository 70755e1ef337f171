"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application lifespan started."""
        ...

    def cluster_client_connected(self, in_cluster: bool, context: str | None) -> None:
        """Record that cluster credentials were loaded."""
        ...

    def application_stopping(self, in_flight: int) -> None:
        """Record that shutdown started, with the workflows still running."""
        ...

    def application_stopped(self) -> None:
        """Record that every resource was released."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application lifespan started."""
        self._logger.info(
            "application_starting",
            app_name=app_name,
            version=version,
            **self._get_context_kwargs(),
        )

    def cluster_client_connected(self, in_cluster: bool, context: str | None) -> None:
        """Record that cluster credentials were loaded."""
        self._logger.info(
            "cluster_client_connected",
            in_cluster=in_cluster,
            kube_context=context,
            **self._get_context_kwargs(),
        )

    def application_stopping(self, in_flight: int) -> None:
        """Record that shutdown started."""
        self._logger.info(
            "application_stopping",
            in_flight=in_flight,
            **self._get_context_kwargs(),
        )

    def application_stopped(self) -> None:
        """Record that every resource was released."""
        self._logger.info("application_stopped", **self._get_context_kwargs())
