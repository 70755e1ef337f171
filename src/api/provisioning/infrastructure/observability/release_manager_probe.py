"""Protocol for release manager observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ReleaseManagerProbe(Protocol):
    """Domain probe for release tool invocations."""

    def release_command_started(
        self, action: str, release_name: str, namespace: str
    ) -> None:
        """Record that a release command was started."""
        ...

    def release_command_succeeded(
        self, action: str, release_name: str, namespace: str
    ) -> None:
        """Record that a release command exited successfully."""
        ...

    def release_command_failed(
        self,
        action: str,
        release_name: str,
        namespace: str,
        exit_code: int | None,
        stderr: str,
    ) -> None:
        """Record that a release command exited with an error."""
        ...

    def release_command_timed_out(
        self, action: str, release_name: str, timeout_seconds: float
    ) -> None:
        """Record that a release command was killed after its timeout."""
        ...

    def with_context(self, context: ObservationContext) -> ReleaseManagerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultReleaseManagerProbe:
    """Default implementation of ReleaseManagerProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultReleaseManagerProbe:
        """Create a new probe with observation context bound."""
        return DefaultReleaseManagerProbe(logger=self._logger, context=context)

    def release_command_started(
        self, action: str, release_name: str, namespace: str
    ) -> None:
        self._logger.info(
            "helm_command_started",
            action=action,
            release_name=release_name,
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def release_command_succeeded(
        self, action: str, release_name: str, namespace: str
    ) -> None:
        self._logger.info(
            "helm_command_succeeded",
            action=action,
            release_name=release_name,
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def release_command_failed(
        self,
        action: str,
        release_name: str,
        namespace: str,
        exit_code: int | None,
        stderr: str,
    ) -> None:
        self._logger.warning(
            "helm_command_failed",
            action=action,
            release_name=release_name,
            namespace=namespace,
            exit_code=exit_code,
            stderr=stderr,
            **self._get_context_kwargs(),
        )

    def release_command_timed_out(
        self, action: str, release_name: str, timeout_seconds: float
    ) -> None:
        self._logger.error(
            "helm_command_timed_out",
            action=action,
            release_name=release_name,
            timeout_seconds=timeout_seconds,
            **self._get_context_kwargs(),
        )
