"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events. This enables correlation
    of a lifecycle workflow's events with the request that triggered it.

    Attributes:
        request_id: Unique identifier for the triggering request (if applicable).
        tenant_id: Tenant the events relate to (if applicable).
        workflow: Lifecycle workflow name, "provision" or "deprovision".
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(tenant_id="ab12cd34", workflow="provision")
        probe = DefaultLifecycleProbe().with_context(context)
    """

    request_id: str | None = None
    tenant_id: str | None = None
    workflow: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        if self.workflow is not None:
            result["workflow"] = self.workflow
        result.update(self.extra)
        return result

    def with_workflow(self, workflow: str) -> ObservationContext:
        """Create a new context with the workflow name set."""
        return ObservationContext(
            request_id=self.request_id,
            tenant_id=self.tenant_id,
            workflow=workflow,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        new_extra = {**self.extra, **kwargs}
        return ObservationContext(
            request_id=self.request_id,
            tenant_id=self.tenant_id,
            workflow=self.workflow,
            extra=new_extra,
        )
