"""Exceptions raised across the provisioning ports.

Cluster failures surface as ClusterOperationError so callers can
inspect the underlying HTTP status and message. Registry and trigger
errors are handled by the application and presentation layers.
"""

from __future__ import annotations


class ProvisioningError(Exception):
    """Base exception for provisioning errors."""

    pass


class ClusterOperationError(ProvisioningError):
    """Raised when a cluster API call fails for a reason other than a conflict.

    Attributes:
        operation: Name of the client operation (e.g. "create_namespace")
        status: HTTP status returned by the control plane, if any
        reason: Short reason phrase returned by the control plane
        body: Raw response body, kept for diagnostics
    """

    def __init__(
        self,
        operation: str,
        status: int | None,
        reason: str | None = None,
        body: str | None = None,
    ):
        self.operation = operation
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(f"{operation} failed ({status} {reason})")


class TenantNotFoundError(ProvisioningError):
    """Raised when a tenant record does not exist in the registry."""

    pass


class DuplicateTenantNameError(ProvisioningError):
    """Raised when a tenant name is already in use.

    Hostnames are derived from tenant names, so names must be unique.
    """

    pass


class TenantCapacityReachedError(ProvisioningError):
    """Raised when the platform-wide tenant count guardrail is reached."""

    def __init__(self, max_tenants: int):
        self.max_tenants = max_tenants
        super().__init__(
            f"Platform capacity reached ({max_tenants} tenants). "
            "Delete a tenant to create a new one."
        )


class TenantBusyError(ProvisioningError):
    """Raised when a lifecycle call targets a tenant with a workflow in flight.

    Lifecycle calls for one tenant must be serialized; concurrent
    provision/deprovision runs would interleave cluster operations.
    """

    pass
