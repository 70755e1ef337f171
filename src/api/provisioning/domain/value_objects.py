"""Value objects for the provisioning domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for tenant identifiers, kinds and lifecycle status.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from uuid import uuid4

# Namespace names are DNS labels (max 63 chars); the "tenant-" prefix uses 7.
_TENANT_ID_PATTERN = re.compile(r"^[a-z0-9]{1,56}$")
_DNS_LABEL_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_DNS_LABEL_MAX_LENGTH = 63

RESOURCE_NAME_PREFIX = "tenant-"


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant.

    Short opaque identifier from which every cluster-side resource name is
    derived. The derivation is a pure prefixing, so distinct ids always map
    to distinct namespaces.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new short TenantId (8 lowercase hex characters)."""
        return cls(value=uuid4().hex[:8])

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Args:
            value: Lowercase alphanumeric identifier

        Returns:
            TenantId instance

        Raises:
            ValueError: If value cannot be used to derive a namespace name
        """
        if not _TENANT_ID_PATTERN.match(value):
            raise ValueError(f"Invalid TenantId: {value!r}")

        return cls(value=value)

    @property
    def namespace_name(self) -> str:
        """Name of the namespace dedicated to this tenant."""
        return f"{RESOURCE_NAME_PREFIX}{self.value}"

    @property
    def release_name(self) -> str:
        """Name of the tenant's release (equal to the namespace name)."""
        return self.namespace_name


def is_dns_label(value: str) -> bool:
    """Check that a value is usable as a DNS label (RFC 1123)."""
    return len(value) <= _DNS_LABEL_MAX_LENGTH and bool(
        _DNS_LABEL_PATTERN.match(value)
    )


class TenantKind(StrEnum):
    """Application template deployed for a tenant."""

    WOOCOMMERCE = "woocommerce"
    MEDUSA_STUB = "medusa-stub"


class TenantStatus(StrEnum):
    """Lifecycle status of a tenant.

    There is no terminal "deleted" status: once deprovisioning completes
    the registry record is erased.
    """

    PROVISIONING = "PROVISIONING"
    READY = "READY"
    FAILED = "FAILED"
    DELETING = "DELETING"

    def can_transition_to(self, target: TenantStatus) -> bool:
        """Check whether moving from this status to ``target`` is allowed."""
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[TenantStatus, frozenset[TenantStatus]] = {
    TenantStatus.PROVISIONING: frozenset(
        {TenantStatus.READY, TenantStatus.FAILED, TenantStatus.DELETING}
    ),
    TenantStatus.READY: frozenset({TenantStatus.DELETING}),
    # A failed tenant is recovered only by re-triggering provisioning.
    TenantStatus.FAILED: frozenset({TenantStatus.DELETING, TenantStatus.PROVISIONING}),
    TenantStatus.DELETING: frozenset(),
}
