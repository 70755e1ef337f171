"""Provisioning domain: tenants, lifecycle status and resource templates."""

from provisioning.domain.exceptions import (
    InvalidStatusTransitionError,
    InvalidTenantError,
)
from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantId, TenantKind, TenantStatus

__all__ = [
    "InvalidStatusTransitionError",
    "InvalidTenantError",
    "Tenant",
    "TenantId",
    "TenantKind",
    "TenantStatus",
]
