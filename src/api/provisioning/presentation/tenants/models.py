"""Pydantic models for tenant API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantKind, TenantStatus


class CreateTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    name: str = Field(
        ...,
        description="Tenant name, used as the store's hostname label",
        min_length=1,
        max_length=63,
        pattern=r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$",
    )
    kind: TenantKind = Field(..., description="Store application to deploy")


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID")
    name: str = Field(..., description="Tenant name")
    kind: TenantKind = Field(..., description="Store application")
    status: TenantStatus = Field(..., description="Lifecycle status")
    url: str | None = Field(None, description="Store URL once READY")
    created_at: datetime = Field(..., description="Creation timestamp")

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response.

        Args:
            tenant: Tenant domain aggregate

        Returns:
            TenantResponse
        """
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            kind=tenant.kind,
            status=tenant.status,
            url=tenant.url,
            created_at=tenant.created_at,
        )


class LifecycleAcceptedResponse(BaseModel):
    """Response model for an accepted background lifecycle operation."""

    message: str = Field(..., description="Human-readable acknowledgement")
