"""HTTP routes for tenant lifecycle management.

Lifecycle endpoints only accept the request: provisioning and
deprovisioning continue in the background and are observed by polling
the tenant's status.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from provisioning.application.tenant_service import TenantService
from provisioning.dependencies import get_tenant_service
from provisioning.domain.exceptions import (
    InvalidStatusTransitionError,
    InvalidTenantError,
)
from provisioning.domain.value_objects import TenantId
from provisioning.ports.exceptions import (
    DuplicateTenantNameError,
    TenantBusyError,
    TenantCapacityReachedError,
    TenantNotFoundError,
)
from provisioning.presentation.tenants.models import (
    CreateTenantRequest,
    LifecycleAcceptedResponse,
    TenantResponse,
)

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


def _parse_tenant_id(tenant_id: str) -> TenantId:
    """Parse a path tenant ID; malformed IDs cannot name an existing tenant."""
    try:
        return TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {tenant_id} not found",
        ) from e


@router.get("")
async def list_tenants(
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> list[TenantResponse]:
    """List all tenants, newest first."""
    tenants = await service.list_tenants()
    return [TenantResponse.from_domain(t) for t in tenants]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Tenant name already in use"},
        422: {"description": "Invalid name or kind"},
        429: {"description": "Platform tenant capacity reached"},
    },
)
async def create_tenant(
    request: CreateTenantRequest,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Create a tenant and start provisioning it.

    The response is returned as soon as the tenant record exists; its
    status is PROVISIONING until the background workflow finishes.

    Args:
        request: Tenant creation request (name, kind)
        service: Tenant service

    Returns:
        TenantResponse with the created tenant

    Raises:
        HTTPException: 409 if the name is already in use
        HTTPException: 422 if the name or kind is invalid
        HTTPException: 429 if the tenant capacity is reached
    """
    try:
        tenant = await service.create_tenant(name=request.name, kind=request.kind)
        return TenantResponse.from_domain(tenant)

    except InvalidTenantError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(e),
        ) from e
    except DuplicateTenantNameError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A tenant with this name already exists",
        ) from e
    except TenantCapacityReachedError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
        ) from e


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Get tenant by ID.

    Raises:
        HTTPException: 404 if the tenant does not exist
    """
    tenant = await service.get_tenant(_parse_tenant_id(tenant_id))
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {tenant_id} not found",
        )
    return TenantResponse.from_domain(tenant)


@router.delete(
    "/{tenant_id}",
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        202: {"description": "Deletion started"},
        404: {"description": "Tenant not found"},
        409: {"description": "A lifecycle operation is already in progress"},
    },
)
async def delete_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> LifecycleAcceptedResponse:
    """Start deprovisioning a tenant.

    The tenant is marked DELETING immediately and its record disappears
    once the cluster cleanup finished.

    Raises:
        HTTPException: 404 if the tenant does not exist
        HTTPException: 409 if a lifecycle operation is in progress
    """
    try:
        await service.delete_tenant(_parse_tenant_id(tenant_id))
        return LifecycleAcceptedResponse(message="Deletion started")

    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {tenant_id} not found",
        ) from e
    except TenantBusyError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e


@router.post(
    "/{tenant_id}/reprovision",
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        404: {"description": "Tenant not found"},
        409: {"description": "Tenant is busy or not FAILED"},
    },
)
async def reprovision_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Re-run provisioning for a FAILED tenant.

    Raises:
        HTTPException: 404 if the tenant does not exist
        HTTPException: 409 if the tenant is busy or not FAILED
    """
    try:
        tenant = await service.reprovision_tenant(_parse_tenant_id(tenant_id))
        return TenantResponse.from_domain(tenant)

    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {tenant_id} not found",
        ) from e
    except (TenantBusyError, InvalidStatusTransitionError) as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
