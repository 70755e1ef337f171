"""Dependency injection for the provisioning bounded context.

The tenant service owns long-lived collaborators (cluster client,
background dispatcher), so it is built once during application startup
and cached here rather than per request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from provisioning.application.dispatcher import LifecycleDispatcher
    from provisioning.application.tenant_service import TenantService

# Module-level instances (populated at startup)
_tenant_service: TenantService | None = None
_dispatcher: LifecycleDispatcher | None = None


def set_provisioning_services(
    tenant_service: TenantService | None,
    dispatcher: LifecycleDispatcher | None,
) -> None:
    """Set the application-scoped services (called during app startup).

    Passing None clears them again on shutdown.
    """
    global _tenant_service, _dispatcher
    _tenant_service = tenant_service
    _dispatcher = dispatcher


def get_tenant_service() -> TenantService:
    """Get the application-scoped TenantService.

    Raises:
        RuntimeError: If the service hasn't been initialized
    """
    if _tenant_service is None:
        raise RuntimeError(
            "Tenant service not initialized. Ensure app startup completed successfully."
        )
    return _tenant_service


def get_lifecycle_dispatcher() -> LifecycleDispatcher:
    """Get the application-scoped LifecycleDispatcher.

    Raises:
        RuntimeError: If the dispatcher hasn't been initialized
    """
    if _dispatcher is None:
        raise RuntimeError(
            "Lifecycle dispatcher not initialized. "
            "Ensure app startup completed successfully."
        )
    return _dispatcher
