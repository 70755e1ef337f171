"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI

from infrastructure.database import close_database_connections, get_session_factory
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_provisioning_settings, get_settings
from infrastructure.version import __version__
from provisioning.application import (
    LifecycleDispatcher,
    TenantLifecycleOrchestrator,
    TenantService,
)
from provisioning.dependencies import (
    get_lifecycle_dispatcher,
    set_provisioning_services,
)
from provisioning.domain.templates import build_release_templates
from provisioning.infrastructure.helm_release_manager import HelmReleaseManager
from provisioning.infrastructure.kubernetes_client import KubernetesResourceClient
from provisioning.infrastructure.tenant_registry import SqlAlchemyTenantRegistry
from provisioning.presentation import router as provisioning_router

configure_logging(debug=get_settings().debug)


@asynccontextmanager
async def storefleet_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Cluster client and tenant service wiring
    - Draining in-flight lifecycle workflows on shutdown
    - Database engine disposal
    """
    settings = get_settings()
    provisioning = get_provisioning_settings()
    probe = DefaultStartupProbe()
    probe.application_starting(app_name=settings.app_name, version=__version__)

    registry = SqlAlchemyTenantRegistry(session_factory=get_session_factory())
    cluster = await KubernetesResourceClient.connect(provisioning)
    probe.cluster_client_connected(
        in_cluster=provisioning.kube_in_cluster,
        context=provisioning.kube_context,
    )

    orchestrator = TenantLifecycleOrchestrator(
        cluster=cluster,
        releases=HelmReleaseManager.from_settings(provisioning),
        registry=registry,
        release_templates=build_release_templates(
            woocommerce_chart=provisioning.woocommerce_chart,
            medusa_chart=provisioning.medusa_chart,
        ),
        base_domain=provisioning.base_domain,
        release_timeout_seconds=provisioning.release_timeout_seconds,
    )
    dispatcher = LifecycleDispatcher(orchestrator)
    service = TenantService(
        registry=registry,
        dispatcher=dispatcher,
        max_tenants=settings.max_tenants,
    )
    set_provisioning_services(service, dispatcher)

    try:
        yield
    finally:
        # Workflows are never cancelled mid-step; wait for them instead.
        probe.application_stopping(in_flight=dispatcher.in_flight)
        await dispatcher.drain()
        set_provisioning_services(None, None)
        await cluster.close()
        await close_database_connections()
        probe.application_stopped()


app = FastAPI(
    title="Storefleet API",
    description="Per-tenant store provisioning on Kubernetes",
    version=__version__,
    lifespan=storefleet_lifespan,
)

app.include_router(provisioning_router)


@app.get("/health")
def health(
    dispatcher: Annotated[LifecycleDispatcher, Depends(get_lifecycle_dispatcher)],
) -> dict:
    """Basic health check endpoint.

    Also reports how many lifecycle workflows are running.
    """
    return {"status": "ok", "in_flight": dispatcher.in_flight}
