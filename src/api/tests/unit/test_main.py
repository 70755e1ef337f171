"""Unit tests for main FastAPI application wiring."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def mock_dispatcher() -> MagicMock:
    """Dispatcher reporting two running workflows."""
    dispatcher = MagicMock()
    dispatcher.in_flight = 2
    return dispatcher


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_reports_in_flight_workflows(self, mock_dispatcher: MagicMock) -> None:
        from main import app
        from provisioning.dependencies import get_lifecycle_dispatcher

        app.dependency_overrides[get_lifecycle_dispatcher] = lambda: mock_dispatcher
        try:
            response = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "in_flight": 2}


class TestApplicationRoutes:
    """Tests for router registration."""

    def test_tenant_routes_are_registered(self) -> None:
        from main import app

        paths = {route.path for route in app.routes}

        assert "/api/tenants" in paths
        assert "/api/tenants/{tenant_id}" in paths
        assert "/api/tenants/{tenant_id}/reprovision" in paths
        assert "/health" in paths


class TestStorefleetLifespan:
    """Tests for startup wiring and shutdown ordering."""

    @pytest.mark.asyncio
    async def test_wires_services_and_releases_resources(self) -> None:
        from main import storefleet_lifespan
        from provisioning.application import TenantService
        from provisioning.dependencies import (
            get_lifecycle_dispatcher,
            get_tenant_service,
        )

        cluster = MagicMock()
        cluster.close = AsyncMock()
        close_db = AsyncMock()

        with (
            patch("main.get_session_factory", return_value=MagicMock()),
            patch("main.KubernetesResourceClient") as client_cls,
            patch("main.close_database_connections", close_db),
        ):
            client_cls.connect = AsyncMock(return_value=cluster)

            async with storefleet_lifespan(FastAPI()):
                assert isinstance(get_tenant_service(), TenantService)
                assert get_lifecycle_dispatcher().in_flight == 0

        client_cls.connect.assert_awaited_once()
        cluster.close.assert_awaited_once()
        close_db.assert_awaited_once()

        with pytest.raises(RuntimeError):
            get_tenant_service()
        with pytest.raises(RuntimeError):
            get_lifecycle_dispatcher()
