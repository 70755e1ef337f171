"""Unit test fixtures with mocked dependencies."""

from datetime import UTC, datetime

import pytest

from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantId, TenantKind, TenantStatus


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def provisioning_tenant() -> Tenant:
    """A woocommerce tenant awaiting provisioning."""
    return Tenant(
        id=TenantId(value="ab12cd34"),
        name="acme-shop",
        kind=TenantKind.WOOCOMMERCE,
        status=TenantStatus.PROVISIONING,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def ready_tenant() -> Tenant:
    """A provisioned woocommerce tenant."""
    return Tenant(
        id=TenantId(value="ab12cd34"),
        name="acme-shop",
        kind=TenantKind.WOOCOMMERCE,
        status=TenantStatus.READY,
        url="http://acme-shop.localtest.me",
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def failed_tenant() -> Tenant:
    """A woocommerce tenant whose provisioning failed."""
    return Tenant(
        id=TenantId(value="ab12cd34"),
        name="acme-shop",
        kind=TenantKind.WOOCOMMERCE,
        status=TenantStatus.FAILED,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )
