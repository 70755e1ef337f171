"""Unit tests for the Tenant aggregate."""

import pytest

from provisioning.domain.exceptions import (
    InvalidStatusTransitionError,
    InvalidTenantError,
)
from provisioning.domain.tenant import Tenant
from provisioning.domain.value_objects import TenantKind, TenantStatus


class TestTenantCreation:
    """Tests for Tenant.create factory."""

    def test_create_starts_provisioning_without_url(self):
        tenant = Tenant.create(name="acme-shop", kind="woocommerce")

        assert tenant.name == "acme-shop"
        assert tenant.kind is TenantKind.WOOCOMMERCE
        assert tenant.status is TenantStatus.PROVISIONING
        assert tenant.url is None
        assert tenant.created_at.tzinfo is not None

    def test_create_accepts_enum_kind(self):
        tenant = Tenant.create(name="acme-shop", kind=TenantKind.MEDUSA_STUB)
        assert tenant.kind is TenantKind.MEDUSA_STUB

    def test_create_generates_distinct_ids(self):
        first = Tenant.create(name="one", kind="woocommerce")
        second = Tenant.create(name="two", kind="woocommerce")
        assert first.id != second.id

    @pytest.mark.parametrize("name", ["", "Acme", "acme shop", "-acme", "a" * 64])
    def test_create_rejects_non_dns_names(self, name):
        with pytest.raises(InvalidTenantError):
            Tenant.create(name=name, kind="woocommerce")

    def test_create_rejects_unknown_kind(self):
        with pytest.raises(InvalidTenantError, match="magento"):
            Tenant.create(name="acme-shop", kind="magento")


class TestTenantNaming:
    """Tests for names derived from a tenant."""

    def test_namespace_and_release_names(self, provisioning_tenant):
        assert provisioning_tenant.namespace_name == "tenant-ab12cd34"
        assert provisioning_tenant.release_name == "tenant-ab12cd34"

    def test_hostname(self, provisioning_tenant):
        assert provisioning_tenant.hostname("localtest.me") == "acme-shop.localtest.me"

    def test_public_url(self, provisioning_tenant):
        assert (
            provisioning_tenant.public_url("example.com")
            == "http://acme-shop.example.com"
        )


class TestTenantLifecycle:
    """Tests for status transitions on the aggregate."""

    def test_mark_ready_sets_url(self, provisioning_tenant):
        provisioning_tenant.mark_ready("http://acme-shop.localtest.me")

        assert provisioning_tenant.status is TenantStatus.READY
        assert provisioning_tenant.url == "http://acme-shop.localtest.me"

    def test_mark_failed_clears_url(self, provisioning_tenant):
        provisioning_tenant.mark_failed()

        assert provisioning_tenant.status is TenantStatus.FAILED
        assert provisioning_tenant.url is None

    def test_ready_tenant_can_be_deleted(self, ready_tenant):
        ready_tenant.mark_deleting()
        assert ready_tenant.status is TenantStatus.DELETING

    def test_failed_tenant_can_be_reprovisioned(self, failed_tenant):
        failed_tenant.mark_reprovisioning()
        assert failed_tenant.status is TenantStatus.PROVISIONING
        assert failed_tenant.url is None

    def test_ready_tenant_cannot_be_reprovisioned(self, ready_tenant):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            ready_tenant.mark_reprovisioning()

        assert exc_info.value.current == "READY"
        assert exc_info.value.target == "PROVISIONING"
        assert ready_tenant.status is TenantStatus.READY

    def test_deleting_tenant_cannot_become_ready(self, ready_tenant):
        ready_tenant.mark_deleting()
        with pytest.raises(InvalidStatusTransitionError):
            ready_tenant.mark_ready("http://acme-shop.localtest.me")
