"""Protocol for tenant registry observability."""

from __future__ import annotations

from typing import Protocol

import structlog


class TenantRegistryProbe(Protocol):
    """Domain probe for tenant registry operations."""

    def tenant_added(self, tenant_id: str, name: str) -> None: ...

    def tenant_status_updated(self, tenant_id: str, status: str) -> None: ...

    def tenant_record_deleted(self, tenant_id: str) -> None: ...

    def tenant_record_missing(self, tenant_id: str, operation: str) -> None: ...

    def duplicate_tenant_name(self, name: str) -> None: ...


class DefaultTenantRegistryProbe:
    """Default implementation of TenantRegistryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def tenant_added(self, tenant_id: str, name: str) -> None:
        self._logger.debug("tenant_record_added", tenant_id=tenant_id, name=name)

    def tenant_status_updated(self, tenant_id: str, status: str) -> None:
        self._logger.debug(
            "tenant_status_updated", tenant_id=tenant_id, status=status
        )

    def tenant_record_deleted(self, tenant_id: str) -> None:
        self._logger.debug("tenant_record_deleted", tenant_id=tenant_id)

    def tenant_record_missing(self, tenant_id: str, operation: str) -> None:
        self._logger.warning(
            "tenant_record_missing", tenant_id=tenant_id, operation=operation
        )

    def duplicate_tenant_name(self, name: str) -> None:
        self._logger.warning("duplicate_tenant_name", name=name)
