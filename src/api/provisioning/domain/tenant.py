"""Tenant aggregate for the provisioning context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from provisioning.domain.exceptions import (
    InvalidStatusTransitionError,
    InvalidTenantError,
)
from provisioning.domain.value_objects import (
    TenantId,
    TenantKind,
    TenantStatus,
    is_dns_label,
)


@dataclass
class Tenant:
    """Tenant aggregate representing one isolated store instance.

    Each tenant maps 1:1 to a cluster namespace named after its id and
    is served under a hostname derived from its name.

    Business rules:
    - The name must be a DNS label (it becomes part of the hostname)
    - The url is only set once provisioning succeeded
    - Status changes follow TenantStatus.can_transition_to
    """

    id: TenantId
    name: str
    kind: TenantKind
    status: TenantStatus = TenantStatus.PROVISIONING
    url: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str, kind: str | TenantKind) -> Tenant:
        """Factory method for creating a new tenant awaiting provisioning.

        Args:
            name: DNS-label safe display name
            kind: Application template to deploy

        Returns:
            A new Tenant in PROVISIONING status

        Raises:
            InvalidTenantError: If the name or kind is invalid
        """
        if not is_dns_label(name):
            raise InvalidTenantError(
                f"Tenant name {name!r} must be a lowercase DNS label "
                "(letters, digits and '-', at most 63 characters)"
            )

        try:
            tenant_kind = TenantKind(kind)
        except ValueError as e:
            raise InvalidTenantError(f"Unknown tenant kind: {kind!r}") from e

        return cls(
            id=TenantId.generate(),
            name=name,
            kind=tenant_kind,
        )

    @property
    def namespace_name(self) -> str:
        return self.id.namespace_name

    @property
    def release_name(self) -> str:
        return self.id.release_name

    def hostname(self, base_domain: str) -> str:
        """Public hostname for this tenant under ``base_domain``."""
        return f"{self.name}.{base_domain}"

    def public_url(self, base_domain: str) -> str:
        """URL recorded once the tenant is ready."""
        return f"http://{self.hostname(base_domain)}"

    def transition_to(self, target: TenantStatus) -> None:
        """Move to ``target`` status, enforcing the lifecycle.

        Raises:
            InvalidStatusTransitionError: If the transition is not allowed
        """
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransitionError(self.status.value, target.value)
        self.status = target

    def mark_ready(self, url: str) -> None:
        self.transition_to(TenantStatus.READY)
        self.url = url

    def mark_failed(self) -> None:
        self.transition_to(TenantStatus.FAILED)
        self.url = None

    def mark_deleting(self) -> None:
        self.transition_to(TenantStatus.DELETING)

    def mark_reprovisioning(self) -> None:
        self.transition_to(TenantStatus.PROVISIONING)
        self.url = None
