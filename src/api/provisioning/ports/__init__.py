"""Ports for the provisioning bounded context.

Protocols define the cluster, release tool and registry boundaries the
application layer depends on. Concrete adapters live in
provisioning.infrastructure.
"""

from provisioning.ports.cluster import ClusterResourceClient
from provisioning.ports.registry import TenantRegistry, TenantStatusWriter
from provisioning.ports.releases import ReleaseManager, ReleaseParams, ReleaseResult

__all__ = [
    "ClusterResourceClient",
    "ReleaseManager",
    "ReleaseParams",
    "ReleaseResult",
    "TenantRegistry",
    "TenantStatusWriter",
]
