"""Domain-Oriented Observability for provisioning infrastructure adapters."""

from provisioning.infrastructure.observability.cluster_client_probe import (
    ClusterClientProbe,
    DefaultClusterClientProbe,
)
from provisioning.infrastructure.observability.release_manager_probe import (
    DefaultReleaseManagerProbe,
    ReleaseManagerProbe,
)
from provisioning.infrastructure.observability.tenant_registry_probe import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)

__all__ = [
    "ClusterClientProbe",
    "DefaultClusterClientProbe",
    "ReleaseManagerProbe",
    "DefaultReleaseManagerProbe",
    "TenantRegistryProbe",
    "DefaultTenantRegistryProbe",
]
