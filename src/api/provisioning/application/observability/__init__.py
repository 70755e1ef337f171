"""Domain-Oriented Observability for the provisioning application layer."""

from provisioning.application.observability.dispatcher_probe import (
    DefaultDispatcherProbe,
    DispatcherProbe,
)
from provisioning.application.observability.lifecycle_probe import (
    DefaultLifecycleProbe,
    LifecycleProbe,
)
from provisioning.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "DispatcherProbe",
    "DefaultDispatcherProbe",
    "LifecycleProbe",
    "DefaultLifecycleProbe",
    "TenantServiceProbe",
    "DefaultTenantServiceProbe",
]
