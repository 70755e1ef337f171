"""Application layer for the provisioning bounded context.

Contains the lifecycle orchestrator, its workflow driver, the background
dispatcher and the tenant service used by the presentation layer.
"""

from provisioning.application.dispatcher import LifecycleDispatcher
from provisioning.application.orchestrator import (
    TenantLifecycleOrchestrator,
    WorkflowReport,
)
from provisioning.application.tenant_service import TenantService
from provisioning.application.workflow import (
    Diagnostic,
    FailurePolicy,
    Step,
    StepResult,
    run_workflow,
)

__all__ = [
    "Diagnostic",
    "FailurePolicy",
    "LifecycleDispatcher",
    "Step",
    "StepResult",
    "TenantLifecycleOrchestrator",
    "TenantService",
    "WorkflowReport",
    "run_workflow",
]
