"""Domain exceptions for the provisioning bounded context."""


class InvalidTenantError(ValueError):
    """Raised when tenant fields violate domain constraints.

    Covers names that are not DNS-label safe and unknown tenant kinds.
    Raised before any workflow starts, never from inside a workflow.
    """

    pass


class InvalidStatusTransitionError(Exception):
    """Raised when a tenant status change violates the lifecycle.

    Provisioning status is monotonic: a tenant never returns to
    PROVISIONING from READY, and DELETING is only left by removal.
    """

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition tenant from {current} to {target}")
