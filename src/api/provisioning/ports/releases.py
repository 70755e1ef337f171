"""Release manager protocol (port) and its value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ReleaseParams:
    """Parameters of an install-or-upgrade invocation.

    Attributes:
        release_name: Name of the release
        namespace: Namespace the release is installed into
        chart: Chart reference (path or repo/chart)
        overrides: Values set on the command line, e.g. ingress.host
        wait: Wait for the release's resources to become ready
        timeout_seconds: Upper bound for the release tool's own wait
    """

    release_name: str
    namespace: str
    chart: str
    overrides: dict[str, str] = field(default_factory=dict)
    wait: bool = True
    timeout_seconds: int = 300


@dataclass(frozen=True)
class ReleaseResult:
    """Outcome of a release tool invocation.

    Attributes:
        succeeded: Whether the command exited with status 0
        exit_code: Process exit code (None if it never started or was killed)
        stdout: Captured standard output
        stderr: Captured standard error
        timed_out: Whether the command was killed after the timeout
    """

    succeeded: bool
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def summary(self) -> str:
        """Short outcome description for logs, without the captured output."""
        if self.timed_out:
            return "release command timed out"
        if self.exit_code is None:
            return "release command did not run"
        return f"exit code {self.exit_code}"


@runtime_checkable
class ReleaseManager(Protocol):
    """Install, upgrade and uninstall tenant releases.

    Failures are reported through ReleaseResult rather than raised, so
    callers decide whether a failure is fatal.
    """

    async def install_or_upgrade(self, params: ReleaseParams) -> ReleaseResult:
        """Install the release, or upgrade it if it already exists."""
        ...

    async def uninstall(self, release_name: str, namespace: str) -> ReleaseResult:
        """Uninstall a release and its bookkeeping from a namespace."""
        ...
