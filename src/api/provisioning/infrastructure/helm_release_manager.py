"""Helm implementation of the ReleaseManager port.

Runs the helm CLI as a subprocess with an argument vector (never through
a shell), captures its output for diagnostics, and bounds every
invocation: helm gets its own --timeout, and the process is killed if it
outlives that timeout by more than a grace period.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from provisioning.infrastructure.observability import (
    DefaultReleaseManagerProbe,
    ReleaseManagerProbe,
)
from provisioning.ports.releases import ReleaseManager, ReleaseParams, ReleaseResult

if TYPE_CHECKING:
    from infrastructure.settings import ProvisioningSettings

# Markers helm prints when its own --wait deadline expires
_HELM_TIMEOUT_MARKERS = (
    "timed out waiting for the condition",
    "context deadline exceeded",
)


class HelmReleaseManager(ReleaseManager):
    """Install, upgrade and uninstall tenant releases with helm."""

    def __init__(
        self,
        helm_binary: str = "helm",
        timeout_seconds: int = 300,
        grace_seconds: float = 30.0,
        probe: ReleaseManagerProbe | None = None,
    ) -> None:
        """Initialize the release manager.

        Args:
            helm_binary: Helm executable name or path
            timeout_seconds: Timeout applied to uninstall commands and the
                process-level bound of install commands
            grace_seconds: Extra time helm gets past its own timeout before
                the process is killed
            probe: Optional domain probe for observability
        """
        self._helm = helm_binary
        self._timeout = timeout_seconds
        self._grace = grace_seconds
        self._probe = probe or DefaultReleaseManagerProbe()

    @classmethod
    def from_settings(
        cls,
        settings: ProvisioningSettings,
        probe: ReleaseManagerProbe | None = None,
    ) -> HelmReleaseManager:
        return cls(
            helm_binary=settings.helm_binary,
            timeout_seconds=settings.release_timeout_seconds,
            probe=probe,
        )

    def build_install_command(self, params: ReleaseParams) -> list[str]:
        """Build the argument vector for helm upgrade --install."""
        argv = [
            self._helm,
            "upgrade",
            "--install",
            params.release_name,
            params.chart,
            "--namespace",
            params.namespace,
        ]
        for key, value in params.overrides.items():
            argv.extend(["--set-string", f"{key}={value}"])
        if params.wait:
            argv.append("--wait")
        argv.extend(["--timeout", f"{params.timeout_seconds}s"])
        return argv

    def build_uninstall_command(self, release_name: str, namespace: str) -> list[str]:
        """Build the argument vector for helm uninstall."""
        return [
            self._helm,
            "uninstall",
            release_name,
            "--namespace",
            namespace,
            "--timeout",
            f"{self._timeout}s",
        ]

    async def install_or_upgrade(self, params: ReleaseParams) -> ReleaseResult:
        return await self._run(
            action="install",
            release_name=params.release_name,
            namespace=params.namespace,
            argv=self.build_install_command(params),
            timeout=params.timeout_seconds + self._grace,
        )

    async def uninstall(self, release_name: str, namespace: str) -> ReleaseResult:
        return await self._run(
            action="uninstall",
            release_name=release_name,
            namespace=namespace,
            argv=self.build_uninstall_command(release_name, namespace),
            timeout=self._timeout + self._grace,
        )

    async def _run(
        self,
        action: str,
        release_name: str,
        namespace: str,
        argv: list[str],
        timeout: float,
    ) -> ReleaseResult:
        """Run a helm command and capture its outcome.

        Failures to start, non-zero exits and timeouts are all reported
        as an unsuccessful ReleaseResult rather than raised.
        """
        self._probe.release_command_started(
            action=action, release_name=release_name, namespace=namespace
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._probe.release_command_failed(
                action=action,
                release_name=release_name,
                namespace=namespace,
                exit_code=None,
                stderr=str(e),
            )
            return ReleaseResult(succeeded=False, stderr=str(e))

        try:
            raw_stdout, raw_stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except TimeoutError:
            process.kill()
            await process.wait()
            self._probe.release_command_timed_out(
                action=action, release_name=release_name, timeout_seconds=timeout
            )
            return ReleaseResult(
                succeeded=False,
                stderr=f"helm {action} killed after {timeout:g}s",
                timed_out=True,
            )

        stdout = raw_stdout.decode(errors="replace")
        stderr = raw_stderr.decode(errors="replace")

        if process.returncode == 0:
            self._probe.release_command_succeeded(
                action=action, release_name=release_name, namespace=namespace
            )
            return ReleaseResult(
                succeeded=True, exit_code=0, stdout=stdout, stderr=stderr
            )

        self._probe.release_command_failed(
            action=action,
            release_name=release_name,
            namespace=namespace,
            exit_code=process.returncode,
            stderr=stderr,
        )
        return ReleaseResult(
            succeeded=False,
            exit_code=process.returncode,
            stdout=stdout,
            stderr=stderr,
            timed_out=any(marker in stderr for marker in _HELM_TIMEOUT_MARKERS),
        )
