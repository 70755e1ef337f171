"""Ordered step workflows with an explicit failure policy.

A lifecycle workflow is a list of named steps. Each step's action
returns a StepResult: success, or failure carrying a Diagnostic. The
driver either stops at the first failure (FailurePolicy.ABORT) or
records it and keeps going (FailurePolicy.CONTINUE).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Awaitable, Callable, Sequence


class FailurePolicy(StrEnum):
    """What the driver does after a step fails."""

    ABORT = "abort"
    CONTINUE = "continue"


@dataclass(frozen=True)
class Diagnostic:
    """Why a step failed.

    Attributes:
        message: Short description of the failure
        status: Status reported by the failing system (HTTP status, exit code)
        output: Captured output of the failing call, if any
    """

    message: str
    status: int | None = None
    output: str | None = None


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single workflow step."""

    step: str
    diagnostic: Diagnostic | None = None

    @property
    def succeeded(self) -> bool:
        return self.diagnostic is None

    @classmethod
    def ok(cls, step: str) -> StepResult:
        return cls(step=step)

    @classmethod
    def failed(cls, step: str, diagnostic: Diagnostic) -> StepResult:
        return cls(step=step, diagnostic=diagnostic)


StepAction = Callable[[], Awaitable[StepResult]]


@dataclass(frozen=True)
class Step:
    """A named unit of work in a workflow."""

    name: str
    action: StepAction


async def run_workflow(
    steps: Sequence[Step],
    policy: FailurePolicy,
    on_step_started: Callable[[str], None] | None = None,
    on_failure: Callable[[str, Diagnostic], None] | None = None,
) -> list[StepResult]:
    """Run steps in order under a failure policy.

    An exception escaping a step's action is treated as that step's
    failure, with the exception text as diagnostic message.

    Args:
        steps: Steps to run, in order
        policy: ABORT stops at the first failure, CONTINUE runs every step
        on_step_started: Called with the step name before each step runs
        on_failure: Called with the step name and diagnostic of each failure

    Returns:
        Results of the steps that ran, in order
    """
    results: list[StepResult] = []

    for step in steps:
        if on_step_started is not None:
            on_step_started(step.name)

        try:
            result = await step.action()
        except Exception as e:
            result = StepResult.failed(
                step.name,
                Diagnostic(message=f"{type(e).__name__}: {e}"),
            )

        results.append(result)

        diagnostic = result.diagnostic
        if diagnostic is None:
            continue

        if on_failure is not None:
            on_failure(result.step, diagnostic)

        if policy is FailurePolicy.ABORT:
            break

    return results
