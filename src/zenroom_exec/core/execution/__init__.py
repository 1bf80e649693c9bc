"""Invocation components."""

from zenroom_exec.core.execution.invoker import (
    InvocationError,
    InvocationTimeout,
    LaunchError,
    ProcessInvoker,
)
from zenroom_exec.core.execution.result_types import InvocationOutcome, ZenResult
from zenroom_exec.core.execution.temp_artifacts import ArtifactSet

__all__ = [
    "ArtifactSet",
    "InvocationError",
    "InvocationOutcome",
    "InvocationTimeout",
    "LaunchError",
    "ProcessInvoker",
    "ZenResult",
]
