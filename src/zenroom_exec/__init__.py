"""Zenroom exec - run Zenroom VM scripts through the zenroom executable."""

from importlib.metadata import PackageNotFoundError, version

from zenroom_exec.api import (
    zencode_exec,
    zencode_exec_async,
    zenroom_exec,
    zenroom_exec_async,
)
from zenroom_exec.config import RunnerConfig, load_config
from zenroom_exec.core.execution.invoker import (
    InvocationError,
    InvocationTimeout,
    LaunchError,
    ProcessInvoker,
)
from zenroom_exec.core.execution.result_types import InvocationOutcome, ZenResult
from zenroom_exec.schemas.invocation import ExecutionMode, InvocationRequest

try:
    __version__ = version("zenroom-exec")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

__all__ = [
    "ExecutionMode",
    "InvocationError",
    "InvocationOutcome",
    "InvocationRequest",
    "InvocationTimeout",
    "LaunchError",
    "ProcessInvoker",
    "RunnerConfig",
    "ZenResult",
    "load_config",
    "zencode_exec",
    "zencode_exec_async",
    "zenroom_exec",
    "zenroom_exec_async",
]
