"""Typed result models for a zenroom invocation.

ZenResult is the caller-facing pair of captured streams. InvocationOutcome
wraps it with the exit status and diagnostics used by the CLI and by
callers that want more than the ``(result, ok)`` pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ZenResult:
    """Captured text of one VM run."""

    output: str = ""
    logs: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"output": self.output, "logs": self.logs}


@dataclass
class InvocationOutcome:
    """Full outcome of a single invocation.

    ``success`` is true exactly when the child exited with status zero.
    ``error`` holds the launch failure or timeout, if any.
    """

    result: ZenResult
    success: bool
    return_code: int | None = None
    command: list[str] = field(default_factory=list)
    error: Exception | None = field(default=None, repr=False)
    timed_out: bool = False
    duration_ms: int = 0

    def as_tuple(self) -> tuple[ZenResult, bool]:
        """Collapse to the two-valued ``(result, ok)`` contract."""
        return self.result, self.success

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict, omitting the error when there is none."""
        data: dict[str, Any] = {
            "output": self.result.output,
            "logs": self.result.logs,
            "success": self.success,
            "return_code": self.return_code,
            "command": list(self.command),
            "timed_out": self.timed_out,
            "duration_ms": self.duration_ms,
        }
        if self.error is not None:
            data["error"] = {
                "type": type(self.error).__name__,
                "message": str(self.error),
            }
        return data
