"""Request schemas for zenroom-exec."""

from .invocation import ExecutionMode, InvocationRequest

__all__ = [
    "ExecutionMode",
    "InvocationRequest",
]
