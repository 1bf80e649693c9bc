"""Pydantic invocation request model.

One request describes one run of the Zenroom VM: the script plus the
optional conf, keys and data payloads, and the execution mode.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ExecutionMode(str, Enum):
    """How the zenroom executable should interpret the script."""

    VM = "vm"  # plain Lua script, no mode flag
    ZENCODE = "zencode"  # contract mode, adds the contract flag


class InvocationRequest(BaseModel):
    """Payloads for a single invocation.

    Empty ``conf``, ``keys`` and ``data`` mean "omit this input". The
    script is passed through as-is, even when empty; the VM rejects it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    script: str
    conf: str = ""
    keys: str = ""
    data: str = ""
    mode: ExecutionMode = ExecutionMode.VM

    @property
    def is_zencode(self) -> bool:
        return self.mode is ExecutionMode.ZENCODE
