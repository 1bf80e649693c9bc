"""Public entry points.

``zenroom_exec`` runs a script directly on the VM, ``zencode_exec`` runs it
in contract mode. Both block until the process exits and return
``(ZenResult, ok)``; ``ok`` is true exactly when the exit status was zero.
Code already running an event loop should await the ``*_async`` variants.
"""

import asyncio

from zenroom_exec.config import RunnerConfig
from zenroom_exec.core.execution.invoker import ProcessInvoker
from zenroom_exec.core.execution.result_types import ZenResult
from zenroom_exec.schemas.invocation import ExecutionMode, InvocationRequest


async def _run(
    mode: ExecutionMode,
    script: str,
    conf: str,
    keys: str,
    data: str,
    config: RunnerConfig | None,
) -> tuple[ZenResult, bool]:
    request = InvocationRequest(
        script=script, conf=conf, keys=keys, data=data, mode=mode
    )
    outcome = await ProcessInvoker(config).invoke(request)
    return outcome.as_tuple()


async def zenroom_exec_async(
    script: str,
    conf: str = "",
    keys: str = "",
    data: str = "",
    *,
    config: RunnerConfig | None = None,
) -> tuple[ZenResult, bool]:
    return await _run(ExecutionMode.VM, script, conf, keys, data, config)


async def zencode_exec_async(
    script: str,
    conf: str = "",
    keys: str = "",
    data: str = "",
    *,
    config: RunnerConfig | None = None,
) -> tuple[ZenResult, bool]:
    return await _run(ExecutionMode.ZENCODE, script, conf, keys, data, config)


def zenroom_exec(
    script: str,
    conf: str = "",
    keys: str = "",
    data: str = "",
    *,
    config: RunnerConfig | None = None,
) -> tuple[ZenResult, bool]:
    """Execute a script on the Zenroom VM.

    Args:
        script: Script source, passed through unvalidated
        conf: VM configuration; only forwarded when ``conf_flag`` is set
        keys: Keys payload, omitted when empty
        data: Data payload, omitted when empty
        config: Runner settings (defaults when None)

    Returns:
        Tuple of (captured output and logs, success flag)
    """
    return asyncio.run(
        zenroom_exec_async(script, conf, keys, data, config=config)
    )


def zencode_exec(
    script: str,
    conf: str = "",
    keys: str = "",
    data: str = "",
    *,
    config: RunnerConfig | None = None,
) -> tuple[ZenResult, bool]:
    """Execute a Zencode contract; see :func:`zenroom_exec` for arguments."""
    return asyncio.run(
        zencode_exec_async(script, conf, keys, data, config=config)
    )
