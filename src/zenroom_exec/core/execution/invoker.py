"""Process invoker for the zenroom executable.

Writes the payloads to temporary files, runs the executable against them,
drains stdout and stderr concurrently and reports the exit status. Every
temporary file is removed before :meth:`ProcessInvoker.invoke` returns.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import subprocess
import time
from pathlib import Path

from zenroom_exec.config import RunnerConfig
from zenroom_exec.core.execution.result_types import InvocationOutcome, ZenResult
from zenroom_exec.core.execution.stream_capture import StreamBuffer, drain_both
from zenroom_exec.core.execution.temp_artifacts import (
    DATA_PREFIX,
    KEYS_PREFIX,
    SCRIPT_PREFIX,
    ArtifactSet,
)
from zenroom_exec.schemas.invocation import InvocationRequest

logger = logging.getLogger(__name__)


class InvocationError(RuntimeError):
    """Base class for failures reported on an InvocationOutcome."""


class LaunchError(InvocationError):
    """The payload files could not be written or the process not started."""


class InvocationTimeout(InvocationError):
    """The process did not finish within the configured timeout."""


class ProcessInvoker:
    """Runs InvocationRequests against the configured zenroom executable."""

    def __init__(self, config: RunnerConfig | None = None) -> None:
        self._config = config if config is not None else RunnerConfig()

    @property
    def config(self) -> RunnerConfig:
        return self._config

    def build_command(
        self,
        request: InvocationRequest,
        script_path: Path,
        keys_path: Path | None = None,
        data_path: Path | None = None,
    ) -> list[str]:
        """Assemble argv: executable, mode flag, keys, data, conf, script."""
        config = self._config
        command = [config.executable]
        if request.is_zencode:
            command.append(config.contract_flag)
        if keys_path is not None:
            command.extend([config.keys_flag, str(keys_path)])
        if data_path is not None:
            command.extend([config.data_flag, str(data_path)])
        if config.conf_flag and request.conf:
            command.extend([config.conf_flag, request.conf])
        command.append(str(script_path))
        return command

    async def invoke(
        self,
        request: InvocationRequest,
        raise_on_launch_error: bool = False,
    ) -> InvocationOutcome:
        """Run one request to completion.

        Args:
            request: Script and payloads to run
            raise_on_launch_error: Raise LaunchError instead of returning
                a failed outcome when setup fails

        Returns:
            Outcome with captured text and exit status

        Raises:
            LaunchError: Only when raise_on_launch_error is set
        """
        start_time = time.time()
        config = self._config

        with ArtifactSet(temp_dir=config.temp_dir, encoding=config.encoding) as files:
            try:
                keys_path = files.add_optional(request.keys, KEYS_PREFIX)
                data_path = files.add_optional(request.data, DATA_PREFIX)
                script_path = files.add(request.script, SCRIPT_PREFIX)
            except (OSError, UnicodeError) as e:
                error = LaunchError(f"Failed to write temporary payload: {e}")
                return self._launch_failed(
                    error, [], start_time, raise_on_launch_error, e
                )

            command = self.build_command(request, script_path, keys_path, data_path)
            logger.debug("Invoking %s", shlex.join(command))

            # A cancel during the spawn must not leave an unowned child running.
            spawn = asyncio.ensure_future(
                asyncio.create_subprocess_exec(
                    *command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            )
            try:
                process = await asyncio.shield(spawn)
            except asyncio.CancelledError:
                spawn.add_done_callback(_kill_spawned)
                raise
            except (OSError, ValueError) as e:
                error = LaunchError(f"Failed to start {command[0]}: {e}")
                return self._launch_failed(
                    error, command, start_time, raise_on_launch_error, e
                )

            return await self._collect(process, command, start_time)

    async def _collect(
        self,
        process: asyncio.subprocess.Process,
        command: list[str],
        start_time: float,
    ) -> InvocationOutcome:
        """Drain both pipes, wait for exit and build the outcome."""
        timeout = self._config.timeout_seconds
        stdout_buffer = StreamBuffer("stdout")
        stderr_buffer = StreamBuffer("stderr")
        error: InvocationError | None = None
        return_code: int | None = None

        try:
            return_code = await asyncio.wait_for(
                self._drain_and_wait(process, stdout_buffer, stderr_buffer),
                timeout=timeout,
            )
        except TimeoutError:
            error = InvocationTimeout(
                f"{command[0]} timed out after {timeout} seconds"
            )
            logger.warning("%s", error)
        finally:
            if process.returncode is None:
                _kill(process)

        if error is not None:
            return_code = await process.wait()

        encoding = self._config.encoding
        result = ZenResult(
            output=stdout_buffer.text(encoding),
            logs=stderr_buffer.text(encoding),
        )
        success = error is None and return_code == 0
        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            "%s exited with %s after %d ms", command[0], return_code, duration_ms
        )

        return InvocationOutcome(
            result=result,
            success=success,
            return_code=return_code,
            command=command,
            error=error,
            timed_out=isinstance(error, InvocationTimeout),
            duration_ms=duration_ms,
        )

    async def _drain_and_wait(
        self,
        process: asyncio.subprocess.Process,
        stdout_buffer: StreamBuffer,
        stderr_buffer: StreamBuffer,
    ) -> int:
        await drain_both(process.stdout, process.stderr, stdout_buffer, stderr_buffer)
        return await process.wait()

    def _launch_failed(
        self,
        error: LaunchError,
        command: list[str],
        start_time: float,
        raise_error: bool,
        cause: BaseException,
    ) -> InvocationOutcome:
        logger.error("%s", error)
        if raise_error:
            raise error from cause
        return InvocationOutcome(
            result=ZenResult(),
            success=False,
            command=command,
            error=error,
            duration_ms=int((time.time() - start_time) * 1000),
        )


def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass


def _kill_spawned(spawn: asyncio.Future[asyncio.subprocess.Process]) -> None:
    """Kill a child whose spawn finished after the invocation was cancelled."""
    if spawn.cancelled():
        return
    if spawn.exception() is not None:
        return
    _kill(spawn.result())
