"""Concurrent draining of a child's stdout and stderr."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class StreamBuffer:
    """Bytes read so far from one pipe.

    Kept outside the drain coroutine so partial text survives a timeout
    that cancels the drain.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._chunks: list[bytes] = []

    def append(self, chunk: bytes) -> None:
        self._chunks.append(chunk)

    def text(self, encoding: str = "utf-8") -> str:
        return b"".join(self._chunks).decode(encoding, errors="replace")


async def drain_stream(
    reader: asyncio.StreamReader | None, buffer: StreamBuffer
) -> None:
    """Read a pipe to EOF into buffer.

    A read error is logged and ends the drain; whatever was read before
    the error stays in the buffer.
    """
    if reader is None:
        return
    try:
        while True:
            chunk = await reader.read(CHUNK_SIZE)
            if not chunk:
                break
            buffer.append(chunk)
    except (OSError, ValueError) as e:
        logger.warning("Failed to capture %s: %s", buffer.name, e)


async def drain_both(
    stdout: asyncio.StreamReader | None,
    stderr: asyncio.StreamReader | None,
    stdout_buffer: StreamBuffer,
    stderr_buffer: StreamBuffer,
) -> None:
    """Drain stdout and stderr concurrently, returning once both hit EOF."""
    await asyncio.gather(
        drain_stream(stdout, stdout_buffer),
        drain_stream(stderr, stderr_buffer),
    )
