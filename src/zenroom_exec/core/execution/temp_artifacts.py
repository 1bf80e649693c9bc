"""Temporary payload files handed to the zenroom executable."""

import logging
import os
import tempfile
from contextlib import ExitStack
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)

SCRIPT_PREFIX = "tempScript"
KEYS_PREFIX = "tempKeys"
DATA_PREFIX = "tempData"


def remove_artifact(path: Path) -> None:
    """Delete a temporary artifact, ignoring failures."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Could not remove temporary file %s: %s", path, e)


def write_artifact(
    payload: str,
    prefix: str,
    temp_dir: Path | None = None,
    encoding: str = "utf-8",
) -> Path:
    """Write payload to a uniquely named file and sync it to disk.

    The file is closed on return so the child process can open it.
    On a write failure the partial file is removed before re-raising.

    Args:
        payload: Text to write
        prefix: Filename prefix
        temp_dir: Directory to create the file in (system default if None)
        encoding: Text encoding for the payload

    Returns:
        Path of the written file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        prefix=prefix,
        dir=temp_dir,
        encoding=encoding,
        delete=False,
    ) as f:
        path = Path(f.name)
        try:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        except BaseException:
            f.close()
            remove_artifact(path)
            raise
    return path


class ArtifactSet:
    """Owns every temporary file of one invocation.

    Use as a context manager; all files created through :meth:`add` are
    removed on exit, whether the block returns or raises.
    """

    def __init__(self, temp_dir: Path | None = None, encoding: str = "utf-8"):
        self._temp_dir = temp_dir
        self._encoding = encoding
        self._stack = ExitStack()
        self.paths: list[Path] = []

    def __enter__(self) -> "ArtifactSet":
        self._stack.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        return self._stack.__exit__(exc_type, exc, tb)

    def add(self, payload: str, prefix: str) -> Path:
        path = write_artifact(
            payload, prefix, temp_dir=self._temp_dir, encoding=self._encoding
        )
        self._stack.callback(remove_artifact, path)
        self.paths.append(path)
        return path

    def add_optional(self, payload: str, prefix: str) -> Path | None:
        """Like :meth:`add`, but an empty payload creates nothing."""
        if not payload:
            return None
        return self.add(payload, prefix)
