"""Runner configuration and layered loading.

Settings are merged from (lowest to highest precedence) built-in defaults,
the global ``~/.config/zenroom-exec/config.yaml``, the project-local
``.zenroom-exec/config.yaml`` and ``ZENROOM_EXEC_*`` environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
LOCAL_CONFIG_DIRNAME = ".zenroom-exec"

ENV_EXECUTABLE = "ZENROOM_EXEC_EXECUTABLE"
ENV_TIMEOUT = "ZENROOM_EXEC_TIMEOUT"


class RunnerConfig(BaseModel):
    """How to reach and drive the zenroom executable."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    executable: str = "zenroom"
    contract_flag: str = "-z"
    keys_flag: str = "-k"
    data_flag: str = "-a"
    conf_flag: str | None = None
    timeout_seconds: float | None = Field(default=None, gt=0)
    temp_dir: Path | None = None
    encoding: str = "utf-8"


def default_global_config_dir() -> Path:
    """Return the per-user configuration directory."""
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / "zenroom-exec"


def safe_load_yaml(file_path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning an empty dict if the file is absent.

    Raises:
        ValueError: If the file cannot be read or is not a YAML mapping
    """
    if not file_path.exists():
        return {}

    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Failed to read file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {file_path} must contain a mapping")
    return data


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    executable = os.environ.get(ENV_EXECUTABLE)
    if executable:
        overrides["executable"] = executable
    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        overrides["timeout_seconds"] = timeout
    return overrides


def load_config(
    project_dir: Path | None = None,
    global_dir: Path | None = None,
) -> RunnerConfig:
    """Build the effective RunnerConfig.

    Args:
        project_dir: Directory holding ``.zenroom-exec/`` (defaults to cwd)
        global_dir: Per-user config directory override

    Returns:
        Validated configuration
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if global_dir is None:
        global_dir = default_global_config_dir()

    merged: dict[str, Any] = {}
    for config_file in (
        global_dir / CONFIG_FILENAME,
        project_dir / LOCAL_CONFIG_DIRNAME / CONFIG_FILENAME,
    ):
        layer = safe_load_yaml(config_file)
        if layer:
            logger.debug("Loaded config layer %s", config_file)
        merged.update(layer)

    merged.update(_env_overrides())
    return RunnerConfig(**merged)
