"""Shared test fixtures and configuration.

Tests drive real child processes through small Python stub executables
that stand in for the zenroom binary.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from zenroom_exec.config import RunnerConfig

# Prints argv and the content of every file named in it as JSON.
ECHO_VM = """
import json, os, sys
files = {a: open(a).read() for a in sys.argv[1:] if os.path.isfile(a)}
print(json.dumps({"argv": sys.argv[1:], "files": files}))
"""

# Runs the script file (last argument) as Python; keys and data are exposed
# as KEYS and DATA. Errors surface as a traceback on stderr and exit code 1.
EXEC_VM = """
import sys
args = sys.argv[1:]
env = {"KEYS": "", "DATA": "", "ZENCODE": args[:1] == ["-z"]}
for flag, name in (("-k", "KEYS"), ("-a", "DATA")):
    if flag in args:
        env[name] = open(args[args.index(flag) + 1]).read()
source = open(args[-1]).read()
exec(compile(source, "script", "exec"), env)
"""

# Fills stderr far beyond a pipe buffer before touching stdout.
FLOOD_VM = """
import sys
sys.stderr.write("e" * 256 * 1024)
sys.stderr.flush()
sys.stdout.write("o" * 256 * 1024)
sys.stdout.flush()
"""

# Fills stdout far beyond a pipe buffer before touching stderr.
STDOUT_FLOOD_VM = """
import sys
sys.stdout.write("o" * 256 * 1024)
sys.stdout.flush()
sys.stderr.write("e" * 256 * 1024)
sys.stderr.flush()
"""

SLEEP_VM = """
import sys, time
sys.stdout.write("started\\n")
sys.stdout.flush()
time.sleep(30)
"""


StubFactory = Callable[[str, str], Path]


@pytest.fixture
def make_stub(tmp_path: Path) -> StubFactory:
    """Return a factory writing executable Python stubs into tmp_path."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(name: str, body: str) -> Path:
        path = bin_dir / name
        path.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    """Directory that receives every temporary payload file."""
    directory = tmp_path / "artifacts"
    directory.mkdir()
    return directory


@pytest.fixture
def echo_config(make_stub: StubFactory, artifact_dir: Path) -> RunnerConfig:
    return RunnerConfig(
        executable=str(make_stub("echo-vm", ECHO_VM)), temp_dir=artifact_dir
    )


@pytest.fixture
def exec_config(make_stub: StubFactory, artifact_dir: Path) -> RunnerConfig:
    return RunnerConfig(
        executable=str(make_stub("exec-vm", EXEC_VM)), temp_dir=artifact_dir
    )


@pytest.fixture
def flood_config(make_stub: StubFactory) -> RunnerConfig:
    return RunnerConfig(executable=str(make_stub("flood-vm", FLOOD_VM)))


@pytest.fixture
def sleep_config(make_stub: StubFactory, artifact_dir: Path) -> RunnerConfig:
    return RunnerConfig(
        executable=str(make_stub("sleep-vm", SLEEP_VM)), temp_dir=artifact_dir
    )


@pytest.fixture
def stdout_flood_config(make_stub: StubFactory) -> RunnerConfig:
    return RunnerConfig(
        executable=str(make_stub("stdout-flood-vm", STDOUT_FLOOD_VM))
    )
