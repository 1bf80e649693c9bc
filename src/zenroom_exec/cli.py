"""Command line interface for zenroom-exec."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from zenroom_exec.config import RunnerConfig, load_config
from zenroom_exec.core.execution.invoker import LaunchError, ProcessInvoker
from zenroom_exec.schemas.invocation import ExecutionMode, InvocationRequest


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=logging.DEBUG, format="%(message)s", handlers=[handler], force=True
    )


def _load_effective_config(**overrides: object) -> RunnerConfig:
    """Load layered config and apply CLI overrides that were given."""
    try:
        effective = load_config()
        updates = {k: v for k, v in overrides.items() if v is not None}
        if updates:
            effective = RunnerConfig(**{**effective.model_dump(), **updates})
    except (ValueError, ValidationError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    return effective


def _read_payload(path: str | None) -> str:
    """Read a payload file; ``-`` reads stdin, None means no payload."""
    if path is None:
        return ""
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Failed to read {path}: {e}") from e


@click.group()
@click.version_option(package_name="zenroom-exec")
def cli() -> None:
    """Zenroom exec - run scripts on the Zenroom virtual machine."""
    pass


@cli.command()
@click.argument("script_file")
@click.option("--keys", "keys_file", default=None, help="File with the keys payload")
@click.option("--data", "data_file", default=None, help="File with the data payload")
@click.option("--conf", default="", help="VM configuration string")
@click.option(
    "--zencode",
    is_flag=True,
    help="Run the script as a Zencode contract",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Kill the VM after this many seconds",
)
@click.option(
    "--executable",
    default=None,
    help="Path to the zenroom executable (overrides config)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the full outcome as JSON",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def run(
    script_file: str,
    keys_file: str | None,
    data_file: str | None,
    conf: str,
    zencode: bool,
    timeout: float | None,
    executable: str | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Run SCRIPT_FILE on the Zenroom VM (use - for stdin)."""
    _setup_logging(verbose)
    runner_config = _load_effective_config(
        executable=executable, timeout_seconds=timeout
    )

    request = InvocationRequest(
        script=_read_payload(script_file),
        conf=conf,
        keys=_read_payload(keys_file),
        data=_read_payload(data_file),
        mode=ExecutionMode.ZENCODE if zencode else ExecutionMode.VM,
    )

    invoker = ProcessInvoker(runner_config)
    outcome = asyncio.run(invoker.invoke(request))

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
    else:
        if outcome.result.output:
            click.echo(outcome.result.output, nl=False)
        if outcome.result.logs:
            click.echo(outcome.result.logs, nl=False, err=True)

    if isinstance(outcome.error, LaunchError):
        raise click.ClickException(str(outcome.error))
    if not outcome.success:
        code = outcome.return_code
        sys.exit(code if code is not None and code > 0 else 1)


@cli.group()
def config() -> None:
    """Inspect zenroom-exec configuration."""
    pass


@config.command("show")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
def config_show(as_json: bool) -> None:
    """Show the effective configuration."""
    effective = _load_effective_config()
    data = effective.model_dump(mode="json")
    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    cli()
