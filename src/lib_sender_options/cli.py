"""CLI adapter for ``lib_sender_options`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators check what a producer would be configured with (merged
properties, synthesized client identifier, pipeline settings) without writing
Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_env_prefix` – helper exposing :func:`default_env_prefix`.
* :func:`cli_show` – resolves :class:`SenderOptions` and prints them as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It invokes the composition root
(``read_sender_options_raw``) and the ``with_*`` derivations, never adapters.
``lib_cli_exit_tools`` centralises the exit code strategy.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import default_env_prefix as _default_env_prefix
from .core import read_sender_options_raw
from .domain.options import UNBOUNDED_CLOSE_TIMEOUT, SenderOptions
from .testing import i_should_fail

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("lib_sender_options")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Immutable producer sender options",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_sender_options",
    message="lib_sender_options version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_sender_options")
    except metadata.PackageNotFoundError:
        click.echo("lib_sender_options (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_sender_options')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["env-prefix", "kafka-producer"])
    >>> result.output.strip()
    'KAFKA_PRODUCER'
    """

    click.echo(_default_env_prefix(slug))


@cli.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--file",
    "path",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    default=None,
    help="Property file (.properties, .toml, .json, .yaml)",
)
@click.option("--env-prefix", default=None, help="Read environment variables with this prefix (e.g. KAFKA)")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a producer property (repeatable)",
)
@click.option("--max-in-flight", type=click.IntRange(min=1), default=None, help="Cap on unacknowledged sends")
@click.option("--close-timeout", type=click.FloatRange(min=0), default=None, help="Close timeout in seconds")
@click.option(
    "--stop-on-error/--no-stop-on-error",
    default=None,
    help="Stop a batched send at the first failure",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the source of every property in the output",
)
def cli_show(
    path: Optional[Path],
    env_prefix: Optional[str],
    assignments: Sequence[str],
    max_in_flight: Optional[int],
    close_timeout: Optional[float],
    stop_on_error: Optional[bool],
    indent: Optional[int],
    provenance: bool,
) -> None:
    """Resolve sender options and print them as JSON.

    Sources apply in order file → environment → ``--set``. The typed options
    are applied afterwards through the ``with_*`` derivations.
    """

    overrides = _parse_assignments(assignments)
    properties, meta = read_sender_options_raw(path=path, env_prefix=env_prefix, overrides=overrides)
    options = SenderOptions.from_properties(properties)
    if max_in_flight is not None:
        options = options.with_max_in_flight(max_in_flight)
    if close_timeout is not None:
        options = options.with_close_timeout(close_timeout)
    if stop_on_error is not None:
        options = options.with_stop_on_error(stop_on_error)

    payload = describe_options(options)
    if provenance:
        payload["provenance"] = meta
    click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), default=str))


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Trigger a deterministic error for testing traceback handling."""

    i_should_fail()


def describe_options(options: SenderOptions) -> dict[str, Any]:
    """Return a JSON-friendly summary of *options*.

    Examples
    --------
    >>> summary = describe_options(SenderOptions.from_properties({"client.id": "c"}))
    >>> summary["properties"], summary["close_timeout_seconds"], summary["transactional"]
    ({'client.id': 'c'}, None, False)
    """

    timeout = options.close_timeout
    return {
        "properties": options.producer_properties(),
        "client_id": options.client_id,
        "transactional": options.is_transactional,
        "max_in_flight": options.max_in_flight,
        "stop_on_error": options.stop_on_error,
        "close_timeout_seconds": None if timeout == UNBOUNDED_CLOSE_TIMEOUT else timeout.total_seconds(),
        "scheduler": repr(options.scheduler),
        "observation_registry": repr(options.observation_registry),
    }


def _parse_assignments(values: Sequence[str]) -> dict[str, object]:
    """Split ``KEY=VALUE`` assignments into a property mapping."""

    parsed: dict[str, object] = {}
    for value in values:
        key, separator, content = value.partition("=")
        key = key.strip()
        if not separator or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {value!r}", param_hint="--set")
        parsed[key] = content
    return parsed


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_sender_options",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
