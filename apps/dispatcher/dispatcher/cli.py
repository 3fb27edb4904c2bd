"""
Root Typer application for the ``cicd-dispatch`` CLI.

    cicd-dispatch run static-analysis          # detect, resolve, execute
    cicd-dispatch run test --dry-run --json    # show what would run
    cicd-dispatch detect -C path/to/repo       # ecosystem only
    cicd-dispatch bindings --bindings ci.yml   # effective binding table

The ecosystem is never passed on the command line; it is always inferred.
Exit codes: 0 success, 1 no ecosystem detected, 2 capability unsupported
(or bindings file invalid), 130 interrupted, anything else comes from the
tool (128 + N when the tool was killed by signal N).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer

from dispatcher.bindings.resolver import load_bindings
from dispatcher.bindings.types import Capability, ConfigurationError
from dispatcher.core.config import DispatchConfig, get_config
from dispatcher.core.logging import configure_structlog
from dispatcher.detector.orchestrator import detect
from dispatcher.executor.types import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_INTERRUPTED,
    EXIT_NOT_DETECTED,
)
from dispatcher.orchestrator import dispatch

log = structlog.get_logger(__name__)

app = typer.Typer(
    name="cicd-dispatch",
    help="Run a CI check with the right tool for the project's ecosystem.",
    no_args_is_help=True,
)


# ── Shared options ───────────────────────────────────────────────────────

_WORKDIR_OPTION = typer.Option(
    Path("."),
    "--working-directory",
    "-C",
    help="Directory holding the project's Bazel manifests.",
)
_BINDINGS_OPTION = typer.Option(
    None,
    "--bindings",
    "-b",
    help="YAML file overriding the default capability bindings.",
)
_JSON_OPTION = typer.Option(False, "--json", help="Print a JSON report instead of text.")


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("cicd-dispatch")
        except PackageNotFoundError:
            v = "unknown"
        typer.echo(f"cicd-dispatch {v}")
        raise typer.Exit()


def _load_config(**overrides) -> DispatchConfig:
    try:
        config = get_config(**overrides)
    except ValueError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc
    configure_structlog(json_logs=config.json_logs, level=config.log_level)
    return config


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """cicd-dispatch — ecosystem-aware CI check dispatcher."""


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("run")
def run_command(
    capability: Capability = typer.Argument(..., help="Check to run."),
    working_directory: Path = _WORKDIR_OPTION,
    bindings_file: Optional[Path] = _BINDINGS_OPTION,
    fail_fast: Optional[bool] = typer.Option(
        None,
        "--fail-fast/--run-all",
        help="Stop a multi-step check at the first failing step.",
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--execute", help="Resolve the command without running it."
    ),
    as_json: bool = _JSON_OPTION,
) -> None:
    """Detect the ecosystem, then run the tool bound to CAPABILITY."""
    config = _load_config(
        fail_fast=fail_fast, dry_run=dry_run, bindings_file=bindings_file
    )
    log.info(
        "dispatch.start",
        capability=capability.value,
        working_directory=str(working_directory),
    )

    try:
        outcome = dispatch(working_directory, capability, config)
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc
    except KeyboardInterrupt:
        log.warning("dispatch.interrupted", capability=capability.value)
        typer.echo("Interrupted", err=True)
        raise typer.Exit(code=EXIT_INTERRUPTED) from None

    if as_json:
        typer.echo(json.dumps(outcome.to_dict(), indent=2))
    else:
        for step in outcome.steps:
            if step.stdout:
                sys.stdout.write(step.stdout)
            if step.stderr:
                sys.stderr.write(step.stderr)
        sys.stdout.flush()
        sys.stderr.flush()

        if outcome.resolved_commands and not outcome.steps:
            for argv in outcome.resolved_commands:
                typer.echo(" ".join(argv))
        if not outcome.is_success and outcome.diagnostic and not outcome.steps:
            typer.echo(f"Error: {outcome.diagnostic}", err=True)
        for step in outcome.failed_steps:
            typer.echo(f"Step '{step.name}' failed with exit code {step.exit_code}", err=True)

    log.info(
        "dispatch.finish",
        state=outcome.state.value,
        ecosystem=outcome.ecosystem,
        exit_code=outcome.exit_code,
    )
    raise typer.Exit(code=outcome.exit_code)


@app.command("detect")
def detect_command(
    working_directory: Path = _WORKDIR_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Print the detected ecosystem for a working directory."""
    _load_config()
    result = detect(working_directory)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif result.is_detected:
        typer.echo(result.ecosystem.value)
        if result.also_matched:
            also = ", ".join(e.value for e in result.also_matched)
            typer.echo(f"Warning: markers for {also} also present", err=True)
    else:
        typer.echo(f"Error: {result.diagnostic}", err=True)

    if not result.is_detected:
        raise typer.Exit(code=EXIT_NOT_DETECTED)


@app.command("bindings")
def bindings_command(
    bindings_file: Optional[Path] = _BINDINGS_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Print the effective (ecosystem, capability) → command table."""
    config = _load_config(bindings_file=bindings_file)
    try:
        table = load_bindings(config.bindings_file)
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc

    rows = sorted(table.items(), key=lambda item: (item[0][0].value, item[0][1].value))
    if as_json:
        payload: dict[str, dict[str, list[list[str]]]] = {}
        for (ecosystem, capability), chain in rows:
            payload.setdefault(ecosystem.value, {})[capability.value] = [
                command.argv for command in chain
            ]
        typer.echo(json.dumps(payload, indent=2))
        return

    for (ecosystem, capability), chain in rows:
        commands = " && ".join(str(command) for command in chain)
        typer.echo(f"{ecosystem.value:<8} {capability.value:<16} {commands}")


if __name__ == "__main__":
    app()
