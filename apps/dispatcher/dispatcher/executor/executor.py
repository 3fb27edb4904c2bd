"""Command chain execution.

Runs each CommandSpec of a chain as a subprocess, in order, with stdout and
stderr captured so the caller can forward them verbatim.

Chain policy:
- default: run every step and aggregate failures, so one report shows all
  problems (e.g. clippy findings and audit advisories together).
- fail_fast: stop after the first failing step; remaining steps are
  recorded as not run.

The overall exit code is the first failing step's exit code, unmodified.
"""

import logging
import subprocess
import time
from pathlib import Path

from dispatcher.bindings.types import CommandChain, CommandSpec
from dispatcher.executor.types import (
    EXIT_LAUNCH_FAILED,
    EXIT_SIGNAL_BASE,
    EXIT_SUCCESS,
    StepResult,
)

logger = logging.getLogger(__name__)


def run_step(name: str, command: CommandSpec, cwd: Path) -> StepResult:
    """Execute a single command as a subprocess.

    Captures stdout, stderr, exit code, and duration. A program that cannot
    be launched yields exit code 127 with the OS error as stderr.
    """
    argv = command.argv
    logger.info("Running step '%s': %s (cwd=%s)", name, command, cwd)
    start = time.monotonic()

    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd),
            capture_output=True,
            text=True,
        )
        step_result = StepResult(
            name=name,
            argv=argv,
            exit_code=_normalise_returncode(completed.returncode),
            duration_seconds=time.monotonic() - start,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
    except OSError as exc:
        step_result = StepResult(
            name=name,
            argv=argv,
            exit_code=EXIT_LAUNCH_FAILED,
            duration_seconds=time.monotonic() - start,
            stderr=f"failed to launch {command.program}: {exc}",
        )

    status = "OK" if step_result.is_success else "FAILED"
    logger.info(
        "Step '%s' %s (exit=%d, %.1fs)",
        name, status, step_result.exit_code, step_result.duration_seconds,
    )
    return step_result


def run_chain(
    chain: CommandChain,
    cwd: Path,
    fail_fast: bool = False,
) -> tuple[list[StepResult], int]:
    """Run every command in `chain` and return (step results, exit code)."""
    cwd = Path(cwd)
    steps: list[StepResult] = []
    exit_code = EXIT_SUCCESS

    for idx, command in enumerate(chain):
        name = _step_name(idx, command)
        if fail_fast and exit_code != EXIT_SUCCESS:
            steps.append(StepResult(name=name, argv=command.argv, exit_code=0, ran=False))
            logger.info("Step '%s' skipped (fail-fast)", name)
            continue

        step = run_step(name, command, cwd)
        steps.append(step)
        if not step.is_success and exit_code == EXIT_SUCCESS:
            exit_code = step.exit_code

    failed = [s.name for s in steps if s.ran and not s.is_success]
    if failed:
        logger.error("%d of %d step(s) failed: %s", len(failed), len(steps), ", ".join(failed))
    return steps, exit_code


def _step_name(idx: int, command: CommandSpec) -> str:
    sub = next((arg for arg in command.args if not arg.startswith("-")), "")
    label = f"{command.program} {sub}".strip()
    return f"{idx + 1}:{label}"


def _normalise_returncode(returncode: int) -> int:
    """Map subprocess's negative "killed by signal N" codes to 128 + N."""
    if returncode < 0:
        return EXIT_SIGNAL_BASE - returncode
    return returncode
