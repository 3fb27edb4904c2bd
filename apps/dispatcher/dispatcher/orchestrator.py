"""Dispatch orchestrator — detect, resolve, execute.

State machine (strictly forward, no retries):

    UNRESOLVED → ECOSYSTEM_KNOWN → COMMAND_RESOLVED → EXECUTED

Any failure stops the dispatch at the state it reached:
- no ecosystem detected         → UNRESOLVED,       exit 1
- capability unbound            → ECOSYSTEM_KNOWN,  exit 2
- dry run                       → COMMAND_RESOLVED, exit 0
- chain executed                → EXECUTED,         exit 0 or the tool's code

No external process is launched before COMMAND_RESOLVED.
"""

import logging
from pathlib import Path
from typing import Optional

from dispatcher.bindings.resolver import load_bindings, resolve_command
from dispatcher.bindings.types import BindingTable, Capability, ConfigurationError
from dispatcher.core.config import DispatchConfig
from dispatcher.detector.orchestrator import detect
from dispatcher.executor.executor import run_chain
from dispatcher.executor.types import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_NOT_DETECTED,
    EXIT_SUCCESS,
    DispatchState,
    ExecutionOutcome,
)

logger = logging.getLogger(__name__)


def dispatch(
    working_directory: Path,
    capability: Capability,
    config: Optional[DispatchConfig] = None,
    bindings: Optional[BindingTable] = None,
) -> ExecutionOutcome:
    """Run the check `capability` for the project in `working_directory`.

    `bindings` defaults to the built-in table merged with
    `config.bindings_file`. A malformed bindings file raises
    ConfigurationError before detection starts.
    """
    working_directory = Path(working_directory)
    capability = Capability(capability)
    config = config or DispatchConfig()
    if bindings is None:
        bindings = load_bindings(config.bindings_file)

    detection = detect(working_directory)
    if not detection.is_detected:
        logger.error("Dispatch aborted for %s: %s", capability.value, detection.diagnostic)
        return ExecutionOutcome(
            state=DispatchState.UNRESOLVED,
            capability=capability.value,
            exit_code=EXIT_NOT_DETECTED,
            diagnostic=detection.diagnostic,
        )

    ecosystem = detection.ecosystem
    try:
        chain = resolve_command(ecosystem, capability, bindings)
    except ConfigurationError as exc:
        logger.error("Dispatch aborted: %s", exc)
        return ExecutionOutcome(
            state=DispatchState.ECOSYSTEM_KNOWN,
            capability=capability.value,
            ecosystem=ecosystem.value,
            exit_code=EXIT_CONFIGURATION_ERROR,
            diagnostic=str(exc),
        )

    resolved = [command.argv for command in chain]
    if config.dry_run:
        logger.info(
            "Dry run: %s/%s resolves to %s",
            ecosystem.value,
            capability.value,
            " && ".join(str(command) for command in chain),
        )
        return ExecutionOutcome(
            state=DispatchState.COMMAND_RESOLVED,
            capability=capability.value,
            ecosystem=ecosystem.value,
            exit_code=EXIT_SUCCESS,
            diagnostic=detection.diagnostic,
            resolved_commands=resolved,
        )

    steps, exit_code = run_chain(chain, working_directory, fail_fast=config.fail_fast)
    outcome = ExecutionOutcome(
        state=DispatchState.EXECUTED,
        capability=capability.value,
        ecosystem=ecosystem.value,
        exit_code=exit_code,
        steps=steps,
        diagnostic=detection.diagnostic,
        resolved_commands=resolved,
    )
    logger.info(
        "Dispatch %s: %s/%s exit=%d",
        "succeeded" if outcome.is_success else "failed",
        ecosystem.value,
        capability.value,
        exit_code,
    )
    return outcome
