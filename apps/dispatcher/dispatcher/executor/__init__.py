from dispatcher.executor.executor import run_chain, run_step
from dispatcher.executor.types import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_INTERRUPTED,
    EXIT_LAUNCH_FAILED,
    EXIT_SIGNAL_BASE,
    EXIT_NOT_DETECTED,
    EXIT_SUCCESS,
    DispatchState,
    ExecutionOutcome,
    StepResult,
)

__all__ = [
    "EXIT_CONFIGURATION_ERROR",
    "EXIT_INTERRUPTED",
    "EXIT_LAUNCH_FAILED",
    "EXIT_SIGNAL_BASE",
    "EXIT_NOT_DETECTED",
    "EXIT_SUCCESS",
    "DispatchState",
    "ExecutionOutcome",
    "StepResult",
    "run_chain",
    "run_step",
]
