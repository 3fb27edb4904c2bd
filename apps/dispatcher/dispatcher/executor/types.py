"""Types for command execution and dispatch outcomes.

StepResult captures one external process. ExecutionOutcome captures a whole
dispatch, including how far it got through the state machine.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

# Exit codes owned by the dispatcher. Anything else comes from the tool.
EXIT_SUCCESS = 0
EXIT_NOT_DETECTED = 1
EXIT_CONFIGURATION_ERROR = 2

# Shell conventions: "command not found", and 128 + N for a tool killed by
# signal N (SIGKILL → 137). An interrupted dispatch exits with 130 (SIGINT).
EXIT_LAUNCH_FAILED = 127
EXIT_SIGNAL_BASE = 128
EXIT_INTERRUPTED = EXIT_SIGNAL_BASE + 2


class DispatchState(StrEnum):
    """Dispatch progress. Strictly forward, no retries."""

    UNRESOLVED = "unresolved"
    ECOSYSTEM_KNOWN = "ecosystem_known"
    COMMAND_RESOLVED = "command_resolved"
    EXECUTED = "executed"


@dataclass
class StepResult:
    """Result of one command in a chain.

    A step is successful if exit_code == 0. Steps skipped under fail-fast
    are recorded with `ran=False`.
    """

    name: str
    argv: list[str]
    exit_code: int
    duration_seconds: float = 0.0
    stdout: str = ""
    stderr: str = ""
    ran: bool = True

    @property
    def is_success(self) -> bool:
        return self.ran and self.exit_code == 0

    @property
    def is_launch_failure(self) -> bool:
        return self.exit_code == EXIT_LAUNCH_FAILED

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "argv": self.argv,
            "exit_code": self.exit_code,
            "duration_seconds": round(self.duration_seconds, 3),
            "stdout": self.stdout,
            "stderr": self.stderr,
            "ran": self.ran,
            "is_success": self.is_success,
        }


@dataclass
class ExecutionOutcome:
    """Complete dispatch result.

    `exit_code` is 0 on success, 1 when no ecosystem was detected, 2 when the
    capability is unbound, otherwise the first failing tool's own code.
    """

    state: DispatchState
    capability: str
    exit_code: int
    ecosystem: Optional[str] = None
    steps: list[StepResult] = field(default_factory=list)
    diagnostic: Optional[str] = None
    resolved_commands: list[list[str]] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.exit_code == EXIT_SUCCESS

    @property
    def failed_steps(self) -> list[StepResult]:
        return [s for s in self.steps if s.ran and not s.is_success]

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "capability": self.capability,
            "ecosystem": self.ecosystem,
            "exit_code": self.exit_code,
            "is_success": self.is_success,
            "diagnostic": self.diagnostic,
            "resolved_commands": self.resolved_commands,
            "steps": [s.to_dict() for s in self.steps],
            "total_duration_seconds": round(
                sum(s.duration_seconds for s in self.steps), 3
            ),
        }
