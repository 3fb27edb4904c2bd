"""Types for capability → command bindings."""

from dataclasses import dataclass, field
from enum import StrEnum

from dispatcher.detector.types import Ecosystem


class Capability(StrEnum):
    """A named category of CI check requested by the caller."""

    LICENSE_CHECK = "license-check"
    STATIC_ANALYSIS = "static-analysis"
    TEST = "test"
    FORMAT_CHECK = "format-check"
    COPYRIGHT_CHECK = "copyright-check"


@dataclass(frozen=True)
class CommandSpec:
    """A program plus its arguments. Executed without a shell."""

    program: str
    args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)

    def to_dict(self) -> dict:
        return {"program": self.program, "args": list(self.args)}


# Ordered steps run for one (ecosystem, capability) pair.
CommandChain = tuple[CommandSpec, ...]

BindingTable = dict[tuple[Ecosystem, Capability], CommandChain]


class DispatchError(Exception):
    """Base class for dispatcher failures that must halt the caller."""


class ConfigurationError(DispatchError):
    """Raised when a binding is missing or a bindings file is malformed.

    Requesting an unbound (ecosystem, capability) pair is never a no-op:
    silently skipping a requested check would let a compliance gate pass.
    """
