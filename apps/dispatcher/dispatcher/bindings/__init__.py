"""Capability bindings: which command runs for each (ecosystem, capability).

Public API:
    resolve_command(ecosystem, capability, table=None) -> CommandChain
    load_bindings(bindings_file=None) -> BindingTable
"""

from dispatcher.bindings.defaults import DEFAULT_BINDINGS
from dispatcher.bindings.resolver import (
    load_binding_overrides,
    load_bindings,
    merge_bindings,
    resolve_command,
    supported_capabilities,
)
from dispatcher.bindings.types import (
    BindingTable,
    Capability,
    CommandChain,
    CommandSpec,
    ConfigurationError,
    DispatchError,
)

__all__ = [
    "DEFAULT_BINDINGS",
    "BindingTable",
    "Capability",
    "CommandChain",
    "CommandSpec",
    "ConfigurationError",
    "DispatchError",
    "load_binding_overrides",
    "load_bindings",
    "merge_bindings",
    "resolve_command",
    "supported_capabilities",
]
