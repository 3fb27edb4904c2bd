"""Binding resolution and YAML overrides.

Overrides file format (ecosystem → capability → list of argv lists):

    rust:
      static-analysis:
        - [cargo, clippy, --all-targets]
        - [cargo, deny, check]
    python:
      copyright-check:
        - [bazel, run, "//:copyright.check"]
      format-check: null    # removes the binding

Unknown ecosystems or capabilities, empty chains and non-string arguments
are rejected with ConfigurationError rather than skipped.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from dispatcher.bindings.defaults import DEFAULT_BINDINGS
from dispatcher.bindings.types import (
    BindingTable,
    Capability,
    CommandChain,
    CommandSpec,
    ConfigurationError,
)
from dispatcher.detector.types import Ecosystem

logger = logging.getLogger(__name__)


def resolve_command(
    ecosystem: Ecosystem,
    capability: Capability,
    table: Optional[BindingTable] = None,
) -> CommandChain:
    """Return the command chain bound to (ecosystem, capability).

    Raises ConfigurationError when the pair has no binding.
    """
    table = DEFAULT_BINDINGS if table is None else table
    chain = table.get((ecosystem, capability))
    if not chain:
        supported = supported_capabilities(ecosystem, table)
        raise ConfigurationError(
            f"capability '{capability.value}' has no binding for ecosystem "
            f"'{ecosystem.value}' (bound: {', '.join(c.value for c in supported) or 'none'})"
        )
    logger.debug(
        "Resolved %s/%s to %d step(s)", ecosystem.value, capability.value, len(chain)
    )
    return chain


def supported_capabilities(
    ecosystem: Ecosystem,
    table: Optional[BindingTable] = None,
) -> list[Capability]:
    """List the capabilities bound for an ecosystem, in enum order."""
    table = DEFAULT_BINDINGS if table is None else table
    return [c for c in Capability if table.get((ecosystem, c))]


def merge_bindings(
    base: BindingTable,
    overrides: dict[tuple[Ecosystem, Capability], Optional[CommandChain]],
) -> BindingTable:
    """Return a new table with overrides applied. None removes a binding."""
    merged = dict(base)
    for key, chain in overrides.items():
        if chain is None:
            merged.pop(key, None)
        else:
            merged[key] = chain
    return merged


def load_binding_overrides(
    path: Path,
) -> dict[tuple[Ecosystem, Capability], Optional[CommandChain]]:
    """Parse a YAML bindings file into override entries."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read bindings file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping of ecosystems")

    overrides: dict[tuple[Ecosystem, Capability], Optional[CommandChain]] = {}
    for eco_name, capabilities in data.items():
        ecosystem = _parse_enum(Ecosystem, eco_name, path)
        if not isinstance(capabilities, dict):
            raise ConfigurationError(f"{path}: '{eco_name}' must map capabilities to commands")
        for cap_name, commands in capabilities.items():
            capability = _parse_enum(Capability, cap_name, path)
            location = f"{path}: {eco_name}.{cap_name}"
            overrides[(ecosystem, capability)] = (
                None if commands is None else _parse_chain(commands, location)
            )

    logger.info("Loaded %d binding override(s) from %s", len(overrides), path)
    return overrides


def load_bindings(bindings_file: Optional[Path] = None) -> BindingTable:
    """Return the defaults, merged with a bindings file when one is given."""
    if bindings_file is None:
        return dict(DEFAULT_BINDINGS)
    return merge_bindings(DEFAULT_BINDINGS, load_binding_overrides(bindings_file))


def _parse_enum(enum_cls, raw, path: Path):
    try:
        return enum_cls(str(raw))
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"{path}: unknown {enum_cls.__name__.lower()} '{raw}' (expected one of: {valid})"
        ) from None


def _parse_chain(commands, location: str) -> CommandChain:
    if not isinstance(commands, list) or not commands:
        raise ConfigurationError(f"{location}: expected a non-empty list of commands")

    chain: list[CommandSpec] = []
    for idx, argv in enumerate(commands):
        if (
            not isinstance(argv, list)
            or not argv
            or not all(isinstance(arg, str) and arg for arg in argv)
        ):
            raise ConfigurationError(
                f"{location}[{idx}]: each command must be a non-empty list of strings"
            )
        chain.append(CommandSpec(argv[0], tuple(argv[1:])))
    return tuple(chain)
