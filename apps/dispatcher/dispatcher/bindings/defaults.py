"""Default command chains, keyed by (ecosystem, capability)."""

from dispatcher.bindings.types import BindingTable, Capability, CommandSpec
from dispatcher.detector.types import Ecosystem

LICENSE_CHECK_CMD = CommandSpec("bazel", ("run", "//:license-check"))
COPYRIGHT_CHECK_CMD = CommandSpec("bazel", ("run", "//:copyright.check"))
BAZEL_TEST_CMD = CommandSpec("bazel", ("test", "//..."))

CLIPPY_CMD = CommandSpec(
    "cargo", ("clippy", "--all-targets", "--all-features", "--", "-D", "warnings")
)
CARGO_AUDIT_CMD = CommandSpec("cargo", ("audit",))
CARGO_VET_CMD = CommandSpec("cargo", ("vet", "--locked"))

DEFAULT_BINDINGS: BindingTable = {
    (Ecosystem.CPP, Capability.LICENSE_CHECK): (LICENSE_CHECK_CMD,),
    (Ecosystem.CPP, Capability.STATIC_ANALYSIS): (
        CommandSpec("bazel", ("build", "--config=clang-tidy", "//...")),
    ),
    (Ecosystem.CPP, Capability.TEST): (BAZEL_TEST_CMD,),
    (Ecosystem.CPP, Capability.FORMAT_CHECK): (
        CommandSpec("bazel", ("test", "//:format.check")),
    ),
    (Ecosystem.CPP, Capability.COPYRIGHT_CHECK): (COPYRIGHT_CHECK_CMD,),

    (Ecosystem.RUST, Capability.LICENSE_CHECK): (LICENSE_CHECK_CMD,),
    # Linter, then dependency audit, then supply-chain vetting.
    (Ecosystem.RUST, Capability.STATIC_ANALYSIS): (
        CLIPPY_CMD,
        CARGO_AUDIT_CMD,
        CARGO_VET_CMD,
    ),
    (Ecosystem.RUST, Capability.TEST): (BAZEL_TEST_CMD,),
    (Ecosystem.RUST, Capability.FORMAT_CHECK): (
        CommandSpec("cargo", ("fmt", "--all", "--", "--check")),
    ),
    (Ecosystem.RUST, Capability.COPYRIGHT_CHECK): (COPYRIGHT_CHECK_CMD,),

    (Ecosystem.PYTHON, Capability.LICENSE_CHECK): (LICENSE_CHECK_CMD,),
    (Ecosystem.PYTHON, Capability.STATIC_ANALYSIS): (
        CommandSpec("ruff", ("check", ".")),
        CommandSpec("mypy", (".",)),
    ),
    (Ecosystem.PYTHON, Capability.TEST): (BAZEL_TEST_CMD,),
    (Ecosystem.PYTHON, Capability.FORMAT_CHECK): (
        CommandSpec("ruff", ("format", "--check", ".")),
    ),
    # No copyright-check binding for Python projects yet.
}
