"""Default ecosystem signatures for Bazel manifests."""

from dispatcher.detector.types import Ecosystem, EcosystemMarker

# Manifest filenames, scanned in this order.
MANIFEST_FILENAMES: tuple[str, ...] = (
    "MODULE.bazel",
    "BUILD.bazel",
    "BUILD",
    "WORKSPACE.bazel",
    "WORKSPACE",
)

# Evaluated in priority order: native before managed. First match wins.
DEFAULT_SIGNATURE: tuple[EcosystemMarker, ...] = (
    EcosystemMarker("cc_binary", Ecosystem.CPP),
    EcosystemMarker("cc_library", Ecosystem.CPP),
    EcosystemMarker("cc_test", Ecosystem.CPP),
    EcosystemMarker("rules_cc", Ecosystem.CPP),
    EcosystemMarker("rust_binary", Ecosystem.RUST),
    EcosystemMarker("rust_library", Ecosystem.RUST),
    EcosystemMarker("rust_test", Ecosystem.RUST),
    EcosystemMarker("rules_rust", Ecosystem.RUST),
    EcosystemMarker("py_binary", Ecosystem.PYTHON),
    EcosystemMarker("py_library", Ecosystem.PYTHON),
    EcosystemMarker("py_test", Ecosystem.PYTHON),
    EcosystemMarker("rules_python", Ecosystem.PYTHON),
)
