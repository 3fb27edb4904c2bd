"""Shared types for the detector module.

All detector outputs conform to DetectionResult, which carries the
resolved ecosystem (or none) along with the evidence that led to it.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional


class Ecosystem(StrEnum):
    """Supported language/toolchain families."""

    CPP = "cpp"
    RUST = "rust"
    PYTHON = "python"


@dataclass(frozen=True)
class EcosystemMarker:
    """A whole-word pattern that identifies an ecosystem in a manifest."""

    pattern: str
    ecosystem: Ecosystem


@dataclass
class DetectionResult:
    """Complete detection output for a working directory.

    `ecosystem` is None when nothing matched; that is a normal outcome and
    callers check `is_detected` rather than catching an exception.
    `also_matched` lists lower-priority ecosystems whose markers were present
    too (mixed-language directories).
    """

    ecosystem: Optional[Ecosystem] = None
    matched_marker: Optional[str] = None
    matched_manifest: Optional[str] = None
    manifests_scanned: list[str] = field(default_factory=list)
    markers_tried: list[str] = field(default_factory=list)
    also_matched: list[Ecosystem] = field(default_factory=list)
    evidence: list[str] = field(default_factory=list)

    @property
    def is_detected(self) -> bool:
        return self.ecosystem is not None

    @property
    def diagnostic(self) -> str:
        """Human-readable explanation of the detection outcome."""
        if self.is_detected:
            return (
                f"detected {self.ecosystem.value} via '{self.matched_marker}' "
                f"in {self.matched_manifest}"
            )
        if not self.manifests_scanned:
            return "no build manifest found; " + "; ".join(self.evidence)
        return (
            f"no ecosystem marker matched in {', '.join(self.manifests_scanned)}; "
            f"markers tried: {', '.join(self.markers_tried)}"
        )

    def to_dict(self) -> dict:
        return {
            "ecosystem": self.ecosystem.value if self.ecosystem else None,
            "is_detected": self.is_detected,
            "matched_marker": self.matched_marker,
            "matched_manifest": self.matched_manifest,
            "manifests_scanned": self.manifests_scanned,
            "markers_tried": self.markers_tried,
            "also_matched": [e.value for e in self.also_matched],
            "evidence": self.evidence,
            "diagnostic": self.diagnostic,
        }
