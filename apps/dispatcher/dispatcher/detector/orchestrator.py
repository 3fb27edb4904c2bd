"""Detector orchestrator — infers a project's ecosystem from its manifests.

Detection flow:
1. Read every Bazel manifest present at the top of the working directory.
2. Strip Starlark comments so commented-out rules never count.
3. Walk the signature in priority order; the first marker found in any
   manifest decides the ecosystem.
4. Keep scanning to record lower-priority ecosystems that are also present,
   so mixed-language directories are visible in the result and the logs.

Ecosystem priority (first match wins):
  cc_*   / rules_cc      → C/C++
  rust_* / rules_rust    → Rust
  py_*   / rules_python  → Python

Nothing is cached: manifests may change between CI runs, so every call
reads them again.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from dispatcher.detector.signatures import DEFAULT_SIGNATURE, MANIFEST_FILENAMES
from dispatcher.detector.types import DetectionResult, EcosystemMarker

logger = logging.getLogger(__name__)

# Single-line Starlark string literals, or a comment running to end of line.
_COMMENT_OR_STRING = re.compile(
    r'"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'"
    r"|#[^\n]*"
)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def detect(
    working_directory: Path,
    signature: Optional[Sequence[EcosystemMarker]] = None,
) -> DetectionResult:
    """Detect the ecosystem of the project rooted at `working_directory`.

    Returns a DetectionResult whose `ecosystem` is None when no marker
    matched. Never raises for a missing or unrecognised project.
    """
    working_directory = Path(working_directory)
    signature = tuple(signature) if signature is not None else DEFAULT_SIGNATURE

    result = DetectionResult(markers_tried=[m.pattern for m in signature])
    manifests = _read_manifests(working_directory)
    result.manifests_scanned = list(manifests)

    if not manifests:
        result.evidence.append(
            f"looked for {', '.join(MANIFEST_FILENAMES)} in {working_directory}"
        )
        _log_result(result)
        return result

    for marker in signature:
        pattern = _compile(marker.pattern)
        for name, text in manifests.items():
            if not pattern.search(text):
                continue
            if result.ecosystem is None:
                result.ecosystem = marker.ecosystem
                result.matched_marker = marker.pattern
                result.matched_manifest = name
                result.evidence.append(f"ecosystem: {marker.ecosystem.value} ({marker.pattern} in {name})")
            elif (
                marker.ecosystem != result.ecosystem
                and marker.ecosystem not in result.also_matched
            ):
                result.also_matched.append(marker.ecosystem)
                result.evidence.append(f"also present: {marker.ecosystem.value} ({marker.pattern} in {name})")

    _log_result(result)
    return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_manifests(working_directory: Path) -> dict[str, str]:
    """Return {filename: comment-stripped text} for every readable manifest."""
    manifests: dict[str, str] = {}
    for filename in MANIFEST_FILENAMES:
        path = working_directory / filename
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s: %s", path, exc)
            continue
        manifests[filename] = _strip_comments(text)
    return manifests


def _strip_comments(text: str) -> str:
    """Drop `#` comments; a `#` inside a quoted string is kept."""
    return _COMMENT_OR_STRING.sub(
        lambda m: "" if m.group().startswith("#") else m.group(), text
    )


def _compile(pattern: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(pattern)}\b")


def _log_result(result: DetectionResult) -> None:
    if not result.is_detected:
        logger.warning("Detection failed: %s", result.diagnostic)
        return
    logger.info(
        "Detection complete: ecosystem=%s marker=%s manifest=%s",
        result.ecosystem.value,
        result.matched_marker,
        result.matched_manifest,
    )
    if result.also_matched:
        logger.warning(
            "Mixed-language manifests: %s also present, using %s; "
            "run detection per sub-directory to cover them",
            ", ".join(e.value for e in result.also_matched),
            result.ecosystem.value,
        )
