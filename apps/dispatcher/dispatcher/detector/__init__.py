"""Detector module for inferring a repository's ecosystem from Bazel manifests.

Public API:
    detect(working_directory) -> DetectionResult
"""

from dispatcher.detector.orchestrator import detect
from dispatcher.detector.types import DetectionResult, Ecosystem, EcosystemMarker

__all__ = ["detect", "DetectionResult", "Ecosystem", "EcosystemMarker"]
