"""Framework and monorepo detectors."""

from .base import Detector, first_match
from .framework import FRAMEWORK_EXTENSIONS, FrameworkDetector, get_extensions
from .monorepo import MONOREPO_MARKERS, MonorepoDetector

__all__ = [
    "Detector",
    "FRAMEWORK_EXTENSIONS",
    "FrameworkDetector",
    "MONOREPO_MARKERS",
    "MonorepoDetector",
    "first_match",
    "get_extensions",
]
