"""
Project language detection through installed detector packages.
"""

from .result import DetectResult
from .command import DETECTOR_CATEGORY, detect, run_detector

__all__ = [
    "DetectResult",
    "DETECTOR_CATEGORY",
    "detect",
    "run_detector",
]
