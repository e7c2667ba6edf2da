"""Face detection backends.

Only the Haar cascade backend is provided; the cascade definition file is
supplied by the caller.
"""

from .types import DetectedFace
from .base import BaseFaceDetector
from .haar import HaarCascadeDetector, default_cascade_path

__all__ = [
    "DetectedFace",
    "BaseFaceDetector",
    "HaarCascadeDetector",
    "default_cascade_path",
]
