"""Haar Cascade face detector."""

import logging
import os
from typing import List, Optional, Tuple

import cv2
import numpy as np

from ..constants import DetectionConfig
from ..errors import DetectorUnavailable
from .base import BaseFaceDetector
from .types import DetectedFace

logger = logging.getLogger(__name__)


def default_cascade_path() -> str:
    """Frontal face cascade shipped with OpenCV."""
    return cv2.data.haarcascades + "haarcascade_frontalface_default.xml"  # type: ignore


class HaarCascadeDetector(BaseFaceDetector):
    """Face detector using an OpenCV Haar Cascade file."""

    def __init__(
        self,
        cascade_path: Optional[str] = None,
        scale_factor: float = 1.1,
        min_neighbors: int = 3,
        min_size: Optional[Tuple[int, int]] = None,
    ):
        """Initialize Haar Cascade detector.

        Args:
            cascade_path: Cascade XML file (OpenCV's frontal face cascade if None)
            scale_factor: Scale factor for multi-scale detection
            min_neighbors: Minimum neighbors for detection
            min_size: Minimum face size to detect

        Raises:
            DetectorUnavailable: If the cascade cannot be loaded
        """
        self.cascade_path = os.fspath(cascade_path) if cascade_path else default_cascade_path()
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = min_size

        self.cascade = cv2.CascadeClassifier()
        try:
            loaded = self.cascade.load(self.cascade_path)
        except cv2.error as e:
            raise DetectorUnavailable(f"Failed to load cascade from {self.cascade_path}: {e}") from e
        if not loaded or self.cascade.empty():
            raise DetectorUnavailable(f"Failed to load cascade from {self.cascade_path}")

        logger.info(f"Face Haar-like cascade loaded from {self.cascade_path}")

    @classmethod
    def from_config(cls, cascade_path: Optional[str], config: DetectionConfig) -> "HaarCascadeDetector":
        """Create a detector from detection settings."""
        return cls(
            cascade_path=cascade_path,
            scale_factor=config.scale_factor,
            min_neighbors=config.min_neighbors,
            min_size=config.min_size,
        )

    def detect(self, image: np.ndarray) -> List[DetectedFace]:
        """Detect faces using Haar Cascade."""
        if image.ndim == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image

        kwargs = {}
        if self.min_size:
            kwargs["minSize"] = tuple(self.min_size)

        faces = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            **kwargs,
        )

        return [
            DetectedFace(x=int(x), y=int(y), width=int(w), height=int(h))
            for (x, y, w, h) in faces
        ]
