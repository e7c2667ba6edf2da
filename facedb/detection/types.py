"""Detected face data type."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class DetectedFace:
    """A detected face: bounding box plus the normalized grayscale crop.

    The box is in the coordinate space of the frame handed to the
    recognition pipeline. Detectors leave ``image`` unset; the pipeline
    fills it in.
    """

    x: int
    y: int
    width: int
    height: int
    image: Optional[np.ndarray] = None

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        """Return bounding box as (x, y, w, h)."""
        return (self.x, self.y, self.width, self.height)

    @property
    def top_left(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def bottom_right(self) -> Tuple[int, int]:
        return (self.x + self.width, self.y + self.height)
