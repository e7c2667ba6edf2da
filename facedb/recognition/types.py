"""Face recognition types."""

from dataclasses import dataclass
from typing import Tuple

from ..dataset import UNKNOWN_LABEL, UNKNOWN_NAME
from ..detection.types import DetectedFace


@dataclass
class RecognitionResult:
    """Result of recognizing one detected face.

    ``confidence`` is the model's distance: lower means a closer match.
    """

    face: DetectedFace
    label: int
    name: str
    confidence: float

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        return self.face.bbox

    @property
    def is_known(self) -> bool:
        """Check if the predicted label resolved to an enrolled person."""
        return self.label != UNKNOWN_LABEL and self.name != UNKNOWN_NAME
