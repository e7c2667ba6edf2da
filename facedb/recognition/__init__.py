"""Face recognition module.

Contains:
- FaceModel: cv2.face recognizer trained on a Dataset
- BackgroundTrainer: retraining on a worker thread
- recognize: the detect -> crop -> normalize -> classify pipeline
"""

from .types import RecognitionResult
from .model import BACKENDS, FaceModel, TrainedState
from .trainer import BackgroundTrainer
from .pipeline import recognize, scale_box, to_grayscale

__all__ = [
    "RecognitionResult",
    "BACKENDS",
    "FaceModel",
    "TrainedState",
    "BackgroundTrainer",
    "recognize",
    "scale_box",
    "to_grayscale",
]
