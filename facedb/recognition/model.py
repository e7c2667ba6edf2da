"""Recognition model wrapper around the OpenCV ``cv2.face`` recognizers."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import cv2
import numpy as np

from ..constants import RecognitionConfig
from ..dataset import Dataset, LabelRegistry, check_trainable
from ..errors import FrameProcessingError, InsufficientTrainingData

logger = logging.getLogger(__name__)

# Factories are looked up lazily so importing this module does not
# require the contrib build of OpenCV.
BACKENDS: Dict[str, Callable[..., Any]] = {
    "fisher": lambda **kwargs: cv2.face.FisherFaceRecognizer_create(**kwargs),
    "eigen": lambda **kwargs: cv2.face.EigenFaceRecognizer_create(**kwargs),
    "lbph": lambda **kwargs: cv2.face.LBPHFaceRecognizer_create(**kwargs),
}

# (minimum samples, minimum distinct labels) each backend can train on
TRAINING_REQUIREMENTS: Dict[str, Tuple[int, int]] = {
    "fisher": (1, 2),
    "eigen": (2, 1),
    "lbph": (1, 1),
}


@dataclass
class TrainedState:
    """A trained recognizer together with what it was trained on."""
    recognizer: Any
    registry: LabelRegistry
    image_size: Tuple[int, int]
    sample_count: int


class FaceModel:
    """Statistical face recognizer trained on a Dataset.

    The model keeps a copy of the label registry and the training image
    size so predictions can be resolved and queries normalized the same
    way as the training samples.
    """

    def __init__(self, backend: str = "fisher", **params):
        """Initialize the model.

        Args:
            backend: Recognizer to use (fisher, eigen, lbph)
            **params: Keyword arguments for the cv2.face factory
        """
        if backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend: {backend}. "
                f"Available: {list(BACKENDS.keys())}"
            )

        self.backend_name = backend
        self.params = params
        self._lock = threading.Lock()
        self._state: Optional[TrainedState] = None
        self.version = 0

    @classmethod
    def from_config(cls, config: RecognitionConfig) -> "FaceModel":
        return cls(backend=config.backend, **config.params)

    @property
    def is_trained(self) -> bool:
        return self._state is not None

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        """(width, height) of the training samples, None if untrained."""
        state = self._state
        return state.image_size if state else None

    @property
    def registry(self) -> LabelRegistry:
        state = self._state
        return state.registry if state else LabelRegistry()

    @property
    def state(self) -> Optional[TrainedState]:
        """The installed TrainedState, None if untrained.

        Pass it to predict to classify every face of a frame with the same
        recognizer and registry.
        """
        with self._lock:
            return self._state

    def check_trainable(self, dataset: Dataset) -> None:
        """Raise InsufficientTrainingData if the backend cannot train on dataset."""
        min_samples, min_labels = TRAINING_REQUIREMENTS[self.backend_name]
        check_trainable(dataset, min_samples=min_samples, min_labels=min_labels)

    def fit(self, dataset: Dataset) -> TrainedState:
        """Train a fresh recognizer without installing it."""
        self.check_trainable(dataset)

        recognizer = BACKENDS[self.backend_name](**self.params)
        labels = np.asarray(dataset.labels, dtype=np.int32)
        try:
            recognizer.train(dataset.images, labels)
        except cv2.error as e:
            raise InsufficientTrainingData(f"Model training failed: {e}") from e

        return TrainedState(
            recognizer=recognizer,
            registry=dataset.registry.copy(),
            image_size=dataset.image_size,
            sample_count=len(dataset),
        )

    def install(self, state: TrainedState) -> None:
        """Swap in a trained recognizer."""
        with self._lock:
            self._state = state
            self.version += 1
        logger.info(
            f"Face recognizer trained on {state.sample_count} samples "
            f"of {len(state.registry)} people (version {self.version})"
        )

    def train(self, dataset: Dataset) -> None:
        """Train on the full dataset, replacing any previous training."""
        self.install(self.fit(dataset))

    def predict(self, image: np.ndarray, state: Optional[TrainedState] = None) -> Tuple[int, float]:
        """Predict the label of a normalized face image.

        Args:
            image: Grayscale face at the training image size
            state: Trained state to predict with (the installed one if None)

        Returns:
            Tuple of (label, confidence); lower confidence is a closer match
        """
        with self._lock:
            if state is None:
                state = self._state
            if state is None:
                raise RuntimeError("Face model has not been trained")
            try:
                label, confidence = state.recognizer.predict(image)
            except cv2.error as e:
                raise FrameProcessingError(f"Face classification failed: {e}") from e
        return int(label), float(confidence)
