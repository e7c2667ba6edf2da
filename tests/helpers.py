"""Test doubles and synthetic image helpers."""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from facedb.dataset import Dataset, LabelRegistry, check_trainable
from facedb.detection import BaseFaceDetector, DetectedFace
from facedb.recognition.model import TrainedState

Box = Tuple[int, int, int, int]


def face_pattern(name: str, seed: int, size: Tuple[int, int] = (64, 64)) -> np.ndarray:
    """Synthetic grayscale 'face' whose structure depends on the person."""
    width, height = size
    rng = np.random.default_rng(seed)
    # Per-person block pattern derived from the name
    person_rng = np.random.default_rng(sum(ord(c) for c in name))
    blocks = person_rng.integers(30, 225, size=(8, 8)).astype(np.float32)
    base = cv2.resize(blocks, (width, height), interpolation=cv2.INTER_NEAREST)
    noise = rng.integers(-8, 9, size=(height, width))
    return np.clip(base + noise, 0, 255).astype(np.uint8)


def write_database(
    root: Path,
    people: Dict[str, int],
    size: Tuple[int, int] = (64, 64),
    color: bool = False,
) -> Dict[str, List[np.ndarray]]:
    """Write faces/<name>/<i>.png for each person; returns the written images."""
    written = {}
    for name, count in people.items():
        person_dir = root / "faces" / name
        person_dir.mkdir(parents=True, exist_ok=True)
        written[name] = []
        for i in range(count):
            image = face_pattern(name, seed=i, size=size)
            if color:
                image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
            cv2.imwrite(str(person_dir / f"{i}.png"), image)
            written[name].append(image)
    return written


def frame_with_face(face: np.ndarray, position: Tuple[int, int], frame_size=(320, 240)) -> np.ndarray:
    """BGR frame with a grayscale face pasted at position (x, y)."""
    width, height = frame_size
    frame = np.full((height, width), 128, dtype=np.uint8)
    x, y = position
    frame[y:y + face.shape[0], x:x + face.shape[1]] = face
    return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)


class FakeDetector(BaseFaceDetector):
    """Detector returning fixed boxes, or one list of boxes per call."""

    def __init__(self, boxes: Sequence[Box] = (), per_call: Optional[List[Sequence[Box]]] = None):
        self.boxes = list(boxes)
        self.per_call = list(per_call) if per_call is not None else None
        self.calls: List[Tuple[int, ...]] = []

    def detect(self, image: np.ndarray) -> List[DetectedFace]:
        self.calls.append(image.shape)
        boxes = self.per_call.pop(0) if self.per_call else self.boxes
        return [DetectedFace(x=x, y=y, width=w, height=h) for (x, y, w, h) in boxes]


class FakeModel:
    """Recognition model that records calls and returns a fixed prediction."""

    backend_name = "fake"

    def __init__(
        self,
        prediction: Tuple[int, float] = (0, 12.5),
        names: Optional[Dict[int, str]] = None,
        image_size: Optional[Tuple[int, int]] = (64, 64),
        trained: bool = True,
    ):
        self.prediction = prediction
        self.registry = LabelRegistry(names if names is not None else {0: "alice"})
        self.image_size = image_size if trained else None
        self.is_trained = trained
        self.predicted: List[np.ndarray] = []
        self.trained_sizes: List[int] = []
        self.version = 1 if trained else 0

    @property
    def state(self) -> Optional[TrainedState]:
        if not self.is_trained:
            return None
        return TrainedState(recognizer=None, registry=self.registry,
                            image_size=self.image_size, sample_count=0)

    def predict(self, image: np.ndarray, state: Optional[TrainedState] = None) -> Tuple[int, float]:
        self.predicted.append(image)
        return self.prediction

    def check_trainable(self, dataset: Dataset) -> None:
        check_trainable(dataset, min_samples=1, min_labels=1)

    def train(self, dataset: Dataset) -> None:
        self.trained_sizes.append(len(dataset))
        self.registry = dataset.registry.copy()
        self.image_size = dataset.image_size
        self.is_trained = True
        self.version += 1


class FakeCamera:
    """Camera yielding prepared frames."""

    def __init__(self, frames: Sequence[np.ndarray]):
        self.frames = list(frames)
        self.opened = False
        self.released = False

    def read(self) -> np.ndarray:
        return self.frames.pop(0) if len(self.frames) > 1 else self.frames[0]

    def __enter__(self) -> "FakeCamera":
        self.opened = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.released = True


class FakePreview:
    """Preview window that replays key codes."""

    def __init__(self, keys: Sequence[int]):
        self.keys = list(keys)
        self.shown: List[np.ndarray] = []
        self.closed = False

    def show(self, image: np.ndarray) -> None:
        self.shown.append(image)

    def poll_key(self) -> int:
        return self.keys.pop(0) if self.keys else 27

    def close(self) -> None:
        self.closed = True
