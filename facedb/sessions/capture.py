"""Live face collection session.

Frames are pulled from a capture device, faces are recognized at a reduced
detection resolution and shown in a preview window. Key presses enroll the
first detected face as a training sample or as a portrait of the session's
person.

Controls:
    SPACE  : Save face sample and retrain
    p      : Save portrait
    q/ESC  : Quit
"""

import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Union

import cv2
import numpy as np

from ..camera import Camera, CameraConfig
from ..catalog import PathLike
from ..constants import Settings
from ..dataset import Dataset, load_dataset
from ..detection import BaseFaceDetector, HaarCascadeDetector
from ..errors import InsufficientTrainingData
from ..output import LIVE_LABEL_TEMPLATE, annotate, write_image
from ..recognition import BackgroundTrainer, FaceModel, RecognitionResult, recognize

logger = logging.getLogger(__name__)


class Intent(Enum):
    """User requests handled by the capture loop."""
    ENROLL_FACE = "enroll_face"
    ENROLL_PORTRAIT = "enroll_portrait"
    EXIT = "exit"


KEY_BINDINGS: Dict[int, Intent] = {
    27: Intent.EXIT,
    ord("q"): Intent.EXIT,
    ord("p"): Intent.ENROLL_PORTRAIT,
    ord(" "): Intent.ENROLL_FACE,
}


@dataclass
class CaptureSessionConfig:
    """Inputs of one live capture session."""
    cascade_path: PathLike
    data_path: PathLike
    device_id: Union[int, str]
    person_name: str


def validate_person_name(name: str) -> str:
    """Check a person name can be used as a database directory name."""
    name = name.strip()
    if not name:
        raise ValueError("Person name must not be empty")
    if name.startswith(".") or "/" in name or os.sep in name or any(c.isspace() for c in name):
        raise ValueError(f"Invalid person name: {name!r} (no spaces, slashes or leading dot)")
    return name


class OpenCVPreview:
    """Preview window backed by cv2.imshow."""

    def __init__(self, window_name: str = "face_collection"):
        self.window_name = window_name

    def show(self, image: np.ndarray) -> None:
        cv2.imshow(self.window_name, image)

    def poll_key(self) -> int:
        """Pressed key code, or -1 when no key was pressed."""
        key = cv2.waitKey(1)
        return -1 if key < 0 else key & 0xFF

    def close(self) -> None:
        cv2.destroyAllWindows()


class CaptureSession:
    """Interactive enrollment of one person's faces and portraits.

    Every enrolled face is saved, appended to the in-memory dataset and the
    model is retrained on the whole dataset. In ``sync`` mode the retrained
    model is in place before the next frame is processed; in ``background``
    mode the previous model keeps classifying until retraining finishes.
    """

    def __init__(
        self,
        config: CaptureSessionConfig,
        detector: BaseFaceDetector,
        model: FaceModel,
        dataset: Dataset,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.settings = settings or Settings()
        self.detector = detector
        self.model = model
        self.dataset = dataset
        self.clock = clock

        self.person_name = validate_person_name(config.person_name)
        db = self.settings.database
        self.faces_path = Path(config.data_path) / db.faces_dir / self.person_name
        self.portraits_path = Path(config.data_path) / db.portraits_dir / self.person_name

        self.trainer: Optional[BackgroundTrainer] = None
        if self.settings.capture.retrain == "background":
            self.trainer = BackgroundTrainer(model)

        self.sequence = 0
        self.pending: Set[Intent] = set()
        self.exit_requested = False
        self.saved_paths: List[Path] = []

    def prepare_directories(self) -> None:
        """Create the person's faces and portraits directories."""
        self.faces_path.mkdir(parents=True, exist_ok=True)
        self.portraits_path.mkdir(parents=True, exist_ok=True)

    def request(self, intent: Intent) -> None:
        if intent is Intent.EXIT:
            self.exit_requested = True
        else:
            self.pending.add(intent)

    def handle_key(self, key: int) -> Optional[Intent]:
        """Translate a key code into an intent and queue it."""
        intent = KEY_BINDINGS.get(key)
        if intent is not None:
            self.request(intent)
        return intent

    def process_frame(self, frame: np.ndarray) -> List[RecognitionResult]:
        """Recognize faces in a frame and serve pending enrollments.

        Pending enrollments wait until a frame contains a face; the first
        detected face is used.
        """
        results = recognize(
            frame,
            self.detector,
            self.model,
            detect_size=self.settings.capture.detect_frame_size,
            default_size=self.settings.database.face_size,
        )

        if results:
            first = results[0]
            if Intent.ENROLL_FACE in self.pending:
                self.pending.discard(Intent.ENROLL_FACE)
                self.enroll_face(first)
            if Intent.ENROLL_PORTRAIT in self.pending:
                self.pending.discard(Intent.ENROLL_PORTRAIT)
                self.enroll_portrait(frame, first)

        return results

    def _next_path(self, directory: Path) -> Path:
        filename = f"{int(self.clock())}_{self.sequence}{self.settings.capture.image_extension}"
        self.sequence += 1
        return directory / filename

    def enroll_face(self, result: RecognitionResult) -> Path:
        """Save a face sample, add it to the dataset and retrain."""
        image = result.face.image
        size = self.dataset.image_size or self.settings.database.face_size
        if (image.shape[1], image.shape[0]) != tuple(size):
            image = cv2.resize(image, tuple(size), interpolation=cv2.INTER_CUBIC)

        path = self._next_path(self.faces_path)
        write_image(path, image)
        self.saved_paths.append(path)
        logger.info(f'Image saved as "{path}"')

        label = self.dataset.registry.ensure(self.person_name)
        self.dataset.add(image, label)
        self.retrain()
        return path

    def enroll_portrait(self, frame: np.ndarray, result: RecognitionResult) -> Path:
        """Save the face region of the full-resolution frame as a portrait."""
        x, y, w, h = result.bbox
        portrait = frame[max(y, 0):y + h, max(x, 0):x + w]
        portrait = cv2.resize(portrait, self.settings.database.portrait_size, interpolation=cv2.INTER_CUBIC)

        path = self._next_path(self.portraits_path)
        write_image(path, portrait)
        self.saved_paths.append(path)
        logger.info(f'Image saved as "{path}"')
        return path

    def retrain(self) -> None:
        """Retrain the model on the full dataset when it is trainable."""
        try:
            self.model.check_trainable(self.dataset)
        except InsufficientTrainingData as e:
            logger.warning(f"Recognizer not retrained yet: {e}")
            return

        if self.trainer is not None:
            self.trainer.submit(self.dataset)
        else:
            self.model.train(self.dataset)

    def render(self, frame: np.ndarray, results: List[RecognitionResult]) -> np.ndarray:
        return annotate(frame, results, template=LIVE_LABEL_TEMPLATE)

    def run(self, camera: Camera, preview: Optional[OpenCVPreview] = None) -> None:
        """Run the capture loop until an exit is requested."""
        preview = preview or OpenCVPreview(self.settings.capture.window_name)
        logger.info("Capture started. SPACE: save face, p: save portrait, q/ESC: quit.")

        with camera:
            try:
                while not self.exit_requested:
                    frame = camera.read()
                    results = self.process_frame(frame)
                    preview.show(self.render(frame, results))
                    self.handle_key(preview.poll_key())
            finally:
                preview.close()
                if self.trainer is not None:
                    self.trainer.cancel()

        logger.info(f"Capture session ended, {len(self.saved_paths)} image(s) saved")


def run_capture_session(
    config: CaptureSessionConfig,
    settings: Optional[Settings] = None,
    detector: Optional[BaseFaceDetector] = None,
    model: Optional[FaceModel] = None,
    camera: Optional[Camera] = None,
    preview: Optional[OpenCVPreview] = None,
) -> CaptureSession:
    """Load the database, train, and run an interactive capture session.

    An untrainable database (for example an empty one) is not fatal here:
    faces are shown as unknown until enough people have been enrolled.
    """
    settings = settings or Settings()
    db = settings.database
    validate_person_name(config.person_name)

    data_path = Path(config.data_path)
    (data_path / db.faces_dir).mkdir(parents=True, exist_ok=True)
    (data_path / db.portraits_dir).mkdir(parents=True, exist_ok=True)

    dataset = load_dataset(data_path, face_size=db.face_size, faces_dir=db.faces_dir)

    model = model or FaceModel.from_config(settings.recognition)
    try:
        model.train(dataset)
    except InsufficientTrainingData as e:
        logger.warning(f"Starting without a trained recognizer: {e}")

    if detector is None:
        detector = HaarCascadeDetector.from_config(os.fspath(config.cascade_path), settings.detection)

    session = CaptureSession(config, detector, model, dataset, settings=settings)
    session.prepare_directories()

    camera = camera or Camera(CameraConfig(device=config.device_id))
    session.run(camera, preview)
    return session
