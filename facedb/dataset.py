"""Face dataset loading.

The face database is a two-level directory tree::

    <database>/faces/<person name>/<image file>

Every person directory becomes one integer label and every image file one
grayscale sample normalized to the canonical recognition size.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import cv2
import numpy as np

from .catalog import PathLike, list_files, list_subdirectories
from .constants import FACES_DIR, STD_FACE_REC_SIZE
from .errors import DatasetUnavailable, InsufficientTrainingData, PathUnavailable

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = -1
UNKNOWN_NAME = "unknown"


@dataclass(frozen=True, eq=False)
class FaceSample:
    """A normalized grayscale face image and its label."""

    image: np.ndarray
    label: int

    @property
    def size(self) -> Tuple[int, int]:
        """Image size as (width, height)."""
        return (self.image.shape[1], self.image.shape[0])


class LabelRegistry:
    """Mapping between integer labels and person names.

    Labels and names are unique on both sides; entries are only ever added.
    """

    def __init__(self, names: Optional[Dict[int, str]] = None):
        self._names: Dict[int, str] = {}
        self._labels: Dict[str, int] = {}
        for label, name in (names or {}).items():
            self.add(label, name)

    def add(self, label: int, name: str) -> None:
        """Register a label for a name.

        Re-registering an identical pair is a no-op; any other collision
        raises ValueError.
        """
        if self._names.get(label) == name:
            return
        if label in self._names:
            raise ValueError(f"Label {label} already belongs to {self._names[label]!r}")
        if name in self._labels:
            raise ValueError(f"Name {name!r} already has label {self._labels[name]}")
        self._names[label] = name
        self._labels[name] = label

    def ensure(self, name: str) -> int:
        """Return the label of a name, assigning the next free one if new.

        A new name receives max(existing labels) + 1, or 0 when the registry
        is empty.
        """
        if name in self._labels:
            return self._labels[name]
        label = max(self._names) + 1 if self._names else 0
        self.add(label, name)
        logger.info(f"Assigned label {label} to {name}")
        return label

    def name_for(self, label: int, default: str = UNKNOWN_NAME) -> str:
        """Name of a label, or the default when the label is unknown."""
        return self._names.get(label, default)

    def label_for(self, name: str) -> Optional[int]:
        return self._labels.get(name)

    def copy(self) -> "LabelRegistry":
        return LabelRegistry(self._names)

    def as_dict(self) -> Dict[int, str]:
        return dict(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, label: object) -> bool:
        return label in self._names

    def __repr__(self) -> str:
        return f"LabelRegistry({self._names!r})"


@dataclass
class Dataset:
    """Ordered face samples plus the label registry.

    All samples share the dimensions of the first one.
    """

    samples: List[FaceSample] = field(default_factory=list)
    registry: LabelRegistry = field(default_factory=LabelRegistry)

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        """(width, height) of the samples, None while empty."""
        return self.samples[0].size if self.samples else None

    @property
    def images(self) -> List[np.ndarray]:
        return [sample.image for sample in self.samples]

    @property
    def labels(self) -> List[int]:
        return [sample.label for sample in self.samples]

    @property
    def distinct_labels(self) -> List[int]:
        return sorted(set(self.labels))

    def add(self, image: np.ndarray, label: int) -> FaceSample:
        """Append a sample.

        Raises:
            ValueError: If the label is unregistered or the image size
                differs from the existing samples
        """
        if label not in self.registry:
            raise ValueError(f"Label {label} is not registered")
        sample = FaceSample(image=image, label=label)
        if self.samples and sample.size != self.image_size:
            raise ValueError(
                f"Sample size {sample.size} does not match dataset size {self.image_size}"
            )
        self.samples.append(sample)
        return sample

    def snapshot(self) -> "Dataset":
        """Shallow copy safe to hand to another thread."""
        return Dataset(samples=list(self.samples), registry=self.registry.copy())

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[FaceSample]:
        return iter(self.samples)


def normalize_face(image: np.ndarray, size: Tuple[int, int] = STD_FACE_REC_SIZE) -> np.ndarray:
    """Convert to grayscale and resize to the canonical recognition size."""
    if image.ndim == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return cv2.resize(image, size, interpolation=cv2.INTER_CUBIC)


def load_face_image(path: PathLike, size: Tuple[int, int] = STD_FACE_REC_SIZE) -> np.ndarray:
    """Decode an image file as grayscale and normalize it.

    Raises:
        DatasetUnavailable: If the file cannot be decoded
    """
    image = cv2.imread(os.fspath(path), cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise DatasetUnavailable(f"Cannot decode the face image {os.fspath(path)}.")
    return normalize_face(image, size)


def load_dataset(
    database_root: PathLike,
    face_size: Tuple[int, int] = STD_FACE_REC_SIZE,
    faces_dir: str = FACES_DIR,
) -> Dataset:
    """Load every face sample from a face database.

    Person directories are labelled 0..N-1 in sorted name order, so the same
    set of people always gets the same labels.

    Args:
        database_root: Root of the face database
        face_size: (width, height) every sample is resized to
        faces_dir: Name of the faces sub-directory

    Returns:
        Dataset with one sample per image file

    Raises:
        DatasetUnavailable: If any directory or image cannot be read
    """
    face_data_path = Path(database_root) / faces_dir

    try:
        people = sorted(list_subdirectories(face_data_path))
    except PathUnavailable as e:
        raise DatasetUnavailable(f"Cannot read the face database directory {face_data_path}.") from e

    logger.info(f'Open face data directory "{face_data_path}". Now loading:')

    dataset = Dataset()
    for label, name in enumerate(people):
        person_path = face_data_path / name
        try:
            filenames = list_files(person_path)
        except PathUnavailable as e:
            raise DatasetUnavailable(f"Cannot read the face image directory {person_path}.") from e

        dataset.registry.add(label, name)
        logger.info(f"  - {name} [{label + 1}/{len(people)}]")

        for filename in filenames:
            dataset.add(load_face_image(person_path / filename, face_size), label)
            logger.info(f"      - {filename}")

    logger.info(f"Loaded {len(dataset)} face samples of {len(dataset.registry)} people")
    return dataset


def check_trainable(dataset: Dataset, min_samples: int = 1, min_labels: int = 2) -> None:
    """Ensure a dataset has enough data to train a recognition model.

    Raises:
        InsufficientTrainingData: If there are too few samples or labels
    """
    if len(dataset) < min_samples:
        raise InsufficientTrainingData(
            f"At least {min_samples} face sample(s) required, found {len(dataset)}."
        )
    labels = len(dataset.distinct_labels)
    if labels < min_labels:
        raise InsufficientTrainingData(
            f"At least {min_labels} different people required, found {labels}."
        )
