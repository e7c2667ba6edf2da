"""Face database tools.

Build and query a labeled face-image database::

    <database>/faces/<person name>/<image file>
    <database>/protraits/<person name>/<image file>

Quick Start:
    from facedb import load_dataset, FaceModel, HaarCascadeDetector, recognize

    dataset = load_dataset("data")
    model = FaceModel()
    model.train(dataset)
    results = recognize(image, HaarCascadeDetector("cascade.xml"), model)
"""

from .errors import (
    FaceDBError,
    PathUnavailable,
    DatasetUnavailable,
    InsufficientTrainingData,
    FrameProcessingError,
    OutputWriteFailure,
    DeviceUnavailable,
    DetectorUnavailable,
    ConfigurationError,
)
from .catalog import DirectoryEntry, EntryKind, list_directory
from .dataset import (
    UNKNOWN_LABEL,
    UNKNOWN_NAME,
    Dataset,
    FaceSample,
    LabelRegistry,
    check_trainable,
    load_dataset,
)
from .detection import BaseFaceDetector, DetectedFace, HaarCascadeDetector
from .recognition import BackgroundTrainer, FaceModel, RecognitionResult, recognize

__version__ = "1.0.0"

__all__ = [
    "FaceDBError",
    "PathUnavailable",
    "DatasetUnavailable",
    "InsufficientTrainingData",
    "FrameProcessingError",
    "OutputWriteFailure",
    "DeviceUnavailable",
    "DetectorUnavailable",
    "ConfigurationError",
    "DirectoryEntry",
    "EntryKind",
    "list_directory",
    "UNKNOWN_LABEL",
    "UNKNOWN_NAME",
    "Dataset",
    "FaceSample",
    "LabelRegistry",
    "check_trainable",
    "load_dataset",
    "BaseFaceDetector",
    "DetectedFace",
    "HaarCascadeDetector",
    "BackgroundTrainer",
    "FaceModel",
    "RecognitionResult",
    "recognize",
]
