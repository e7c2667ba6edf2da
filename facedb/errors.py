"""Error taxonomy for the face database tools.

Every condition is fatal to the orchestrator that hits it; the CLI turns
them into a logged message and a non-zero exit status.
"""


class FaceDBError(Exception):
    """Base class for all face database errors."""


class PathUnavailable(FaceDBError):
    """A directory could not be opened or listed."""


class DatasetUnavailable(FaceDBError):
    """The face database could not be traversed or decoded."""


class InsufficientTrainingData(FaceDBError):
    """Too few samples or labels to train the recognition model."""


class FrameProcessingError(FaceDBError):
    """An image or video frame could not be decoded or processed."""


class OutputWriteFailure(FaceDBError):
    """A result file or image could not be written."""


class DeviceUnavailable(FaceDBError):
    """The capture device could not be opened."""


class DetectorUnavailable(FaceDBError):
    """The face detector definition could not be loaded."""


class ConfigurationError(FaceDBError):
    """The settings file holds an invalid value."""
