"""Session orchestrators.

- batch: recognize the faces in one image, write JSON and an annotated image
- portraits: list the portrait files stored for a person
- capture: live capture with interactive enrollment
"""

from .batch import BatchRecognitionConfig, load_image, run_batch_recognition
from .portraits import PortraitLookupConfig, lookup_portraits, run_portrait_lookup
from .capture import (
    KEY_BINDINGS,
    CaptureSession,
    CaptureSessionConfig,
    Intent,
    OpenCVPreview,
    run_capture_session,
    validate_person_name,
)

__all__ = [
    "BatchRecognitionConfig",
    "load_image",
    "run_batch_recognition",
    "PortraitLookupConfig",
    "lookup_portraits",
    "run_portrait_lookup",
    "KEY_BINDINGS",
    "CaptureSession",
    "CaptureSessionConfig",
    "Intent",
    "OpenCVPreview",
    "run_capture_session",
    "validate_person_name",
]
