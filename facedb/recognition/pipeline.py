"""Detect, crop, normalize and classify faces in a frame."""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

import cv2
import numpy as np

from ..constants import STD_FACE_REC_SIZE
from ..dataset import UNKNOWN_LABEL, UNKNOWN_NAME
from ..detection.base import BaseFaceDetector
from ..errors import FrameProcessingError
from .model import FaceModel
from .types import RecognitionResult

logger = logging.getLogger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR/BGRA image to grayscale; grayscale passes through."""
    if image.ndim == 2:
        return image
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def scale_box(
    bbox: Tuple[int, int, int, int],
    scale: Tuple[float, float],
) -> Tuple[int, int, int, int]:
    """Map a box between coordinate spaces by (x, y) scale factors."""
    x, y, w, h = bbox
    sx, sy = scale
    return (int(x * sx), int(y * sy), int(w * sx), int(h * sy))


def recognize(
    frame: np.ndarray,
    detector: BaseFaceDetector,
    model: FaceModel,
    detect_size: Optional[Tuple[int, int]] = None,
    default_size: Tuple[int, int] = STD_FACE_REC_SIZE,
) -> List[RecognitionResult]:
    """Recognize every face in a frame.

    Args:
        frame: BGR or grayscale image
        detector: Face detector
        model: Recognition model; an untrained model yields unknown results
        detect_size: (width, height) to down-scale the frame to before
            detection. Boxes are mapped back to the frame's resolution.
        default_size: Crop size used while the model is untrained

    Returns:
        One RecognitionResult per detected face, in detector order

    Raises:
        FrameProcessingError: If the frame cannot be processed
    """
    if not isinstance(frame, np.ndarray) or frame.size == 0 or frame.ndim not in (2, 3):
        raise FrameProcessingError("Cannot process an empty or malformed frame.")

    frame_h, frame_w = frame.shape[:2]
    scale = (1.0, 1.0)
    try:
        if detect_size is not None:
            detect_w, detect_h = detect_size
            frame = cv2.resize(frame, (detect_w, detect_h), interpolation=cv2.INTER_CUBIC)
            scale = (frame_w / detect_w, frame_h / detect_h)
        gray = to_grayscale(frame)
        faces = detector.detect(gray)
    except cv2.error as e:
        raise FrameProcessingError(f"Face detection failed: {e}") from e

    logger.debug(f"{len(faces)} faces detected")

    # One trained state per frame; a background retrain may install a new one meanwhile
    state = model.state
    size = state.image_size if state else default_size
    results = []
    for face in faces:
        x, y, w, h = face.bbox
        crop = gray[y:y + h, x:x + w]
        if crop.size == 0:
            raise FrameProcessingError(f"Detected face {face.bbox} lies outside the frame.")
        try:
            face_image = cv2.resize(crop, size, interpolation=cv2.INTER_CUBIC)
        except cv2.error as e:
            raise FrameProcessingError(f"Cannot normalize detected face: {e}") from e

        if state is not None:
            label, confidence = model.predict(face_image, state)
            name = state.registry.name_for(label)
        else:
            label, confidence, name = UNKNOWN_LABEL, float("inf"), UNKNOWN_NAME

        if scale != (1.0, 1.0):
            x, y, w, h = scale_box(face.bbox, scale)
        results.append(RecognitionResult(
            face=replace(face, x=x, y=y, width=w, height=h, image=face_image),
            label=label,
            name=name,
            confidence=confidence,
        ))

    return results
