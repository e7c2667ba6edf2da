"""Capture device wrapper."""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import cv2
import numpy as np

from .errors import DeviceUnavailable, FrameProcessingError

logger = logging.getLogger(__name__)


@dataclass
class CameraConfig:
    """Camera configuration."""
    device: Union[int, str] = 0
    # Requested resolution; the device default is kept when None
    width: Optional[int] = None
    height: Optional[int] = None


class Camera:
    """OpenCV video capture with scoped acquisition.

    Usage:
        with Camera(CameraConfig(device=0)) as camera:
            frame = camera.read()
    """

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()
        self._capture: Optional[cv2.VideoCapture] = None
        self._frame_count = 0

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def open(self) -> None:
        """Open the capture device.

        Raises:
            DeviceUnavailable: If the device cannot be opened
        """
        if self._capture is not None:
            return

        device = self.config.device
        if isinstance(device, str) and device.isdigit():
            device = int(device)

        capture = cv2.VideoCapture(device)
        if not capture.isOpened():
            capture.release()
            raise DeviceUnavailable(f"Capture Device ID {device} cannot be opened.")

        if self.config.width:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        if self.config.height:
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)

        self._capture = capture
        logger.info(f"Opened capture device {device}")

    def read(self) -> np.ndarray:
        """Grab the next frame.

        Raises:
            FrameProcessingError: If no frame can be grabbed
        """
        if self._capture is None:
            raise DeviceUnavailable("Capture device is not open.")

        ret, frame = self._capture.read()
        if not ret or frame is None:
            raise FrameProcessingError(f"Failed to grab frame {self._frame_count} from the capture device.")

        self._frame_count += 1
        return frame

    def release(self) -> None:
        """Release the device; safe to call more than once."""
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Capture device released")

    def __enter__(self) -> "Camera":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()
