"""Webcam frame source backed by OpenCV VideoCapture."""

import logging
from typing import Optional, Tuple

import numpy as np

from mooddj.errors import CameraError

logger = logging.getLogger(__name__)

# Frames are downscaled before detection.
DETECT_WIDTH = 320
DETECT_HEIGHT = 240


class CameraSource:
    """Reads frames from a camera device.

    Args:
        device_index: OpenCV camera index (default: 0).
        resolution: Output (width, height); None keeps the native size.
    """

    def __init__(
        self,
        device_index: int = 0,
        resolution: Optional[Tuple[int, int]] = (DETECT_WIDTH, DETECT_HEIGHT),
    ):
        self._device_index = device_index
        self._resolution = resolution
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        """Open the camera.

        Raises:
            CameraError: If the device cannot be opened.
        """
        if self._cap is not None:
            return

        import cv2

        cap = cv2.VideoCapture(int(self._device_index))
        if not cap.isOpened():
            cap.release()
            raise CameraError(f"Cannot open camera index {self._device_index}")
        self._cap = cap
        logger.info("Camera %d opened", self._device_index)

    def read(self) -> Optional[np.ndarray]:
        """Grab one BGR frame; None if the camera produced nothing."""
        if self._cap is None:
            return None

        import cv2

        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None

        if self._resolution is not None:
            target_w, target_h = self._resolution
            h, w = frame.shape[:2]
            if w != target_w or h != target_h:
                frame = cv2.resize(frame, (target_w, target_h), interpolation=cv2.INTER_LINEAR)
        return frame

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera %d released", self._device_index)


__all__ = ["CameraSource", "DETECT_WIDTH", "DETECT_HEIGHT"]
