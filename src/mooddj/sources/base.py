"""Protocol definitions for landmark and frame sources."""

from enum import Enum
from typing import List, Optional, Protocol

import numpy as np


class SourceStatus(str, Enum):
    """Readiness of a landmark source."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class LandmarkSource(Protocol):
    """Protocol for face landmark backends.

    Implementations return, per image, zero or more faces as
    ``(N, 3)`` arrays of frame-normalized FaceMesh landmarks.
    Only the first face is used downstream.
    """

    def initialize(self, device: str = "cpu") -> None:
        """Initialize the backend and load models."""
        ...

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        """Detect faces and their landmarks in a BGR image."""
        ...

    def cleanup(self) -> None:
        """Release resources and unload models."""
        ...


class FrameSource(Protocol):
    """Protocol for video frame providers (e.g. a webcam)."""

    def open(self) -> None:
        ...

    def read(self) -> Optional[np.ndarray]:
        """Return the next BGR frame, or None if none is available."""
        ...

    def close(self) -> None:
        ...


__all__ = ["SourceStatus", "LandmarkSource", "FrameSource"]
