"""Landmark and frame sources.

MediaPipe and OpenCV are imported lazily, so this package can be used
without them (e.g. with a custom LandmarkSource).
"""

from mooddj.sources.base import FrameSource, LandmarkSource, SourceStatus
from mooddj.sources.camera import CameraSource
from mooddj.sources.fallback import FallbackLandmarkSource
from mooddj.sources.mediapipe_mesh import (
    BACKENDS,
    MediaPipeFaceLandmarkerBackend,
    MediaPipeFaceMeshBackend,
    create_backend,
)

__all__ = [
    "SourceStatus",
    "LandmarkSource",
    "FrameSource",
    "CameraSource",
    "FallbackLandmarkSource",
    "MediaPipeFaceLandmarkerBackend",
    "MediaPipeFaceMeshBackend",
    "BACKENDS",
    "create_backend",
]
