"""MediaPipe face landmark backends."""

from typing import List, Optional
from pathlib import Path
import logging
import urllib.request

import numpy as np

from mooddj.paths import get_models_dir

logger = logging.getLogger(__name__)

# Model download URL
FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


def _get_model_path() -> Path:
    """Get path to face landmarker model, downloading if necessary."""
    model_path = get_models_dir() / "face_landmarker.task"

    if not model_path.exists():
        logger.info(f"Downloading face landmarker model to {model_path}...")
        try:
            urllib.request.urlretrieve(FACE_LANDMARKER_MODEL_URL, model_path)
            logger.info("Download complete.")
        except Exception as e:
            raise RuntimeError(
                f"Failed to download face landmarker model: {e}\n"
                f"You can manually download from: {FACE_LANDMARKER_MODEL_URL}\n"
                f"And save to: {model_path}"
            ) from e

    return model_path


class MediaPipeFaceLandmarkerBackend:
    """MediaPipe Tasks FaceLandmarker backend.

    Uses MediaPipe Tasks API (0.10.x+). Returns 478 landmarks per face
    (FaceMesh topology with iris refinement) in normalized coordinates.

    Args:
        max_num_faces: Maximum number of faces to detect (default: 1).
        min_detection_confidence: Minimum confidence for detection (default: 0.5).
        min_tracking_confidence: Minimum confidence for tracking (default: 0.5).
    """

    name = "face_landmarker"

    def __init__(
        self,
        max_num_faces: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        self._max_num_faces = max_num_faces
        self._min_detection_confidence = min_detection_confidence
        self._min_tracking_confidence = min_tracking_confidence
        self._landmarker: Optional[object] = None
        self._initialized = False

    def initialize(self, device: str = "cpu") -> None:
        """Initialize MediaPipe FaceLandmarker.

        Args:
            device: Device to use (MediaPipe uses CPU by default).
        """
        if self._initialized:
            return

        try:
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as e:
            raise ImportError(
                "MediaPipe is required for landmark detection. "
                "Install it with: pip install mediapipe"
            ) from e

        model_path = _get_model_path()

        base_options = python.BaseOptions(model_asset_path=str(model_path))
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.IMAGE,
            num_faces=self._max_num_faces,
            min_face_detection_confidence=self._min_detection_confidence,
            min_tracking_confidence=self._min_tracking_confidence,
        )

        self._landmarker = vision.FaceLandmarker.create_from_options(options)
        self._initialized = True
        logger.info("MediaPipe FaceLandmarker backend initialized (Tasks API)")

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        """Detect faces and landmarks in an image.

        Args:
            image: BGR image as numpy array (H, W, 3).

        Returns:
            List of (478, 3) landmark arrays, one per face.
        """
        if not self._initialized or self._landmarker is None:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        import mediapipe as mp
        import cv2

        # MediaPipe expects RGB
        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image_rgb)

        result = self._landmarker.detect(mp_image)

        faces = []
        for face_lms in result.face_landmarks or []:
            faces.append(
                np.array([[lm.x, lm.y, lm.z] for lm in face_lms], dtype=np.float32)
            )
        return faces

    def cleanup(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        self._initialized = False
        logger.info("MediaPipe FaceLandmarker backend cleaned up")


class MediaPipeFaceMeshBackend:
    """Legacy MediaPipe Solutions FaceMesh backend.

    Needs no model download, so it serves as the fallback when the Tasks
    model cannot be fetched.

    Args:
        max_num_faces: Maximum number of faces to detect (default: 1).
        refine_landmarks: Add iris landmarks (478 points instead of 468).
        min_detection_confidence: Minimum confidence for detection (default: 0.5).
        min_tracking_confidence: Minimum confidence for tracking (default: 0.5).
    """

    name = "face_mesh"

    def __init__(
        self,
        max_num_faces: int = 1,
        refine_landmarks: bool = True,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        self._max_num_faces = max_num_faces
        self._refine_landmarks = refine_landmarks
        self._min_detection_confidence = min_detection_confidence
        self._min_tracking_confidence = min_tracking_confidence
        self._mesh: Optional[object] = None

    def initialize(self, device: str = "cpu") -> None:
        if self._mesh is not None:
            return

        try:
            import mediapipe as mp
        except ImportError as e:
            raise ImportError(
                "MediaPipe is required for landmark detection. "
                "Install it with: pip install mediapipe"
            ) from e

        self._mesh = mp.solutions.face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=self._max_num_faces,
            refine_landmarks=self._refine_landmarks,
            min_detection_confidence=self._min_detection_confidence,
            min_tracking_confidence=self._min_tracking_confidence,
        )
        logger.info("MediaPipe FaceMesh backend initialized (Solutions API)")

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        if self._mesh is None:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        import cv2

        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        rgb.flags.writeable = False
        res = self._mesh.process(rgb)

        faces = []
        for lm in res.multi_face_landmarks or []:
            faces.append(
                np.array([[p.x, p.y, p.z] for p in lm.landmark], dtype=np.float32)
            )
        return faces

    def cleanup(self) -> None:
        if self._mesh is not None:
            self._mesh.close()
            self._mesh = None
        logger.info("MediaPipe FaceMesh backend cleaned up")


BACKENDS = {
    MediaPipeFaceLandmarkerBackend.name: MediaPipeFaceLandmarkerBackend,
    MediaPipeFaceMeshBackend.name: MediaPipeFaceMeshBackend,
}


def create_backend(name: str, **kwargs):
    """Create a landmark backend by name.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        cls = BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown landmark backend: {name!r} (available: {', '.join(BACKENDS)})"
        ) from None
    return cls(**kwargs)


__all__ = [
    "MediaPipeFaceLandmarkerBackend",
    "MediaPipeFaceMeshBackend",
    "BACKENDS",
    "create_backend",
]
