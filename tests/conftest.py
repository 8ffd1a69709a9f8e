"""Shared fixtures for mooddj tests.

All landmarks are synthetic FaceMesh layouts, NO ML models needed.
"""

import threading

import numpy as np
import pytest

from mooddj.calibration.store import CalibrationStore
from mooddj.landmarks import (
    LEFT_EYE_INNER,
    LEFT_EYE_LOWER,
    LEFT_EYE_OUTER,
    LEFT_EYE_UPPER,
    LOWER_INNER_LIP,
    MOUTH_LEFT,
    MOUTH_RIGHT,
    RIGHT_EYE_INNER,
    RIGHT_EYE_LOWER,
    RIGHT_EYE_OUTER,
    RIGHT_EYE_UPPER,
    UPPER_INNER_LIP,
)
from mooddj.pipeline.config import PipelineConfig, SmoothingConfig
from mooddj.pipeline.mood_pipeline import MoodPipeline


def make_landmarks(
    smile: float = 0.0,
    mouth_open: float = 0.02,
    eye_open: float = 0.12,
    mouth_width: float = 0.9,
    scale: float = 1.0,
    offset=(0.0, 0.0),
    count: int = 478,
) -> np.ndarray:
    """Build a (count, 3) landmark array whose features equal the arguments.

    Feature arguments are in interocular units: the eye centers are one
    unit apart, where one unit is ``0.2 * scale`` in frame coordinates.
    Defaults reproduce the built-in neutral baseline.
    """
    unit = 0.2 * scale
    cx, cy = 0.5 + offset[0], 0.5 + offset[1]

    def at(x, y):
        return (cx + x * unit, cy + y * unit, 0.0)

    pts = np.tile(np.array([cx, cy, 0.0]), (count, 1))

    # Eyes: centers at (-0.5, -0.5) and (+0.5, -0.5)
    pts[LEFT_EYE_OUTER] = at(-0.75, -0.5)
    pts[LEFT_EYE_INNER] = at(-0.25, -0.5)
    pts[LEFT_EYE_UPPER] = at(-0.5, -0.5 - eye_open / 2)
    pts[LEFT_EYE_LOWER] = at(-0.5, -0.5 + eye_open / 2)
    pts[RIGHT_EYE_INNER] = at(0.25, -0.5)
    pts[RIGHT_EYE_OUTER] = at(0.75, -0.5)
    pts[RIGHT_EYE_UPPER] = at(0.5, -0.5 - eye_open / 2)
    pts[RIGHT_EYE_LOWER] = at(0.5, -0.5 + eye_open / 2)

    # Mouth: lip center at (0, +0.5); corners lifted by ``smile``
    pts[UPPER_INNER_LIP] = at(0.0, 0.5 - mouth_open / 2)
    pts[LOWER_INNER_LIP] = at(0.0, 0.5 + mouth_open / 2)
    pts[MOUTH_LEFT] = at(-mouth_width / 2, 0.5 - smile)
    pts[MOUTH_RIGHT] = at(mouth_width / 2, 0.5 - smile)
    return pts


def neutral_face(**kwargs) -> np.ndarray:
    return make_landmarks(**kwargs)


def smiling_face(**kwargs) -> np.ndarray:
    """Δsmile = +0.1, Δopen = +0.05 against the default baseline."""
    params = dict(smile=0.1, mouth_open=0.07)
    params.update(kwargs)
    return make_landmarks(**params)


def sad_face(**kwargs) -> np.ndarray:
    """Downturned corners, closed mouth, narrowed eyes."""
    params = dict(smile=-0.1, mouth_open=0.0, eye_open=0.09)
    params.update(kwargs)
    return make_landmarks(**params)


def collapsed_eyes_face(gap: float = 4e-158) -> np.ndarray:
    """Neutral layout with both eye centers squeezed ``gap`` apart."""
    pts = make_landmarks()
    pts[LEFT_EYE_OUTER] = pts[LEFT_EYE_INNER] = (0.0, 0.4, 0.0)
    pts[RIGHT_EYE_INNER] = pts[RIGHT_EYE_OUTER] = (gap, 0.4, 0.0)
    return pts


class FakeFrameSource:
    """FrameSource returning a fixed blank image."""

    def __init__(self, fail_open: bool = False):
        self.fail_open = fail_open
        self.open_count = 0
        self.close_count = 0
        self.is_open = False

    def open(self):
        from mooddj.errors import CameraError

        if self.fail_open:
            raise CameraError("camera busy")
        self.open_count += 1
        self.is_open = True

    def read(self):
        if not self.is_open:
            return None
        return np.zeros((240, 320, 3), dtype=np.uint8)

    def close(self):
        self.close_count += 1
        self.is_open = False


class FakeLandmarkSource:
    """LandmarkSource replaying a fixed face (or a callable per call)."""

    name = "fake"

    def __init__(self, face=None, fail_init: int = 0, raise_on_detect=None):
        self.face = face
        self.fail_init = fail_init
        self.raise_on_detect = raise_on_detect
        self.init_calls = 0
        self.detect_calls = 0
        self.cleaned_up = False
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def initialize(self, device="cpu"):
        self.init_calls += 1
        if self.init_calls <= self.fail_init:
            raise RuntimeError(f"init failure {self.init_calls}")

    def detect(self, image):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.detect_calls += 1
            if self.raise_on_detect is not None:
                raise self.raise_on_detect
            face = self.face() if callable(self.face) else self.face
            return [] if face is None else [face]
        finally:
            with self._lock:
                self.in_flight -= 1

    def cleanup(self):
        self.cleaned_up = True


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep calibration files and model caches out of the real home dir."""
    home = tmp_path / "mooddj_home"
    monkeypatch.setenv("MOODDJ_HOME", str(home))
    monkeypatch.delenv("MOODDJ_MODELS_DIR", raising=False)
    return home


@pytest.fixture
def store():
    """In-memory calibration store with a short stability requirement."""
    return CalibrationStore(min_stable_frames=3)


@pytest.fixture
def pipeline(store):
    """Pipeline with α=0.2 and an in-memory calibration store."""
    config = PipelineConfig(smoothing=SmoothingConfig(alpha=0.2, miss_threshold=10))
    return MoodPipeline(config=config, calibration=store)
