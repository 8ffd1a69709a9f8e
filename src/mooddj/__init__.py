"""mooddj - Webcam facial mood inference for mood-driven playlists.

Turns a stream of FaceMesh landmarks into a smoothed, calibrated
happy / neutral / sad label.

Quick Start:
    >>> from mooddj import MoodSession
    >>> session = MoodSession.from_config()
    >>> session.subscribe(lambda old, new, scores: print(old, "->", new))
    >>> session.start()
    >>> session.capture_calibration("neutral")   # while looking neutral
    >>> session.stop()

Driving frames yourself:
    >>> from mooddj import MoodPipeline
    >>> pipeline = MoodPipeline()
    >>> snap = pipeline.process(landmarks)       # (478, 3) array or None
    >>> print(snap.label, f"{snap.scores.happy:.2f}")
"""

__version__ = "0.1.0"

from mooddj.errors import (
    CameraError,
    LandmarkError,
    MoodDJError,
    SourceUnavailableError,
)
from mooddj.types import (
    CalibrationBaseline,
    CalibrationState,
    FeatureVector,
    MoodLabel,
    MoodSnapshot,
    ScoreVector,
)
from mooddj.landmarks import extract_features
from mooddj.calibration import CalibrationStore
from mooddj.scoring import MoodScorer, ScoringConfig
from mooddj.smoothing import ScoreSmoother
from mooddj.state import MoodStateMachine, label_for
from mooddj.pipeline import MoodPipeline, MoodSession, PipelineConfig


__all__ = [
    "__version__",
    # Types
    "MoodLabel",
    "FeatureVector",
    "CalibrationBaseline",
    "CalibrationState",
    "ScoreVector",
    "MoodSnapshot",
    # Errors
    "MoodDJError",
    "LandmarkError",
    "SourceUnavailableError",
    "CameraError",
    # Components
    "extract_features",
    "CalibrationStore",
    "MoodScorer",
    "ScoringConfig",
    "ScoreSmoother",
    "MoodStateMachine",
    "label_for",
    # High-level API
    "MoodPipeline",
    "MoodSession",
    "PipelineConfig",
]
