"""Core data types for mood inference.

FeatureVector and raw ScoreVector values are frame-scoped; the smoothed
ScoreVector and CalibrationState are session-scoped. All are immutable so
readers on other threads can hold a reference without copying.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class MoodLabel(str, Enum):
    """Discrete mood label."""

    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"

    @classmethod
    def parse(cls, value: "str | MoodLabel") -> "MoodLabel":
        """Convert a label string (case-insensitive) to MoodLabel.

        Raises:
            ValueError: If the value is not one of happy/neutral/sad.
        """
        if isinstance(value, MoodLabel):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown mood label: {value!r} (expected happy, neutral or sad)"
            ) from None


@dataclass(frozen=True)
class FeatureVector:
    """Scale-normalized facial metrics for one frame.

    All values are divided by the interocular distance.

    Attributes:
        mouth_width: Distance between mouth corners.
        mouth_open: Distance between upper and lower inner lip.
        eye_open: Mean lid-to-lid distance across both eyes.
        corner_lift: Lip-center y minus mean corner y. Positive = upturn.
    """

    mouth_width: float
    mouth_open: float
    eye_open: float
    corner_lift: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "mouth_width": self.mouth_width,
            "mouth_open": self.mouth_open,
            "eye_open": self.eye_open,
            "corner_lift": self.corner_lift,
        }


@dataclass(frozen=True)
class CalibrationBaseline:
    """A user's neutral-face feature snapshot."""

    eye_gap: float
    mouth_open: float
    smile_up: float
    mouth_width: float

    @classmethod
    def from_features(cls, features: FeatureVector) -> CalibrationBaseline:
        return cls(
            eye_gap=features.eye_open,
            mouth_open=features.mouth_open,
            smile_up=features.corner_lift,
            mouth_width=features.mouth_width,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "eye_gap": self.eye_gap,
            "mouth_open": self.mouth_open,
            "smile_up": self.smile_up,
            "mouth_width": self.mouth_width,
        }


# Typical neutral face, used when no baseline has been captured.
DEFAULT_BASELINE = CalibrationBaseline(
    eye_gap=0.12,
    mouth_open=0.02,
    smile_up=0.0,
    mouth_width=0.9,
)


@dataclass(frozen=True)
class CalibrationState:
    """Immutable calibration snapshot read by the scorer each frame."""

    baseline: Optional[CalibrationBaseline] = None
    swap_neutral_sad: bool = False

    @property
    def effective_baseline(self) -> CalibrationBaseline:
        return self.baseline if self.baseline is not None else DEFAULT_BASELINE

    @property
    def is_calibrated(self) -> bool:
        return self.baseline is not None


@dataclass(frozen=True)
class ScoreVector:
    """Three-way mood distribution (components in [0, 1], sum 1)."""

    happy: float
    neutral: float
    sad: float

    @classmethod
    def uniform(cls) -> ScoreVector:
        """Default "don't know" distribution."""
        return cls(happy=0.33, neutral=0.34, sad=0.33)

    @property
    def total(self) -> float:
        return self.happy + self.neutral + self.sad

    def is_valid(self, tol: float = 1e-6) -> bool:
        """Check the simplex invariant within tolerance."""
        values = (self.happy, self.neutral, self.sad)
        if not all(math.isfinite(v) for v in values):
            return False
        if any(v < -tol or v > 1.0 + tol for v in values):
            return False
        return abs(self.total - 1.0) <= tol

    def get(self, label: MoodLabel) -> float:
        return getattr(self, MoodLabel.parse(label).value)

    def to_dict(self) -> Dict[str, float]:
        return {"happy": self.happy, "neutral": self.neutral, "sad": self.sad}


@dataclass(frozen=True)
class MoodSnapshot:
    """Externally observable result of one processed frame.

    Attributes:
        frame_id: Sequence number of the processed frame.
        label: Current mood label (derived from ``scores``).
        scores: Smoothed score vector.
        raw: Raw per-frame score vector (None when no face).
        features: Extracted features (None when no face).
        tracking: Whether a usable face was present in this frame.
        missed_frames: Consecutive frames without a usable face.
        stable_frames: Consecutive frames with a usable face, this one included.
    """

    frame_id: int = -1
    label: MoodLabel = MoodLabel.NEUTRAL
    scores: ScoreVector = field(default_factory=ScoreVector.uniform)
    raw: Optional[ScoreVector] = None
    features: Optional[FeatureVector] = None
    tracking: bool = False
    missed_frames: int = 0
    stable_frames: int = 0


__all__ = [
    "MoodLabel",
    "FeatureVector",
    "CalibrationBaseline",
    "CalibrationState",
    "DEFAULT_BASELINE",
    "ScoreVector",
    "MoodSnapshot",
]
