"""Temporal smoothing of per-frame mood scores.

Exponential moving average over the score vector, plus a decay-to-default
policy: once the face has been missing for more than ``miss_threshold``
consecutive frames the smoothed vector is reset to the uniform default,
so a stale confident mood does not persist after the user leaves frame.

Each EMA step is a convex combination of two simplex points, so the
smoothed vector stays a valid distribution without renormalization.
"""

from __future__ import annotations

import logging

from mooddj.types import ScoreVector

logger = logging.getLogger(__name__)


class ScoreSmoother:
    """EMA smoother with a miss counter.

    Args:
        alpha: EMA weight of the newest sample, in (0, 1). Lower = smoother,
            more lag.
        miss_threshold: Consecutive missed frames tolerated before the
            scores are reset to uniform.
    """

    def __init__(self, alpha: float = 0.25, miss_threshold: int = 10):
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"alpha must be in (0, 1), got {alpha}")
        if miss_threshold < 0:
            raise ValueError(f"miss_threshold must be >= 0, got {miss_threshold}")
        self.alpha = alpha
        self.miss_threshold = miss_threshold
        self._scores = ScoreVector.uniform()
        self._missed = 0

    @property
    def scores(self) -> ScoreVector:
        return self._scores

    @property
    def missed_frames(self) -> int:
        return self._missed

    def update(self, raw: ScoreVector) -> ScoreVector:
        """Blend a new raw vector into the smoothed one (face present)."""
        s = self._scores
        a = self.alpha
        self._scores = ScoreVector(
            happy=s.happy + a * (raw.happy - s.happy),
            neutral=s.neutral + a * (raw.neutral - s.neutral),
            sad=s.sad + a * (raw.sad - s.sad),
        )
        self._missed = 0
        return self._scores

    def miss(self) -> ScoreVector:
        """Register a frame without a usable face."""
        self._missed += 1
        if self._missed > self.miss_threshold:
            if self._missed == self.miss_threshold + 1:
                logger.debug("Face lost for %d frames, decaying to neutral", self._missed)
            self._scores = ScoreVector.uniform()
        return self._scores

    def reset(self) -> None:
        self._scores = ScoreVector.uniform()
        self._missed = 0


__all__ = ["ScoreSmoother"]
