"""Mood scorer: features + calibration -> three-way mood distribution.

No trained classifier. Three evidence values are computed from
deviations against the calibration baseline, then normalized:

    Δsmile = corner_lift - baseline.smile_up
    Δopen  = mouth_open  - baseline.mouth_open
    Δeye   = eye_open    - baseline.eye_gap

    happy   = σ(k_s(Δsmile - c)) · ((1-w_o) + w_o·σ(k_o·Δopen))
    sad     = σ(k_s(-Δsmile - c)) · ((1-w_c) + w_c·σ(-k_o·Δopen))
                                  · ((1-w_e) + w_e·σ(-k_e·Δeye))
    neutral = exp(-Δsmile²/2σs² - Δopen²/2σo²) · (1 - λ·max(happy, sad))

Every curve is smooth, so small landmark noise moves the scores
continuously instead of flipping a threshold.

Example:
    >>> scorer = MoodScorer()
    >>> scores = scorer.score(features, store.snapshot())
    >>> print(f"happy={scores.happy:.2f}")
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from mooddj.types import CalibrationState, FeatureVector, ScoreVector

logger = logging.getLogger(__name__)

NORMALIZATIONS = ("ratio", "softmax")


@dataclass
class ScoringConfig:
    """Tuning constants for the mood scorer.

    Feature deltas are in interocular-distance units.

    Attributes:
        smile_slope: Sigmoid slope on Δsmile for happy/sad evidence.
        smile_offset: Δsmile at which happy (or -Δsmile at which sad) reaches 0.5.
        open_slope: Sigmoid slope on Δopen.
        eye_slope: Sigmoid slope on Δeye (sad only).
        happy_open_weight: Share of happy evidence driven by mouth opening.
        sad_closure_weight: Share of sad evidence driven by mouth closure.
        sad_eye_weight: Share of sad evidence driven by narrowed eyes.
        neutral_smile_sigma: Gaussian width of neutral evidence on Δsmile.
        neutral_open_sigma: Gaussian width of neutral evidence on Δopen.
        neutral_suppression: How strongly max(happy, sad) suppresses neutral.
        min_evidence: Lower bound on every evidence value.
        normalization: "ratio" (e / Σe) or "softmax" (with temperature).
        temperature: Softmax temperature (higher = flatter).
        neutral_floor: Minimum normalized neutral score (0 disables).
    """

    smile_slope: float = 40.0
    smile_offset: float = 0.03
    open_slope: float = 30.0
    eye_slope: float = 25.0

    happy_open_weight: float = 0.2
    sad_closure_weight: float = 0.25
    sad_eye_weight: float = 0.15

    neutral_smile_sigma: float = 0.04
    neutral_open_sigma: float = 0.06
    neutral_suppression: float = 0.5

    min_evidence: float = 1e-3
    normalization: str = "ratio"
    temperature: float = 1.0
    neutral_floor: float = 0.08

    def __post_init__(self) -> None:
        if self.normalization not in NORMALIZATIONS:
            raise ValueError(
                f"normalization must be one of {NORMALIZATIONS}, got {self.normalization!r}"
            )
        if self.temperature <= 0:
            raise ValueError(f"temperature must be > 0, got {self.temperature}")
        if not 0.0 <= self.neutral_floor < 1.0:
            raise ValueError(f"neutral_floor must be in [0, 1), got {self.neutral_floor}")
        if self.min_evidence <= 0:
            raise ValueError(f"min_evidence must be > 0, got {self.min_evidence}")
        if self.neutral_smile_sigma <= 0 or self.neutral_open_sigma <= 0:
            raise ValueError("neutral sigmas must be > 0")


@dataclass(frozen=True)
class Evidence:
    """Raw, non-negative, unnormalized support for each label."""

    happy: float
    neutral: float
    sad: float

    def strongest(self) -> str:
        """Name of the largest evidence (ties resolved happy > sad > neutral)."""
        if self.happy >= self.neutral and self.happy >= self.sad:
            return "happy"
        if self.sad >= self.neutral:
            return "sad"
        return "neutral"


class MoodScorer:
    """Heuristic mood scorer over calibrated feature deltas.

    Args:
        config: Scoring configuration (default: ScoringConfig()).
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self._config = config or ScoringConfig()

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def deltas(
        self, features: FeatureVector, state: CalibrationState,
    ) -> Tuple[float, float, float]:
        """Return (Δsmile, Δopen, Δeye) against the effective baseline."""
        baseline = state.effective_baseline
        return (
            features.corner_lift - baseline.smile_up,
            features.mouth_open - baseline.mouth_open,
            features.eye_open - baseline.eye_gap,
        )

    def evidence(self, features: FeatureVector, state: CalibrationState) -> Evidence:
        """Compute raw evidence values.

        When the calibration swap flag is set, neutral and sad evidence
        are exchanged here, before normalization.
        """
        cfg = self._config
        d_smile, d_open, d_eye = self.deltas(features, state)

        happy = _sigmoid(cfg.smile_slope * (d_smile - cfg.smile_offset)) * (
            (1.0 - cfg.happy_open_weight)
            + cfg.happy_open_weight * _sigmoid(cfg.open_slope * d_open)
        )

        sad = (
            _sigmoid(cfg.smile_slope * (-d_smile - cfg.smile_offset))
            * ((1.0 - cfg.sad_closure_weight)
               + cfg.sad_closure_weight * _sigmoid(-cfg.open_slope * d_open))
            * ((1.0 - cfg.sad_eye_weight)
               + cfg.sad_eye_weight * _sigmoid(-cfg.eye_slope * d_eye))
        )

        closeness = (
            _gaussian(d_smile, cfg.neutral_smile_sigma)
            * _gaussian(d_open, cfg.neutral_open_sigma)
        )
        neutral = closeness * max(0.0, 1.0 - cfg.neutral_suppression * max(happy, sad))

        happy = max(happy, cfg.min_evidence)
        neutral = max(neutral, cfg.min_evidence)
        sad = max(sad, cfg.min_evidence)

        if state.swap_neutral_sad:
            neutral, sad = sad, neutral

        return Evidence(happy=happy, neutral=neutral, sad=sad)

    def normalize(self, evidence: Evidence) -> ScoreVector:
        """Turn evidence into a probability distribution over the labels."""
        cfg = self._config
        values = np.array([evidence.happy, evidence.neutral, evidence.sad], dtype=np.float64)

        if cfg.normalization == "softmax":
            logits = values / cfg.temperature
            exp_scores = np.exp(logits - logits.max())
            probs = exp_scores / exp_scores.sum()
        else:
            probs = values / values.sum()

        happy, neutral, sad = (float(p) for p in probs)

        if cfg.neutral_floor > 0.0 and neutral < cfg.neutral_floor:
            rest = happy + sad
            share = (1.0 - cfg.neutral_floor) / rest
            happy *= share
            sad *= share
            neutral = cfg.neutral_floor

        return ScoreVector(happy=happy, neutral=neutral, sad=sad)

    def score(self, features: FeatureVector, state: CalibrationState) -> ScoreVector:
        """Raw per-frame score vector for one feature vector."""
        ev = self.evidence(features, state)
        scores = self.normalize(ev)
        logger.debug(
            "evidence h=%.3f n=%.3f s=%.3f -> scores h=%.3f n=%.3f s=%.3f",
            ev.happy, ev.neutral, ev.sad, scores.happy, scores.neutral, scores.sad,
        )
        return scores


def _sigmoid(x: float) -> float:
    """Logistic function that does not overflow for large |x|."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def _gaussian(d: float, sigma: float) -> float:
    """exp(-d²/2σ²), exactly 0.0 beyond 40σ."""
    z = d / sigma
    if abs(z) > 40.0:
        return 0.0
    return math.exp(-0.5 * z * z)


__all__ = ["MoodScorer", "ScoringConfig", "Evidence"]
