"""Mood scoring.

Example:
    >>> from mooddj.scoring import MoodScorer, ScoringConfig
    >>> scorer = MoodScorer(ScoringConfig(normalization="softmax", temperature=0.5))
    >>> scores = scorer.score(features, calibration_state)
"""

from mooddj.scoring.scorer import Evidence, MoodScorer, ScoringConfig

__all__ = ["MoodScorer", "ScoringConfig", "Evidence"]
