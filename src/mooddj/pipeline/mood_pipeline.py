"""MoodPipeline - one frame of landmarks in, one MoodSnapshot out.

Landmarks -> features -> raw scores (with calibration snapshot)
-> EMA smoothing -> label. A missing or malformed face counts as a miss.

The pipeline has a single writer (whoever calls ``process``); the
read-only properties may be polled from other threads and always return
the latest complete immutable snapshot.

Example:
    >>> pipeline = MoodPipeline()
    >>> snap = pipeline.process(landmarks)      # (478, 3) array or None
    >>> print(snap.label, snap.scores.happy)
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from mooddj.calibration.store import CalibrationStore
from mooddj.errors import LandmarkError
from mooddj.landmarks import extract_features
from mooddj.observability.hub import ObservabilityHub
from mooddj.observability.records import (
    CalibrationRecord,
    MoodChangeRecord,
    MoodFrameRecord,
    TraceLevel,
)
from mooddj.pipeline.config import PipelineConfig
from mooddj.scoring.scorer import MoodScorer
from mooddj.smoothing import ScoreSmoother
from mooddj.state import MoodListener, MoodStateMachine, label_for
from mooddj.types import (
    CalibrationState,
    FeatureVector,
    MoodLabel,
    MoodSnapshot,
    ScoreVector,
)

logger = logging.getLogger(__name__)


class MoodPipeline:
    """Per-frame mood inference.

    Args:
        config: Pipeline configuration (default: PipelineConfig()).
        calibration: Calibration store. Defaults to one built from
            ``config.calibration``.
        hub: Optional observability hub for trace records.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        calibration: Optional[CalibrationStore] = None,
        hub: Optional[ObservabilityHub] = None,
    ):
        self._config = config or PipelineConfig()
        if calibration is None:
            cal_cfg = self._config.calibration
            calibration = CalibrationStore(
                path=cal_cfg.resolve_path(),
                namespace=cal_cfg.namespace,
                min_stable_frames=cal_cfg.min_stable_frames,
            )
        self._calibration = calibration
        self._hub = hub

        self._scorer = MoodScorer(self._config.scoring)
        self._smoother = ScoreSmoother(
            alpha=self._config.smoothing.alpha,
            miss_threshold=self._config.smoothing.miss_threshold,
        )
        self._state = MoodStateMachine()
        self._state.subscribe(self._trace_mood_change)

        self._frame_id = -1
        self._snapshot = MoodSnapshot()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def calibration(self) -> CalibrationStore:
        return self._calibration

    @property
    def scorer(self) -> MoodScorer:
        return self._scorer

    @property
    def snapshot(self) -> MoodSnapshot:
        return self._snapshot

    @property
    def mood(self) -> MoodLabel:
        return self._snapshot.label

    @property
    def scores(self) -> ScoreVector:
        return self._snapshot.scores

    @property
    def tracking(self) -> bool:
        return self._snapshot.tracking

    @property
    def stable_frames(self) -> int:
        """Consecutive frames with a usable face."""
        return self._snapshot.stable_frames

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------
    def process(self, landmarks: Any) -> MoodSnapshot:
        """Run one frame through the pipeline.

        Args:
            landmarks: Landmark array of the first detected face, or None
                when no face was detected.

        Returns:
            The new MoodSnapshot.
        """
        start_ns = time.perf_counter_ns()
        self._frame_id += 1

        features: Optional[FeatureVector] = None
        if landmarks is not None:
            try:
                features = extract_features(landmarks)
            except LandmarkError as e:
                logger.debug("Frame %d: malformed landmarks (%s)", self._frame_id, e)

        raw: Optional[ScoreVector] = None
        if features is not None:
            cal = self._calibration.snapshot()
            raw = self._scorer.score(features, cal)
            if not raw.is_valid():
                logger.debug("Frame %d: unusable scores %s", self._frame_id, raw)
                features = raw = None

        if raw is not None:
            smoothed = self._smoother.update(raw)
            stable = self._snapshot.stable_frames + 1
        else:
            smoothed = self._smoother.miss()
            stable = 0

        # Publish the snapshot before notifying listeners so they observe it.
        # Features and stability travel together so captures read one frame.
        self._snapshot = MoodSnapshot(
            frame_id=self._frame_id,
            label=label_for(smoothed),
            scores=smoothed,
            raw=raw,
            features=features,
            tracking=features is not None,
            missed_frames=self._smoother.missed_frames,
            stable_frames=stable,
        )
        self._state.update(smoothed)

        self._trace_frame(self._snapshot, (time.perf_counter_ns() - start_ns) / 1e6)
        return self._snapshot

    def reset(self) -> None:
        """Reset smoothing and tracking state; calibration is kept."""
        self._smoother.reset()
        self._state.reset()
        self._snapshot = MoodSnapshot(frame_id=self._frame_id)

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------
    def capture_calibration(self, label: str | MoodLabel = MoodLabel.NEUTRAL) -> bool:
        """Capture the current features as the calibration for ``label``.

        Ignored (returns False) when no face is tracked or tracking has not
        been stable for long enough.
        """
        label = MoodLabel.parse(label)
        snap = self._snapshot
        stable = snap.stable_frames
        accepted = self._calibration.capture(label, snap.features, stable)
        state = self._calibration.snapshot()
        self._trace_calibration("capture", state, label=label.value,
                                accepted=accepted, stable_frames=stable)
        return accepted

    def clear_calibration(self) -> None:
        self._calibration.clear()
        self._trace_calibration("clear", self._calibration.snapshot())

    def swap_neutral_sad(self) -> bool:
        swapped = self._calibration.swap()
        self._trace_calibration("swap", self._calibration.snapshot())
        return swapped

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def subscribe(self, listener: MoodListener) -> None:
        """Register ``listener(old_label, new_label, scores)`` for label changes."""
        self._state.subscribe(listener)

    def unsubscribe(self, listener: MoodListener) -> None:
        self._state.unsubscribe(listener)

    # ------------------------------------------------------------------
    # Tracing
    # ------------------------------------------------------------------
    def _trace_frame(self, snap: MoodSnapshot, processing_ms: float) -> None:
        hub = self._hub
        if hub is None or not hub.is_level_enabled(TraceLevel.NORMAL):
            return
        record = MoodFrameRecord(
            frame_id=snap.frame_id,
            tracking=snap.tracking,
            label=snap.label.value,
            happy=snap.scores.happy,
            neutral=snap.scores.neutral,
            sad=snap.scores.sad,
            missed_frames=snap.missed_frames,
            processing_ms=processing_ms,
        )
        if hub.is_level_enabled(TraceLevel.VERBOSE):
            if snap.features is not None:
                record.features = snap.features.to_dict()
            if snap.raw is not None:
                record.raw = snap.raw.to_dict()
        hub.emit(record)

    def _trace_mood_change(self, old: MoodLabel, new: MoodLabel, scores: ScoreVector) -> None:
        if self._hub is None:
            return
        self._hub.emit(MoodChangeRecord(
            frame_id=self._frame_id,
            old_label=old.value,
            new_label=new.value,
            scores=scores.to_dict(),
        ))

    def _trace_calibration(self, operation: str, state: CalibrationState, **kwargs) -> None:
        if self._hub is None:
            return
        self._hub.emit(CalibrationRecord(
            operation=operation,
            swap_neutral_sad=state.swap_neutral_sad,
            baseline=state.baseline.to_dict() if state.baseline is not None else None,
            **kwargs,
        ))


__all__ = ["MoodPipeline"]
