"""CalibrationStore - user neutral-face baseline and neutral/sad swap toggle.

Holds one immutable CalibrationState. Mutations (capture, clear, swap)
replace the state under a lock, so the per-frame scorer always reads a
complete snapshot. When a path is set, every mutation is persisted.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from mooddj.calibration.persistence import (
    DEFAULT_NAMESPACE,
    load_calibration,
    save_calibration,
)
from mooddj.types import (
    CalibrationBaseline,
    CalibrationState,
    FeatureVector,
    MoodLabel,
)

logger = logging.getLogger(__name__)


class CalibrationStore:
    """Single-baseline calibration store.

    Only the neutral label records a baseline. Happy/sad captures are
    accepted and ignored (no per-label snapshots).

    Args:
        path: JSON file for persistence (None = in-memory only).
        namespace: Storage namespace key.
        min_stable_frames: Consecutive tracked frames required before a
            capture is accepted.
    """

    def __init__(
        self,
        path: Optional[str | Path] = None,
        namespace: str = DEFAULT_NAMESPACE,
        min_stable_frames: int = 30,
    ):
        self.path = Path(path) if path is not None else None
        self.namespace = namespace
        self.min_stable_frames = min_stable_frames
        self._lock = threading.Lock()

        if self.path is not None:
            self._state = load_calibration(self.path, namespace)
            if self._state.is_calibrated:
                logger.info("Loaded calibration baseline from %s", self.path)
        else:
            self._state = CalibrationState()

    def snapshot(self) -> CalibrationState:
        """Return the current immutable state."""
        return self._state

    @property
    def baseline(self) -> Optional[CalibrationBaseline]:
        return self._state.baseline

    @property
    def swap_neutral_sad(self) -> bool:
        return self._state.swap_neutral_sad

    def capture(
        self,
        label: str | MoodLabel,
        features: Optional[FeatureVector],
        stable_frames: int,
    ) -> bool:
        """Record a calibration snapshot.

        Args:
            label: Label being calibrated. Only "neutral" stores a baseline.
            features: Most recent feature vector (None = not tracking).
            stable_frames: Current run of consecutive tracked frames.

        Returns:
            True if the baseline was updated.

        Raises:
            ValueError: If ``label`` is not a known mood label.
        """
        label = MoodLabel.parse(label)

        if label is not MoodLabel.NEUTRAL:
            logger.info("Calibration for %r is not supported; ignored", label.value)
            return False
        if features is None:
            logger.info("Calibration ignored: no face is being tracked")
            return False
        if stable_frames < self.min_stable_frames:
            logger.info(
                "Calibration ignored: tracking stable for %d frames (need %d)",
                stable_frames, self.min_stable_frames,
            )
            return False

        baseline = CalibrationBaseline.from_features(features)
        with self._lock:
            self._state = CalibrationState(
                baseline=baseline,
                swap_neutral_sad=self._state.swap_neutral_sad,
            )
            self._persist()
        logger.info(
            "Calibration captured: smile_up=%.4f mouth_open=%.4f eye_gap=%.4f",
            baseline.smile_up, baseline.mouth_open, baseline.eye_gap,
        )
        return True

    def clear(self) -> None:
        """Reset to the initial state (no baseline, swap off)."""
        with self._lock:
            self._state = CalibrationState()
            self._persist()
        logger.info("Calibration cleared")

    def swap(self) -> bool:
        """Toggle the neutral/sad swap flag.

        Returns:
            The new flag value.
        """
        with self._lock:
            self._state = CalibrationState(
                baseline=self._state.baseline,
                swap_neutral_sad=not self._state.swap_neutral_sad,
            )
            self._persist()
            swapped = self._state.swap_neutral_sad
        logger.info("Neutral/sad swap %s", "on" if swapped else "off")
        return swapped

    def reload(self) -> CalibrationState:
        """Re-read the state from disk (no-op for in-memory stores)."""
        if self.path is not None:
            with self._lock:
                self._state = load_calibration(self.path, self.namespace)
        return self._state

    def _persist(self) -> None:
        """Write the current state. Caller holds the lock."""
        if self.path is None:
            return
        try:
            save_calibration(self._state, self.path, self.namespace)
        except OSError as e:
            logger.warning("Failed to save calibration to %s: %s", self.path, e)


__all__ = ["CalibrationStore"]
