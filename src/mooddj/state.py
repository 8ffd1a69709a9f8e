"""Mood state machine.

The label is a pure function of the smoothed score vector:

    happy    if happy >= neutral and happy >= sad
    sad      elif sad >= neutral
    neutral  otherwise

So happy/sad ties resolve to happy and sad/neutral ties resolve to sad.
There is no hysteresis beyond the EMA; the label is recomputed on every
update and may oscillate at an exact tie.

Listeners registered with ``subscribe`` are called on label transitions;
this is where playlist curation hooks in.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List

from mooddj.types import MoodLabel, ScoreVector

logger = logging.getLogger(__name__)

# (old_label, new_label, scores)
MoodListener = Callable[[MoodLabel, MoodLabel, ScoreVector], None]


def label_for(scores: ScoreVector) -> MoodLabel:
    """Derive the discrete label from a score vector."""
    if scores.happy >= scores.neutral and scores.happy >= scores.sad:
        return MoodLabel.HAPPY
    if scores.sad >= scores.neutral:
        return MoodLabel.SAD
    return MoodLabel.NEUTRAL


class MoodStateMachine:
    """Current smoothed scores and derived label.

    Starts at the uniform vector (label neutral).
    """

    def __init__(self):
        self._scores = ScoreVector.uniform()
        self._label = label_for(self._scores)
        self._listeners: List[MoodListener] = []
        self._listeners_lock = threading.Lock()

    @property
    def label(self) -> MoodLabel:
        return self._label

    @property
    def scores(self) -> ScoreVector:
        return self._scores

    def update(self, scores: ScoreVector) -> MoodLabel:
        """Set new smoothed scores and recompute the label."""
        old = self._label
        new = label_for(scores)
        self._scores = scores
        self._label = new
        if new is not old:
            logger.debug("Mood %s -> %s", old.value, new.value)
            self._notify(old, new, scores)
        return new

    def reset(self) -> None:
        """Return to the uniform vector without notifying listeners."""
        self._scores = ScoreVector.uniform()
        self._label = label_for(self._scores)

    def subscribe(self, listener: MoodListener) -> None:
        with self._listeners_lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: MoodListener) -> None:
        with self._listeners_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, old: MoodLabel, new: MoodLabel, scores: ScoreVector) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(old, new, scores)
            except Exception:
                logger.exception("Mood listener %r failed", listener)


__all__ = ["label_for", "MoodStateMachine", "MoodListener"]
