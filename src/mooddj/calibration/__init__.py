"""Calibration store: neutral baseline capture, clear, and neutral/sad swap.

Quick Start:
    >>> from mooddj.calibration import CalibrationStore
    >>> store = CalibrationStore(path="calibration.json")
    >>> store.capture("neutral", features, stable_frames=45)
    True
    >>> store.snapshot().baseline
"""

from mooddj.calibration.persistence import (
    DEFAULT_NAMESPACE,
    load_calibration,
    save_calibration,
)
from mooddj.calibration.store import CalibrationStore

__all__ = [
    "CalibrationStore",
    "DEFAULT_NAMESPACE",
    "load_calibration",
    "save_calibration",
]
