"""Trace record data classes for mooddj observability.

Record Categories:
- Frame records: per-frame pipeline results (NORMAL, signals at VERBOSE)
- Mood records: label transitions (MINIMAL)
- Calibration records: capture / clear / swap operations (MINIMAL)
- Session records: loop start and end (MINIMAL)
"""

import time
from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional


class TraceLevel(IntEnum):
    """Tracing verbosity."""

    OFF = 0
    MINIMAL = 1
    NORMAL = 2
    VERBOSE = 3

    @classmethod
    def from_string(cls, value: str) -> "TraceLevel":
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown trace level: {value!r} (expected off, minimal, normal, verbose)"
            ) from None


@dataclass
class TraceRecord:
    """Base trace record."""

    record_type: str = field(default="trace", init=False)
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)
    timestamp_ns: int = field(default_factory=time.time_ns)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("min_level", None)
        return data


@dataclass
class MoodFrameRecord(TraceRecord):
    """Record of one processed frame.

    ``features``/``raw`` are only filled at VERBOSE level.
    """

    record_type: str = field(default="mood_frame", init=False)

    frame_id: int = 0
    tracking: bool = False
    label: str = ""
    happy: float = 0.0
    neutral: float = 0.0
    sad: float = 0.0
    missed_frames: int = 0
    processing_ms: float = 0.0

    # VERBOSE
    features: Dict[str, float] = field(default_factory=dict)
    raw: Dict[str, float] = field(default_factory=dict)


@dataclass
class MoodChangeRecord(TraceRecord):
    """Record of a label transition."""

    record_type: str = field(default="mood_change", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    frame_id: int = 0
    old_label: str = ""
    new_label: str = ""
    scores: Dict[str, float] = field(default_factory=dict)


@dataclass
class CalibrationRecord(TraceRecord):
    """Record of a calibration operation."""

    record_type: str = field(default="calibration", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    operation: str = ""  # "capture", "clear", "swap"
    label: str = ""
    accepted: bool = True
    stable_frames: int = 0
    swap_neutral_sad: bool = False
    baseline: Optional[Dict[str, float]] = None


@dataclass
class SessionStartRecord(TraceRecord):
    """Record of the scheduling loop starting."""

    record_type: str = field(default="session_start", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    backend: str = ""
    target_fps: float = 0.0
    calibrated: bool = False


@dataclass
class SessionEndRecord(TraceRecord):
    """Record of the scheduling loop ending."""

    record_type: str = field(default="session_end", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    frames_processed: int = 0
    frames_tracked: int = 0
    detector_errors: int = 0
    wall_time_sec: float = 0.0
    final_label: str = ""


__all__ = [
    "TraceLevel",
    "TraceRecord",
    "MoodFrameRecord",
    "MoodChangeRecord",
    "CalibrationRecord",
    "SessionStartRecord",
    "SessionEndRecord",
]
