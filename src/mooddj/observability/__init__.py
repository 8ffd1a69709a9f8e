"""Observability system for mooddj.

Provides tracing infrastructure to track:
- Frame-by-frame mood scores
- Label transitions
- Calibration operations
- Session start/stop and detector errors

Trace Levels:
- OFF: No tracing (default)
- MINIMAL: Label changes, calibration, session events
- NORMAL: + per-frame summaries
- VERBOSE: + per-frame features and raw scores

Example:
    >>> from mooddj.observability import ObservabilityHub, TraceLevel, FileSink
    >>> hub = ObservabilityHub(level=TraceLevel.NORMAL)
    >>> hub.add_sink(FileSink("/tmp/trace.jsonl"))
    >>> pipeline = MoodPipeline(hub=hub)
"""

from mooddj.observability.hub import ObservabilityHub
from mooddj.observability.records import (
    CalibrationRecord,
    MoodChangeRecord,
    MoodFrameRecord,
    SessionEndRecord,
    SessionStartRecord,
    TraceLevel,
    TraceRecord,
)
from mooddj.observability.sinks import (
    ConsoleSink,
    FileSink,
    MemorySink,
    NullSink,
    Sink,
)

__all__ = [
    "TraceLevel",
    "ObservabilityHub",
    # Records
    "TraceRecord",
    "MoodFrameRecord",
    "MoodChangeRecord",
    "CalibrationRecord",
    "SessionStartRecord",
    "SessionEndRecord",
    # Sinks
    "Sink",
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
