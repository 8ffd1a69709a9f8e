"""Trace output sinks for observability.

Sinks receive trace records and handle their output to various destinations:
- FileSink: JSONL file output
- ConsoleSink: Formatted console output
- MemorySink: In-memory buffer for testing/analysis
- NullSink: Discards everything
"""

import json
import sys
import threading
from pathlib import Path
from typing import List, Optional, TextIO, Type

from mooddj.observability.records import (
    CalibrationRecord,
    MoodChangeRecord,
    SessionEndRecord,
    SessionStartRecord,
    TraceRecord,
)


class Sink:
    """Base sink interface."""

    def write(self, record: TraceRecord) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


class NullSink(Sink):
    """Sink that discards all records."""

    def write(self, record: TraceRecord) -> None:
        pass


class MemorySink(Sink):
    """Keeps records in memory.

    Args:
        max_records: Oldest records are dropped beyond this count (0 = unbounded).
    """

    def __init__(self, max_records: int = 0):
        self._max_records = max_records
        self._records: List[TraceRecord] = []
        self._lock = threading.Lock()

    def write(self, record: TraceRecord) -> None:
        with self._lock:
            self._records.append(record)
            if self._max_records and len(self._records) > self._max_records:
                del self._records[0]

    def get_records(self, record_type: Optional[Type[TraceRecord]] = None) -> List[TraceRecord]:
        with self._lock:
            records = list(self._records)
        if record_type is not None:
            records = [r for r in records if isinstance(r, record_type)]
        return records

    def get_mood_changes(self) -> List[MoodChangeRecord]:
        """Get all label transition records."""
        return self.get_records(MoodChangeRecord)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class FileSink(Sink):
    """Appends records to a JSONL file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = open(self._path, "a", encoding="utf-8")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, record: TraceRecord) -> None:
        line = json.dumps(record.to_dict(), ensure_ascii=False, default=str)
        with self._lock:
            if self._file is not None:
                self._file.write(line + "\n")

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


class ConsoleSink(Sink):
    """Prints mood changes, calibration and session events.

    Per-frame records are skipped.
    """

    _COLORS = {
        "green": "\033[32m",
        "yellow": "\033[33m",
        "blue": "\033[34m",
        "magenta": "\033[35m",
        "cyan": "\033[36m",
    }
    _RESET = "\033[0m"

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self._stream = stream or sys.stdout
        if color is None:
            color = hasattr(self._stream, "isatty") and self._stream.isatty()
        self._color = color

    def write(self, record: TraceRecord) -> None:
        text = self._format_record(record)
        if text is not None:
            self._stream.write(text + "\n")

    def flush(self) -> None:
        self._stream.flush()

    def _colorize(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{self._COLORS.get(color, '')}{text}{self._RESET}"

    def _format_record(self, record: TraceRecord) -> Optional[str]:
        if isinstance(record, MoodChangeRecord):
            return self._format_mood_change(record)
        elif isinstance(record, CalibrationRecord):
            return self._format_calibration(record)
        elif isinstance(record, SessionStartRecord):
            tag = self._colorize("[SESSION]", "blue")
            return f"{tag} started backend={record.backend} fps={record.target_fps:.0f}"
        elif isinstance(record, SessionEndRecord):
            tag = self._colorize("[SESSION]", "blue")
            return (
                f"{tag} stopped after {record.wall_time_sec:.1f}s "
                f"({record.frames_processed} frames, {record.frames_tracked} tracked, "
                f"{record.detector_errors} errors)"
            )
        return None

    def _format_mood_change(self, record: MoodChangeRecord) -> str:
        color = {"happy": "green", "sad": "magenta"}.get(record.new_label, "yellow")
        tag = self._colorize("[MOOD]", "cyan")
        label = self._colorize(record.new_label.upper(), color)
        s = record.scores
        return (
            f"{tag} Frame {record.frame_id}: {record.old_label} -> {label} "
            f"(h={s.get('happy', 0):.2f} n={s.get('neutral', 0):.2f} s={s.get('sad', 0):.2f})"
        )

    def _format_calibration(self, record: CalibrationRecord) -> str:
        tag = self._colorize("[CALIB]", "blue")
        if record.operation == "capture":
            status = "captured" if record.accepted else "ignored"
            return f"{tag} capture {record.label}: {status} (stable={record.stable_frames})"
        if record.operation == "swap":
            return f"{tag} neutral/sad swap {'on' if record.swap_neutral_sad else 'off'}"
        return f"{tag} {record.operation}"


__all__ = ["Sink", "NullSink", "MemorySink", "FileSink", "ConsoleSink"]
