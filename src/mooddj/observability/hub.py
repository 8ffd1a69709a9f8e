"""ObservabilityHub - routes trace records to sinks by level.

The hub is created by the caller and injected into the pipeline and
session; there is no process-wide instance.
"""

import logging
import threading
from typing import List

from mooddj.observability.records import TraceLevel, TraceRecord
from mooddj.observability.sinks import Sink

logger = logging.getLogger(__name__)


class ObservabilityHub:
    """Level-filtered fan-out of trace records.

    Args:
        level: Initial trace level (default: OFF).
    """

    def __init__(self, level: TraceLevel = TraceLevel.OFF):
        self._level = level
        self._sinks: List[Sink] = []
        self._lock = threading.Lock()

    @property
    def level(self) -> TraceLevel:
        return self._level

    @property
    def enabled(self) -> bool:
        return self._level > TraceLevel.OFF and bool(self._sinks)

    def configure(self, level: TraceLevel) -> None:
        self._level = level

    def is_level_enabled(self, level: TraceLevel) -> bool:
        return self.enabled and self._level >= level

    def add_sink(self, sink: Sink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: Sink) -> None:
        with self._lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    def emit(self, record: TraceRecord) -> None:
        """Send a record to every sink if its level is enabled."""
        if not self.is_level_enabled(record.min_level):
            return
        with self._lock:
            sinks = list(self._sinks)
        for sink in sinks:
            try:
                sink.write(record)
            except Exception:
                logger.exception("Trace sink %r failed", sink)

    def flush(self) -> None:
        with self._lock:
            sinks = list(self._sinks)
        for sink in sinks:
            sink.flush()

    def close(self) -> None:
        with self._lock:
            sinks = list(self._sinks)
            self._sinks.clear()
        for sink in sinks:
            sink.flush()
            sink.close()


__all__ = ["ObservabilityHub"]
