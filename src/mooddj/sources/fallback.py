"""Landmark source with ordered backend fallback and readiness status.

Tries each configured backend in turn until one initializes. The status
moves IDLE -> INITIALIZING -> READY, or -> FAILED when every backend
fails; a later ``initialize()`` call retries from the first backend.
"""

import logging
import threading
from typing import List, Optional, Sequence

import numpy as np

from mooddj.errors import SourceUnavailableError
from mooddj.sources.base import LandmarkSource, SourceStatus

logger = logging.getLogger(__name__)


class FallbackLandmarkSource:
    """Wraps one or more landmark backends behind the LandmarkSource protocol.

    Args:
        backends: Backends in priority order.
    """

    def __init__(self, backends: Sequence[LandmarkSource]):
        if not backends:
            raise ValueError("At least one landmark backend is required")
        self._backends = list(backends)
        self._active: Optional[LandmarkSource] = None
        self._status = SourceStatus.IDLE
        self._last_error: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def status(self) -> SourceStatus:
        return self._status

    @property
    def ready(self) -> bool:
        return self._status is SourceStatus.READY

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def active_backend(self) -> Optional[str]:
        if self._active is None:
            return None
        return getattr(self._active, "name", type(self._active).__name__)

    def initialize(self, device: str = "cpu") -> None:
        """Initialize the first backend that works.

        Raises:
            SourceUnavailableError: If every backend fails.
        """
        with self._lock:
            if self._status is SourceStatus.READY:
                return
            self._status = SourceStatus.INITIALIZING
            errors: List[str] = []

            for backend in self._backends:
                name = getattr(backend, "name", type(backend).__name__)
                try:
                    backend.initialize(device)
                except Exception as e:
                    logger.warning("Landmark backend %s failed to initialize: %s", name, e)
                    errors.append(f"{name}: {e}")
                    continue
                self._active = backend
                self._status = SourceStatus.READY
                self._last_error = None
                logger.info("Landmark source ready (backend=%s)", name)
                return

            self._status = SourceStatus.FAILED
            self._last_error = "; ".join(errors)
            raise SourceUnavailableError(
                f"No landmark backend could be initialized: {self._last_error}"
            )

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        if self._active is None:
            raise RuntimeError("Landmark source not initialized. Call initialize() first.")
        return self._active.detect(image)

    def cleanup(self) -> None:
        with self._lock:
            if self._active is not None:
                try:
                    self._active.cleanup()
                except Exception:
                    logger.exception("Landmark backend cleanup failed")
            self._active = None
            self._status = SourceStatus.IDLE


__all__ = ["FallbackLandmarkSource"]
