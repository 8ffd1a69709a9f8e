"""MoodSession - scheduling loop that feeds camera frames to a MoodPipeline.

One daemon worker thread grabs a frame, runs landmark detection
synchronously and hands the first face to the pipeline, then waits for the
next tick. At most one detection is in flight at a time. ``stop()`` sets
an event the loop checks before every detection; a result that arrives
after stop is discarded.

Example:
    >>> session = MoodSession.from_config(PipelineConfig())
    >>> if session.start():
    ...     time.sleep(10)
    ...     print(session.mood)
    ...     session.stop()
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from mooddj.errors import CameraError, SourceUnavailableError
from mooddj.observability.hub import ObservabilityHub
from mooddj.observability.records import SessionEndRecord, SessionStartRecord
from mooddj.pipeline.config import PipelineConfig
from mooddj.pipeline.mood_pipeline import MoodPipeline
from mooddj.sources.base import FrameSource, LandmarkSource, SourceStatus
from mooddj.state import MoodListener
from mooddj.types import MoodLabel, MoodSnapshot, ScoreVector

logger = logging.getLogger(__name__)


class MoodSession:
    """Start/stop lifecycle around a MoodPipeline.

    Args:
        pipeline: Pipeline receiving landmarks; reused across restarts.
        landmark_source: Face landmark detector.
        frame_source: Frame provider (e.g. CameraSource).
        fps: Target scheduling rate.
        device: Device hint passed to ``landmark_source.initialize``.
        hub: Optional observability hub for session records.
    """

    def __init__(
        self,
        pipeline: MoodPipeline,
        landmark_source: LandmarkSource,
        frame_source: FrameSource,
        fps: float = 30.0,
        device: str = "cpu",
        hub: Optional[ObservabilityHub] = None,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self._pipeline = pipeline
        self._landmarks = landmark_source
        self._frames = frame_source
        self._interval = 1.0 / fps
        self._fps = fps
        self._device = device
        self._hub = hub

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._status = SourceStatus.IDLE
        self._last_error: Optional[str] = None

        self._frames_processed = 0
        self._frames_tracked = 0
        self._detector_errors = 0
        self._started_at = 0.0

    @classmethod
    def from_config(
        cls,
        config: Optional[PipelineConfig] = None,
        hub: Optional[ObservabilityHub] = None,
    ) -> "MoodSession":
        """Build a webcam session with MediaPipe backends from config."""
        from mooddj.sources.camera import CameraSource
        from mooddj.sources.fallback import FallbackLandmarkSource
        from mooddj.sources.mediapipe_mesh import create_backend

        config = config or PipelineConfig()
        src = config.source
        landmarks = FallbackLandmarkSource([create_backend(name) for name in src.backends])
        camera = CameraSource(device_index=src.camera_index, resolution=(src.width, src.height))
        pipeline = MoodPipeline(config=config, hub=hub)
        return cls(pipeline, landmarks, camera, fps=src.fps, device=src.device, hub=hub)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def pipeline(self) -> MoodPipeline:
        return self._pipeline

    @property
    def mood(self) -> MoodLabel:
        return self._pipeline.mood

    @property
    def scores(self) -> ScoreVector:
        return self._pipeline.scores

    @property
    def tracking(self) -> bool:
        return self._pipeline.tracking

    @property
    def snapshot(self) -> MoodSnapshot:
        return self._pipeline.snapshot

    @property
    def status(self) -> SourceStatus:
        return self._status

    @property
    def ready(self) -> bool:
        """True once the landmark source has initialized."""
        return self._status is SourceStatus.READY

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def frames_processed(self) -> int:
        return self._frames_processed

    @property
    def detector_errors(self) -> int:
        return self._detector_errors

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Initialize the source if needed and start the loop.

        Returns:
            True if the loop is running. False if the landmark source or
            camera is unavailable; see ``last_error``. Calling start()
            again retries initialization.
        """
        with self._lock:
            if self.running:
                return True
            if self._thread is not None and self._thread.is_alive():
                # A stopped worker is still inside detect().
                self._last_error = "Previous session thread has not exited yet"
                logger.warning(self._last_error)
                return False
            self._thread = None

            if self._status is not SourceStatus.READY:
                self._status = SourceStatus.INITIALIZING
                try:
                    self._landmarks.initialize(self._device)
                except SourceUnavailableError as e:
                    self._status = SourceStatus.FAILED
                    self._last_error = str(e)
                    logger.error("Landmark source unavailable: %s", e)
                    return False
                self._status = SourceStatus.READY

            try:
                self._frames.open()
            except CameraError as e:
                self._last_error = str(e)
                logger.error("Frame source unavailable: %s", e)
                return False

            self._pipeline.reset()
            self._frames_processed = 0
            self._frames_tracked = 0
            self._detector_errors = 0
            self._last_error = None
            self._started_at = time.monotonic()

            if self._hub is not None:
                self._hub.emit(SessionStartRecord(
                    backend=str(getattr(self._landmarks, "active_backend", None)
                                or type(self._landmarks).__name__),
                    target_fps=self._fps,
                    calibrated=self._pipeline.calibration.snapshot().is_calibrated,
                ))

            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,),
                name="mooddj-session", daemon=True,
            )
            self._thread.start()

        logger.info("Mood session started (%.1f fps)", self._fps)
        return True

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the loop and release the frame source.

        The landmark source stays initialized so a later start() is fast;
        use close() to release it too. If the worker does not exit within
        ``timeout`` it is kept, and start() refuses until it has exited.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            already_stopped = self._stop_event.is_set()
            self._stop_event.set()
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Session thread did not exit within %.1fs", timeout)
            else:
                self._thread = None
            if already_stopped:
                return
            self._frames.close()

        wall_time = time.monotonic() - self._started_at
        logger.info(
            "Mood session stopped: %d frames (%d tracked, %d detector errors) in %.1fs",
            self._frames_processed, self._frames_tracked, self._detector_errors, wall_time,
        )
        if self._hub is not None:
            self._hub.emit(SessionEndRecord(
                frames_processed=self._frames_processed,
                frames_tracked=self._frames_tracked,
                detector_errors=self._detector_errors,
                wall_time_sec=wall_time,
                final_label=self._pipeline.mood.value,
            ))

    def close(self) -> None:
        """Stop the loop and release the landmark source."""
        self.stop()
        self._landmarks.cleanup()
        self._status = SourceStatus.IDLE

    def __enter__(self) -> "MoodSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Calibration & listeners
    # ------------------------------------------------------------------
    def capture_calibration(self, label: str | MoodLabel = MoodLabel.NEUTRAL) -> bool:
        return self._pipeline.capture_calibration(label)

    def clear_calibration(self) -> None:
        self._pipeline.clear_calibration()

    def swap_neutral_sad(self) -> bool:
        return self._pipeline.swap_neutral_sad()

    def subscribe(self, listener: MoodListener) -> None:
        self._pipeline.subscribe(listener)

    def unsubscribe(self, listener: MoodListener) -> None:
        self._pipeline.unsubscribe(listener)

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            tick_start = time.monotonic()
            self._tick(stop_event)
            remaining = self._interval - (time.monotonic() - tick_start)
            stop_event.wait(max(0.0, remaining))

    def _tick(self, stop_event: threading.Event) -> None:
        frame = self._frames.read()
        if frame is None:
            logger.debug("No frame available; skipping tick")
            return
        if stop_event.is_set():
            return

        try:
            faces = self._landmarks.detect(frame)
        except Exception as e:
            if stop_event.is_set():
                return
            # One failing frame must not end the session.
            self._detector_errors += 1
            self._last_error = f"{type(e).__name__}: {e}"
            logger.warning("Landmark detection failed: %s", self._last_error)
            faces = []

        if stop_event.is_set():
            return

        try:
            snap = self._pipeline.process(faces[0] if faces else None)
        except Exception as e:
            self._last_error = f"{type(e).__name__}: {e}"
            logger.exception("Frame processing failed")
            return
        self._frames_processed += 1
        if snap.tracking:
            self._frames_tracked += 1


__all__ = ["MoodSession"]
