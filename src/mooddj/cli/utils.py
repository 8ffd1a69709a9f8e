"""CLI utility functions."""

import logging
import os
from typing import Optional, Tuple

from mooddj.observability import ConsoleSink, FileSink, ObservabilityHub, TraceLevel
from mooddj.pipeline.config import PipelineConfig


def suppress_thirdparty_noise():
    """Quiet native-library logging (MediaPipe/TFLite, OpenCV) before import."""
    os.environ.setdefault("GLOG_minloglevel", "2")
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "3")
    os.environ.setdefault("OPENCV_LOG_LEVEL", "ERROR")


def configure_log_levels():
    """Raise noisy third-party Python loggers to WARNING."""
    for name in ("absl", "mediapipe", "tensorflow", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def load_config(args) -> PipelineConfig:
    """Build a PipelineConfig from ``--config`` plus command-line overrides."""
    config_path = getattr(args, "config", None)
    if config_path:
        config = PipelineConfig.from_yaml(config_path)
    else:
        config = PipelineConfig()

    namespace = getattr(args, "namespace", None)
    if namespace:
        config.calibration.namespace = namespace
    camera = getattr(args, "camera", None)
    if camera is not None:
        config.source.camera_index = camera
    fps = getattr(args, "fps", None)
    if fps is not None:
        config.source.fps = fps
    return config


def setup_observability(
    trace_level: str, trace_output: Optional[str] = None
) -> Tuple[Optional[ObservabilityHub], Optional[FileSink]]:
    """Configure observability based on CLI arguments.

    Args:
        trace_level: Trace level string ("off", "minimal", "normal", "verbose").
        trace_output: Optional path to output JSONL file.

    Returns:
        Tuple of (hub, file_sink). Both are None when tracing is off.
    """
    level = TraceLevel.from_string(trace_level or "off")
    if level == TraceLevel.OFF:
        return None, None

    hub = ObservabilityHub(level=level)
    hub.add_sink(ConsoleSink())

    file_sink = None
    if trace_output:
        file_sink = FileSink(trace_output)
        hub.add_sink(file_sink)
    return hub, file_sink


def cleanup_observability(hub: Optional[ObservabilityHub]):
    """Flush and close trace sinks."""
    if hub is not None:
        hub.close()
