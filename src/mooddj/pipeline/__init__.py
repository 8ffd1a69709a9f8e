"""Mood pipeline: per-frame inference, session loop and configuration."""

from mooddj.pipeline.config import (
    CalibrationConfig,
    PipelineConfig,
    SmoothingConfig,
    SourceConfig,
)
from mooddj.pipeline.mood_pipeline import MoodPipeline
from mooddj.pipeline.session import MoodSession

__all__ = [
    "MoodPipeline",
    "MoodSession",
    "PipelineConfig",
    "SmoothingConfig",
    "CalibrationConfig",
    "SourceConfig",
]
