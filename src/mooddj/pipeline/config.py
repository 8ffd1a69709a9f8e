"""Configuration classes for the mooddj pipeline.

Example:
    >>> from mooddj.pipeline import PipelineConfig, SmoothingConfig
    >>>
    >>> config = PipelineConfig(
    ...     smoothing=SmoothingConfig(alpha=0.2, miss_threshold=15),
    ... )
    >>> config = PipelineConfig.from_yaml("mooddj.yaml")
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from mooddj.calibration.persistence import DEFAULT_NAMESPACE
from mooddj.paths import get_calibration_path
from mooddj.scoring.scorer import ScoringConfig


@dataclass
class SmoothingConfig:
    """EMA smoothing settings.

    Attributes:
        alpha: Weight of the newest raw vector, in (0, 1).
        miss_threshold: Missed frames tolerated before decaying to uniform.
    """

    alpha: float = 0.25
    miss_threshold: int = 10


@dataclass
class CalibrationConfig:
    """Calibration store settings.

    Attributes:
        namespace: Storage namespace key.
        path: Explicit calibration file. Defaults to
            ``{home}/calibration/{namespace}.json``.
        min_stable_frames: Consecutive tracked frames required for capture.
        persist: Save/load calibration across sessions.
    """

    namespace: str = DEFAULT_NAMESPACE
    path: Optional[str] = None
    min_stable_frames: int = 30
    persist: bool = True

    def resolve_path(self) -> Optional[Path]:
        """Return the calibration file path, or None when not persisting."""
        if not self.persist:
            return None
        if self.path:
            return Path(self.path)
        return get_calibration_path(self.namespace)


@dataclass
class SourceConfig:
    """Landmark and camera source settings.

    Attributes:
        backends: Landmark backend names in fallback order.
        device: Device hint passed to backends.
        camera_index: OpenCV camera index.
        width: Detection frame width.
        height: Detection frame height.
        fps: Target scheduling rate of the session loop.
    """

    backends: List[str] = field(default_factory=lambda: ["face_landmarker", "face_mesh"])
    device: str = "cpu"
    camera_index: int = 0
    width: int = 320
    height: int = 240
    fps: float = 30.0


@dataclass
class PipelineConfig:
    """Complete configuration for a mood session.

    Attributes:
        scoring: Scorer tuning constants.
        smoothing: EMA smoothing settings.
        calibration: Calibration store settings.
        source: Landmark/camera source settings.
    """

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    source: SourceConfig = field(default_factory=SourceConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PipelineConfig":
        """Create PipelineConfig from a dictionary (e.g., loaded from YAML).

        Unknown keys are ignored; missing sections use defaults.
        """
        data = data or {}
        return cls(
            scoring=_build(ScoringConfig, data.get("scoring")),
            smoothing=_build(SmoothingConfig, data.get("smoothing")),
            calibration=_build(CalibrationConfig, data.get("calibration")),
            source=_build(SourceConfig, data.get("source")),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "PipelineConfig":
        """Load PipelineConfig from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        import yaml

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scoring": asdict(self.scoring),
            "smoothing": asdict(self.smoothing),
            "calibration": asdict(self.calibration),
            "source": asdict(self.source),
        }


def _build(cls, data: Optional[Dict[str, Any]]):
    """Instantiate a config dataclass from the known keys of a dict."""
    if not data:
        return cls()
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


__all__ = [
    "PipelineConfig",
    "SmoothingConfig",
    "CalibrationConfig",
    "SourceConfig",
]
