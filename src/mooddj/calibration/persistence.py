"""Persistence layer for calibration state.

JSON save/load keyed by a storage namespace. Loading never raises for
missing or corrupt data; it falls back to the empty state.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from mooddj.types import CalibrationBaseline, CalibrationState

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "mooddj.calibration"

APP_VERSION = "0.1.0"


def save_calibration(
    state: CalibrationState,
    path: str | Path,
    namespace: str = DEFAULT_NAMESPACE,
) -> None:
    """Save calibration state to JSON.

    Args:
        state: Calibration snapshot to save.
        path: Output JSON file path.
        namespace: Storage namespace recorded in the file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "namespace": namespace,
        "baseline": state.baseline.to_dict() if state.baseline is not None else None,
        "swap_neutral_sad": state.swap_neutral_sad,
        "_version": {
            "app": "mooddj",
            "app_version": APP_VERSION,
            "created_at": datetime.now(timezone.utc).isoformat(),
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_calibration(
    path: str | Path,
    namespace: str = DEFAULT_NAMESPACE,
) -> CalibrationState:
    """Load calibration state from JSON.

    Missing, unreadable or malformed files, and files written for another
    namespace, yield the default (empty) state.

    Args:
        path: Path to the calibration JSON file.
        namespace: Expected storage namespace.

    Returns:
        CalibrationState instance.
    """
    path = Path(path)
    if not path.exists():
        return CalibrationState()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable calibration file %s: %s", path, e)
        return CalibrationState()

    if not isinstance(data, dict):
        logger.warning("Ignoring malformed calibration file %s", path)
        return CalibrationState()

    stored_ns = data.get("namespace", namespace)
    if stored_ns != namespace:
        logger.warning(
            "Calibration file %s belongs to namespace %r, expected %r",
            path, stored_ns, namespace,
        )
        return CalibrationState()

    baseline = _dict_to_baseline(data.get("baseline"))
    if data.get("baseline") is not None and baseline is None:
        logger.warning("Ignoring malformed calibration baseline in %s", path)
        return CalibrationState()

    swap = data.get("swap_neutral_sad", False)
    if not isinstance(swap, bool):
        logger.warning("Ignoring malformed swap flag in %s", path)
        swap = False

    return CalibrationState(baseline=baseline, swap_neutral_sad=swap)


def _dict_to_baseline(data: Any) -> Optional[CalibrationBaseline]:
    """Convert a JSON dict to CalibrationBaseline, or None if malformed."""
    if not isinstance(data, dict):
        return None
    try:
        values = {
            key: float(data[key])
            for key in ("eye_gap", "mouth_open", "smile_up", "mouth_width")
        }
    except (KeyError, TypeError, ValueError):
        return None
    if not all(math.isfinite(v) for v in values.values()):
        return None
    return CalibrationBaseline(**values)


__all__ = ["save_calibration", "load_calibration", "DEFAULT_NAMESPACE"]
