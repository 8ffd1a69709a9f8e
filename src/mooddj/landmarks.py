"""Metric extraction from MediaPipe FaceMesh landmarks.

Reduces a face's landmark set to a FeatureVector of scale-normalized
geometric metrics. All distances are measured in the image plane (x, y)
and divided by the interocular distance, so the features do not depend on
camera distance or frame resolution.

Required landmark indices (MediaPipe FaceMesh topology):

    Mouth:   61 (corner), 291 (corner), 13 (upper inner lip), 14 (lower inner lip)
    Eye 1:   33 (outer), 133 (inner), 159 (upper lid), 145 (lower lid)
    Eye 2:   362 (inner), 263 (outer), 386 (upper lid), 374 (lower lid)

Example:
    >>> features = extract_features(landmarks)   # (468|478, 3) array
    >>> print(f"corner lift: {features.corner_lift:+.3f}")
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from mooddj.errors import LandmarkError
from mooddj.types import FeatureVector

# FaceMesh without iris refinement has 468 points; refined meshes have 478.
MIN_LANDMARKS = 468

# Interocular distances below this are treated as collapsed eyes.
MIN_SCALE = 1e-6

MOUTH_LEFT = 61
MOUTH_RIGHT = 291
UPPER_INNER_LIP = 13
LOWER_INNER_LIP = 14

LEFT_EYE_OUTER = 33
LEFT_EYE_INNER = 133
LEFT_EYE_UPPER = 159
LEFT_EYE_LOWER = 145

RIGHT_EYE_INNER = 362
RIGHT_EYE_OUTER = 263
RIGHT_EYE_UPPER = 386
RIGHT_EYE_LOWER = 374

REQUIRED_INDICES = (
    MOUTH_LEFT, MOUTH_RIGHT, UPPER_INNER_LIP, LOWER_INNER_LIP,
    LEFT_EYE_OUTER, LEFT_EYE_INNER, LEFT_EYE_UPPER, LEFT_EYE_LOWER,
    RIGHT_EYE_INNER, RIGHT_EYE_OUTER, RIGHT_EYE_UPPER, RIGHT_EYE_LOWER,
)


def extract_features(landmarks: Any) -> FeatureVector:
    """Compute the FeatureVector for one face.

    Args:
        landmarks: Array-like of shape (N, 2) or (N, 3), N >= 468,
            in frame-normalized or pixel coordinates.

    Returns:
        FeatureVector normalized by interocular distance.

    Raises:
        LandmarkError: If the landmark set is malformed.
    """
    pts = _as_points(landmarks)

    left_center = _midpoint(pts[LEFT_EYE_OUTER], pts[LEFT_EYE_INNER])
    right_center = _midpoint(pts[RIGHT_EYE_OUTER], pts[RIGHT_EYE_INNER])
    scale = _distance(left_center, right_center)
    if not math.isfinite(scale) or scale < MIN_SCALE:
        scale = 1.0

    mouth_width = _distance(pts[MOUTH_LEFT], pts[MOUTH_RIGHT]) / scale
    mouth_open = _distance(pts[UPPER_INNER_LIP], pts[LOWER_INNER_LIP]) / scale

    left_open = _distance(pts[LEFT_EYE_UPPER], pts[LEFT_EYE_LOWER])
    right_open = _distance(pts[RIGHT_EYE_UPPER], pts[RIGHT_EYE_LOWER])
    eye_open = (left_open + right_open) / 2.0 / scale

    # Image y grows downward: corners above the lip center give a positive lift.
    lip_center = _midpoint(pts[UPPER_INNER_LIP], pts[LOWER_INNER_LIP])
    corner_y = (pts[MOUTH_LEFT][1] + pts[MOUTH_RIGHT][1]) / 2.0
    corner_lift = (lip_center[1] - corner_y) / scale

    return FeatureVector(
        mouth_width=float(mouth_width),
        mouth_open=float(mouth_open),
        eye_open=float(eye_open),
        corner_lift=float(corner_lift),
    )


def _as_points(landmarks: Any) -> np.ndarray:
    """Validate a landmark set and return its (N, 2) image-plane points."""
    if landmarks is None:
        raise LandmarkError("No landmarks")
    try:
        pts = np.asarray(landmarks, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise LandmarkError(f"Landmarks are not numeric: {e}") from e

    if pts.ndim != 2 or pts.shape[1] < 2:
        raise LandmarkError(f"Expected (N, 2) or (N, 3) landmarks, got shape {pts.shape}")
    if pts.shape[0] < MIN_LANDMARKS:
        raise LandmarkError(
            f"Expected at least {MIN_LANDMARKS} landmarks, got {pts.shape[0]}"
        )

    pts = pts[:, :2]
    if not np.all(np.isfinite(pts[list(REQUIRED_INDICES)])):
        raise LandmarkError("Non-finite coordinates at required landmark indices")
    return pts


def _midpoint(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return (a + b) / 2.0


def _distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


__all__ = [
    "extract_features",
    "MIN_LANDMARKS",
    "MIN_SCALE",
    "REQUIRED_INDICES",
]
