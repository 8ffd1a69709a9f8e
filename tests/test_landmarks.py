"""Tests for landmark feature extraction."""

import numpy as np
import pytest

from conftest import collapsed_eyes_face, make_landmarks
from mooddj.errors import LandmarkError
from mooddj.landmarks import (
    MIN_LANDMARKS,
    MOUTH_LEFT,
    REQUIRED_INDICES,
    UPPER_INNER_LIP,
    extract_features,
)


class TestExtractFeatures:
    """Tests for extract_features()."""

    def test_neutral_layout(self):
        f = extract_features(make_landmarks())

        assert f.mouth_width == pytest.approx(0.9)
        assert f.mouth_open == pytest.approx(0.02)
        assert f.eye_open == pytest.approx(0.12)
        assert f.corner_lift == pytest.approx(0.0, abs=1e-12)

    def test_smile_lifts_corners(self):
        f = extract_features(make_landmarks(smile=0.08))
        assert f.corner_lift == pytest.approx(0.08)

    def test_frown_is_negative(self):
        f = extract_features(make_landmarks(smile=-0.05))
        assert f.corner_lift == pytest.approx(-0.05)

    def test_scale_invariant(self):
        near = extract_features(make_landmarks(smile=0.05, mouth_open=0.1, scale=2.0))
        far = extract_features(make_landmarks(smile=0.05, mouth_open=0.1, scale=0.5))

        assert near.corner_lift == pytest.approx(far.corner_lift)
        assert near.mouth_open == pytest.approx(far.mouth_open)
        assert near.eye_open == pytest.approx(far.eye_open)
        assert near.mouth_width == pytest.approx(far.mouth_width)

    def test_translation_invariant(self):
        a = extract_features(make_landmarks(smile=0.03))
        b = extract_features(make_landmarks(smile=0.03, offset=(0.2, -0.1)))
        assert a.corner_lift == pytest.approx(b.corner_lift)
        assert a.mouth_width == pytest.approx(b.mouth_width)

    def test_pixel_coordinates(self):
        pts = make_landmarks(mouth_open=0.3)
        pts[:, 0] *= 320
        pts[:, 1] *= 320
        f = extract_features(pts)
        assert f.mouth_open == pytest.approx(0.3)

    def test_accepts_468_points_without_iris(self):
        f = extract_features(make_landmarks(count=MIN_LANDMARKS))
        assert f.eye_open == pytest.approx(0.12)

    def test_accepts_2d_points(self):
        f = extract_features(make_landmarks()[:, :2])
        assert f.mouth_width == pytest.approx(0.9)

    def test_accepts_nested_lists(self):
        f = extract_features(make_landmarks().tolist())
        assert f.mouth_open == pytest.approx(0.02)

    def test_z_is_ignored(self):
        pts = make_landmarks()
        pts[:, 2] = np.linspace(-1.0, 1.0, len(pts))
        f = extract_features(pts)
        assert f.mouth_width == pytest.approx(0.9)

    def test_degenerate_eyes_fall_back_to_unit_scale(self):
        pts = make_landmarks()
        for idx in REQUIRED_INDICES:
            pts[idx] = (0.5, 0.5, 0.0)
        pts[MOUTH_LEFT] = (0.4, 0.5, 0.0)

        f = extract_features(pts)

        assert np.isfinite(f.mouth_width)
        assert f.mouth_width == pytest.approx(0.1)

    def test_near_zero_eye_distance_falls_back_to_unit_scale(self):
        f = extract_features(collapsed_eyes_face())

        # Frame-coordinate distances, not ~1e155 blow-ups.
        assert f.mouth_width == pytest.approx(0.18)
        assert abs(f.mouth_open) < 1.0
        assert abs(f.corner_lift) < 1.0


class TestMalformedLandmarks:
    """Malformed inputs raise LandmarkError."""

    def test_none(self):
        with pytest.raises(LandmarkError):
            extract_features(None)

    def test_too_few_points(self):
        with pytest.raises(LandmarkError, match="at least"):
            extract_features(np.zeros((100, 3)))

    def test_wrong_ndim(self):
        with pytest.raises(LandmarkError):
            extract_features(np.zeros(478 * 3))

    def test_single_column(self):
        with pytest.raises(LandmarkError):
            extract_features(np.zeros((478, 1)))

    def test_non_numeric(self):
        with pytest.raises(LandmarkError):
            extract_features([["a", "b"]] * 478)

    def test_nan_at_required_index(self):
        pts = make_landmarks()
        pts[UPPER_INNER_LIP, 1] = np.nan
        with pytest.raises(LandmarkError, match="Non-finite"):
            extract_features(pts)

    def test_nan_elsewhere_is_tolerated(self):
        pts = make_landmarks()
        pts[0] = np.nan
        f = extract_features(pts)
        assert f.mouth_open == pytest.approx(0.02)

    def test_landmark_error_is_value_error(self):
        with pytest.raises(ValueError):
            extract_features(np.zeros((10, 3)))
