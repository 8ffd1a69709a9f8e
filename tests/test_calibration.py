"""Tests for CalibrationStore."""

import pytest

from mooddj.calibration.store import CalibrationStore
from mooddj.types import CalibrationState, FeatureVector, MoodLabel

FEATURES = FeatureVector(mouth_width=0.95, mouth_open=0.03, eye_open=0.14, corner_lift=0.05)


class TestCapture:
    """Tests for capture()."""

    def test_initial_state(self, store):
        assert store.snapshot() == CalibrationState()
        assert store.baseline is None
        assert store.swap_neutral_sad is False

    def test_neutral_capture(self, store):
        assert store.capture("neutral", FEATURES, stable_frames=3) is True

        b = store.baseline
        assert b.smile_up == pytest.approx(0.05)
        assert b.mouth_open == pytest.approx(0.03)
        assert b.eye_gap == pytest.approx(0.14)
        assert b.mouth_width == pytest.approx(0.95)

    def test_capture_is_idempotent(self, store):
        store.capture(MoodLabel.NEUTRAL, FEATURES, stable_frames=3)
        first = store.snapshot()
        store.capture(MoodLabel.NEUTRAL, FEATURES, stable_frames=3)
        assert store.snapshot() == first

    def test_capture_without_face_is_ignored(self, store):
        assert store.capture("neutral", None, stable_frames=100) is False
        assert store.baseline is None

    def test_capture_before_stable_is_ignored(self, store):
        assert store.capture("neutral", FEATURES, stable_frames=2) is False
        assert store.baseline is None

    @pytest.mark.parametrize("label", ["happy", "sad"])
    def test_non_neutral_labels_are_ignored(self, store, label):
        assert store.capture(label, FEATURES, stable_frames=10) is False
        assert store.baseline is None

    def test_unknown_label_raises(self, store):
        with pytest.raises(ValueError):
            store.capture("surprised", FEATURES, stable_frames=10)

    def test_capture_keeps_swap_flag(self, store):
        store.swap()
        store.capture("neutral", FEATURES, stable_frames=3)
        assert store.swap_neutral_sad is True

    def test_snapshot_is_immutable(self, store):
        before = store.snapshot()
        store.capture("neutral", FEATURES, stable_frames=3)
        assert before.baseline is None


class TestClearAndSwap:
    """Tests for clear() and swap()."""

    def test_clear_restores_initial_state(self, store):
        store.capture("neutral", FEATURES, stable_frames=3)
        store.swap()
        store.clear()
        assert store.snapshot() == CalibrationState()

    def test_swap_toggles(self, store):
        assert store.swap() is True
        assert store.swap() is False

    def test_swap_twice_is_identity(self, store):
        store.capture("neutral", FEATURES, stable_frames=3)
        before = store.snapshot()
        store.swap()
        store.swap()
        assert store.snapshot() == before


class TestPersistentStore:
    """Tests for a store backed by a file."""

    def test_state_survives_restart(self, tmp_path):
        path = tmp_path / "cal.json"
        store = CalibrationStore(path=path, min_stable_frames=1)
        store.capture("neutral", FEATURES, stable_frames=1)
        store.swap()

        reopened = CalibrationStore(path=path)
        assert reopened.snapshot() == store.snapshot()

    def test_clear_is_persisted(self, tmp_path):
        path = tmp_path / "cal.json"
        store = CalibrationStore(path=path, min_stable_frames=1)
        store.capture("neutral", FEATURES, stable_frames=1)
        store.clear()

        assert CalibrationStore(path=path).baseline is None

    def test_reload(self, tmp_path):
        path = tmp_path / "cal.json"
        a = CalibrationStore(path=path, min_stable_frames=1)
        b = CalibrationStore(path=path)
        a.capture("neutral", FEATURES, stable_frames=1)

        assert b.baseline is None
        assert b.reload().baseline == a.baseline

    def test_namespaces_are_separate(self, tmp_path):
        path = tmp_path / "cal.json"
        store = CalibrationStore(path=path, namespace="alice", min_stable_frames=1)
        store.capture("neutral", FEATURES, stable_frames=1)

        assert CalibrationStore(path=path, namespace="bob").baseline is None

    def test_unwritable_path_keeps_memory_state(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")
        store = CalibrationStore(path=blocker / "cal.json", min_stable_frames=1)

        assert store.capture("neutral", FEATURES, stable_frames=1) is True
        assert store.baseline is not None
