"""Tests for the mooddj command-line interface."""

import json

import pytest

from conftest import FakeFrameSource, FakeLandmarkSource, smiling_face
from mooddj.calibration.store import CalibrationStore
from mooddj.cli import _build_parser, main
from mooddj.pipeline.mood_pipeline import MoodPipeline
from mooddj.pipeline.session import MoodSession
from mooddj.types import FeatureVector

FEATURES = FeatureVector(mouth_width=0.9, mouth_open=0.02, eye_open=0.12, corner_lift=0.04)


@pytest.fixture
def fake_session(monkeypatch):
    """Replace the webcam session factory with fake sources."""
    created = {}

    def factory(config=None, hub=None, fail_init=0):
        landmarks = FakeLandmarkSource(face=smiling_face(), fail_init=fail_init)
        from mooddj.sources.fallback import FallbackLandmarkSource

        session = MoodSession(
            MoodPipeline(config=config, calibration=CalibrationStore(min_stable_frames=1), hub=hub),
            FallbackLandmarkSource([landmarks]),
            FakeFrameSource(),
            fps=100.0,
            hub=hub,
        )
        created["session"] = session
        return session

    def install(fail_init=0):
        monkeypatch.setattr(
            MoodSession, "from_config",
            staticmethod(lambda config=None, hub=None: factory(config, hub, fail_init)),
        )
        return created

    return install


class TestParser:
    def test_run_args(self):
        args = _build_parser().parse_args(
            ["run", "--camera", "1", "--fps", "15", "--duration", "2", "--trace", "minimal"]
        )
        assert args.command == "run"
        assert args.camera == 1
        assert args.fps == 15.0
        assert args.duration == 2.0
        assert args.trace == "minimal"

    def test_calibration_action_required(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["calibration"])

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestInfo:
    def test_info(self, capsys):
        assert main(["info"]) == 0
        out = capsys.readouterr().out
        assert "mooddj - System Information" in out
        assert "alpha: 0.25" in out
        assert "Baseline:   (none, using defaults)" in out
        assert "61" in out

    def test_info_with_config(self, tmp_path, capsys):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("smoothing:\n  alpha: 0.4\n")
        assert main(["info", "--config", str(cfg)]) == 0
        assert "alpha: 0.4" in capsys.readouterr().out


class TestCalibrationCommand:
    def test_show_empty(self, capsys):
        assert main(["calibration", "show"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["baseline"] is None
        assert data["swap_neutral_sad"] is False

    def test_swap_and_clear(self, capsys):
        main(["calibration", "swap", "--namespace", "den"])
        capsys.readouterr()
        main(["calibration", "show", "--namespace", "den"])
        assert json.loads(capsys.readouterr().out)["swap_neutral_sad"] is True

        main(["calibration", "clear", "--namespace", "den"])
        capsys.readouterr()
        main(["calibration", "show", "--namespace", "den"])
        assert json.loads(capsys.readouterr().out)["swap_neutral_sad"] is False

    def test_show_stored_baseline(self, isolated_home, capsys):
        store = CalibrationStore(path=isolated_home / "calibration" / "mooddj.calibration.json",
                                 min_stable_frames=1)
        store.capture("neutral", FEATURES, stable_frames=1)

        main(["calibration", "show"])
        data = json.loads(capsys.readouterr().out)
        assert data["baseline"]["smile_up"] == pytest.approx(0.04)

    def test_persistence_disabled(self, tmp_path, capsys):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("calibration:\n  persist: false\n")
        assert main(["calibration", "show", "--config", str(cfg)]) == 1


class TestRunCommand:
    def test_run_prints_changes(self, fake_session, capsys):
        fake_session()
        assert main(["run", "--duration", "0.3"]) == 0
        out = capsys.readouterr().out
        assert "Mood: neutral -> happy" in out
        assert "Final mood: happy" in out

    def test_run_calibrate_after(self, fake_session, capsys):
        created = fake_session()
        assert main(["run", "--duration", "0.4", "--calibrate-after", "0.1"]) == 0
        assert "Neutral baseline captured" in capsys.readouterr().out
        assert created["session"].pipeline.calibration.baseline is not None

    def test_run_writes_trace(self, fake_session, tmp_path, capsys):
        fake_session()
        trace = tmp_path / "trace.jsonl"
        assert main(["run", "--duration", "0.2", "--trace", "minimal",
                     "--trace-output", str(trace)]) == 0

        types = [json.loads(line)["record_type"] for line in trace.read_text().splitlines()]
        assert types[0] == "session_start"
        assert "mood_change" in types
        assert types[-1] == "session_end"

    def test_run_start_failure(self, fake_session, capsys):
        fake_session(fail_init=99)
        assert main(["run", "--duration", "0.1"]) == 1
        assert "could not start session" in capsys.readouterr().out
