"""Tests for home directory and storage paths."""

from pathlib import Path

from mooddj.paths import _sanitize_key, get_calibration_path, get_home_dir, get_models_dir


class TestPaths:
    """Tests for path resolution."""

    def test_home_from_env(self, isolated_home):
        assert get_home_dir() == isolated_home
        assert isolated_home.is_dir()

    def test_default_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("MOODDJ_HOME")
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_home_dir() == tmp_path / ".mooddj"

    def test_models_dir_default(self, isolated_home):
        assert get_models_dir() == isolated_home / "models"

    def test_models_dir_env_relative(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MOODDJ_MODELS_DIR", "cache")
        assert get_models_dir() == tmp_path / "cache"
        assert (tmp_path / "cache").is_dir()

    def test_calibration_path(self, isolated_home):
        assert get_calibration_path("mooddj.calibration") == (
            isolated_home / "calibration" / "mooddj.calibration.json"
        )


class TestSanitizeKey:
    """Tests for namespace sanitization."""

    def test_spaces(self):
        assert _sanitize_key("living room") == "living_room"

    def test_path_separators_removed(self):
        assert "/" not in _sanitize_key("../../etc/passwd")

    def test_empty(self):
        assert _sanitize_key("///") == "default"
