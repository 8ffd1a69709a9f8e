"""Home directory and storage path utilities.

Centralizes mooddj storage to ``~/.mooddj`` by default.
Override with ``MOODDJ_HOME`` or ``MOODDJ_MODELS_DIR`` environment variables.
"""

import os
import re
from pathlib import Path


def get_home_dir() -> Path:
    """Return the mooddj home directory, creating it if needed.

    Resolution order:
        1. ``MOODDJ_HOME`` environment variable.
        2. ``~/.mooddj`` (default).
    """
    home = os.environ.get("MOODDJ_HOME")
    if home:
        home_dir = Path(home)
    else:
        home_dir = Path.home() / ".mooddj"
    home_dir.mkdir(parents=True, exist_ok=True)
    return home_dir


def get_models_dir() -> Path:
    """Return the landmark model cache directory, creating it if needed.

    Resolution order:
        1. ``MOODDJ_MODELS_DIR`` environment variable (absolute or relative to CWD).
        2. ``{home}/models``.
    """
    env_val = os.environ.get("MOODDJ_MODELS_DIR")
    if env_val:
        models_dir = Path(env_val)
        if not models_dir.is_absolute():
            models_dir = Path.cwd() / models_dir
    else:
        models_dir = get_home_dir() / "models"
    models_dir.mkdir(parents=True, exist_ok=True)
    return models_dir


def get_calibration_path(namespace: str) -> Path:
    """Return the calibration file for a storage namespace.

    Resolution: ``{home}/calibration/{sanitized_namespace}.json``.
    The file itself is not created.
    """
    return get_home_dir() / "calibration" / f"{_sanitize_key(namespace)}.json"


def _sanitize_key(key: str) -> str:
    """Make a namespace string safe for use as a file name."""
    s = key.replace(" ", "_")
    s = re.sub(r"[^\w.\-]", "", s)
    s = re.sub(r"_+", "_", s)
    s = s.strip("_.")
    return s if s else "default"
