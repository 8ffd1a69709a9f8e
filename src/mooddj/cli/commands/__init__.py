"""CLI command handlers."""

from mooddj.cli.commands.calibration import run_calibration
from mooddj.cli.commands.info import run_info
from mooddj.cli.commands.run import run_session

__all__ = [
    "run_info",
    "run_session",
    "run_calibration",
]
