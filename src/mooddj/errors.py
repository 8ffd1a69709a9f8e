"""Exception types for mooddj.

Expected per-frame conditions (no face, an ignored calibration capture)
are never raised across the public API. These exceptions cover malformed
input at internal seams and landmark backend start-up failures.
"""


class MoodDJError(Exception):
    """Base class for all mooddj errors."""


class LandmarkError(MoodDJError, ValueError):
    """Landmark set is malformed (wrong shape, too few points, NaNs).

    Raised by the metric extractor; the pipeline treats the frame
    as "no face".
    """


class SourceUnavailableError(MoodDJError, RuntimeError):
    """No landmark backend could be initialized."""


class CameraError(MoodDJError, IOError):
    """The camera device could not be opened."""


__all__ = [
    "MoodDJError",
    "LandmarkError",
    "SourceUnavailableError",
    "CameraError",
]
