"""Run command for mooddj CLI.

Starts a webcam session and prints label changes as they happen.
"""

import time

from mooddj.cli.utils import cleanup_observability, load_config, setup_observability
from mooddj.pipeline.session import MoodSession


def run_session(args) -> int:
    """Run live mood inference until Ctrl-C or --duration."""
    config = load_config(args)
    hub, file_sink = setup_observability(
        getattr(args, "trace", "off"), getattr(args, "trace_output", None)
    )

    session = MoodSession.from_config(config, hub=hub)
    session.subscribe(_print_change)

    try:
        if not session.start():
            print(f"Error: could not start session: {session.last_error}")
            return 1

        print(f"Mood: {session.mood.value}  (Ctrl-C to stop)")
        _wait(session, getattr(args, "duration", None), getattr(args, "calibrate_after", None))
    finally:
        session.close()
        cleanup_observability(hub)

    scores = session.scores
    print(f"Final mood: {session.mood.value} "
          f"(happy={scores.happy:.2f} neutral={scores.neutral:.2f} sad={scores.sad:.2f})")
    if file_sink is not None:
        print(f"Trace written to {file_sink.path}")
    return 0


def _wait(session: MoodSession, duration, calibrate_after):
    start = time.monotonic()
    calibrated = calibrate_after is None
    try:
        while session.running:
            elapsed = time.monotonic() - start
            if duration is not None and elapsed >= duration:
                break
            if not calibrated and elapsed >= calibrate_after:
                calibrated = True
                if session.capture_calibration("neutral"):
                    print("Neutral baseline captured")
                else:
                    print("Calibration skipped: face not tracked steadily yet")
            time.sleep(0.1)
    except KeyboardInterrupt:
        print()


def _print_change(old, new, scores):
    print(f"Mood: {old.value} -> {new.value}  "
          f"(happy={scores.happy:.2f} neutral={scores.neutral:.2f} sad={scores.sad:.2f})")
