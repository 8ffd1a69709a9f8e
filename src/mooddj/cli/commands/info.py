"""Info command for mooddj CLI.

Shows the resolved configuration, stored calibration and which landmark
backends can be imported.
"""

import yaml

from mooddj.calibration.persistence import load_calibration
from mooddj.cli.utils import load_config
from mooddj.landmarks import MIN_LANDMARKS, REQUIRED_INDICES


def run_info(args) -> int:
    """Show system information."""
    config = load_config(args)

    print("mooddj - System Information")
    print("=" * 60)
    _print_version_info()

    print("\n[Configuration]")
    print("-" * 60)
    text = yaml.safe_dump(config.to_dict(), sort_keys=False, default_flow_style=False)
    for line in text.splitlines():
        print(f"  {line}")

    print("\n[Calibration]")
    print("-" * 60)
    path = config.calibration.resolve_path()
    if path is None:
        print("  Persistence: disabled")
    else:
        state = load_calibration(path, config.calibration.namespace)
        print(f"  Namespace:  {config.calibration.namespace}")
        print(f"  File:       {path}{'' if path.exists() else ' (not created yet)'}")
        if state.baseline is not None:
            b = state.baseline
            print(f"  Baseline:   smile_up={b.smile_up:.4f} mouth_open={b.mouth_open:.4f} "
                  f"eye_gap={b.eye_gap:.4f} mouth_width={b.mouth_width:.4f}")
        else:
            print("  Baseline:   (none, using defaults)")
        print(f"  Swap N/S:   {'on' if state.swap_neutral_sad else 'off'}")

    print("\n[Landmarks]")
    print("-" * 60)
    print(f"  Minimum landmarks: {MIN_LANDMARKS}")
    print(f"  Required indices:  {', '.join(str(i) for i in REQUIRED_INDICES)}")

    print("\n[Backends]")
    print("-" * 60)
    _check_module("mediapipe", "MediaPipe (face_landmarker, face_mesh)")
    _check_module("cv2", "OpenCV (camera)")
    return 0


def _print_version_info():
    from mooddj import __version__

    print(f"  mooddj: {__version__}")


def _check_module(module: str, label: str):
    try:
        mod = __import__(module)
    except ImportError:
        print(f"  [-] {label}: NOT INSTALLED (pip install mooddj[camera])")
        return
    version = getattr(mod, "__version__", "installed")
    print(f"  [+] {label}: {version}")
