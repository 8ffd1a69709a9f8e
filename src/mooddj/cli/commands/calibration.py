"""Calibration command for mooddj CLI."""

import json

from mooddj.calibration.store import CalibrationStore
from mooddj.cli.utils import load_config


def run_calibration(args) -> int:
    """Show, clear or swap the stored calibration."""
    config = load_config(args)
    path = config.calibration.resolve_path()
    if path is None:
        print("Error: calibration persistence is disabled in config")
        return 1

    store = CalibrationStore(path=path, namespace=config.calibration.namespace)

    if args.action == "clear":
        store.clear()
        print(f"Calibration cleared ({path})")
    elif args.action == "swap":
        swapped = store.swap()
        print(f"Neutral/sad swap {'on' if swapped else 'off'} ({path})")
    else:
        state = store.snapshot()
        print(json.dumps({
            "namespace": store.namespace,
            "path": str(path),
            "baseline": state.baseline.to_dict() if state.baseline is not None else None,
            "swap_neutral_sad": state.swap_neutral_sad,
        }, indent=2))
    return 0
