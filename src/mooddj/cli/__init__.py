"""Command-line interface for mooddj."""

import argparse
import logging
import sys

from mooddj.cli.utils import configure_log_levels, suppress_thirdparty_noise

# Apply third-party noise suppression early
suppress_thirdparty_noise()


def _add_config_args(parser):
    """Add --config, --namespace args to a parser."""
    parser.add_argument("--config", type=str, metavar="PATH", help="Path to pipeline config YAML file")
    parser.add_argument(
        "--namespace", type=str, default=None,
        help="Calibration storage namespace (default: from config)",
    )


def _add_trace_args(parser):
    """Add --trace, --trace-output args to a parser."""
    parser.add_argument("--trace", choices=["off", "minimal", "normal", "verbose"], default="off")
    parser.add_argument("--trace-output", type=str, help="Output file for trace records (JSONL)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mooddj",
        description="mooddj - Webcam mood inference for playlist curation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mooddj info                                 # Config, calibration, backends
  mooddj run                                  # Live mood from camera 0
  mooddj run --camera 1 --fps 15              # Other camera, lower rate
  mooddj run --calibrate-after 3              # Capture neutral baseline after 3s
  mooddj run --trace normal --trace-output t.jsonl
  mooddj calibration show                     # Stored calibration
  mooddj calibration swap                     # Toggle neutral/sad swap
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show configuration, calibration and backend availability",
    )
    _add_config_args(info_parser)

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run live mood inference from a camera",
        description="Print mood label changes until Ctrl-C or --duration elapses.",
    )
    run_parser.add_argument("--camera", type=int, default=None, help="Camera index (default: from config, 0)")
    run_parser.add_argument("--fps", type=float, default=None, help="Target FPS (default: from config, 30)")
    run_parser.add_argument("--duration", type=float, default=None, help="Stop after N seconds")
    run_parser.add_argument(
        "--calibrate-after", type=float, default=None, metavar="SECONDS",
        help="Capture the neutral baseline N seconds after start",
    )
    _add_config_args(run_parser)
    _add_trace_args(run_parser)

    # calibration command
    cal_parser = subparsers.add_parser("calibration", help="Inspect or modify stored calibration")
    cal_parser.add_argument("action", choices=["show", "clear", "swap"])
    _add_config_args(cal_parser)

    return parser


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)
        configure_log_levels()

    from mooddj.cli import commands

    if args.command == "info":
        return commands.run_info(args)

    elif args.command == "run":
        return commands.run_session(args)

    elif args.command == "calibration":
        return commands.run_calibration(args)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
