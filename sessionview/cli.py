"""Command-line front door for sessionview.

Parses CLI options, merges them with persisted config, and resolves session
paths. Then dispatches into the interactive viewer or plain rendering.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .runtime import ViewerOptions, load_sessions, print_sessions, run_viewer
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _scroll_step(value: str) -> int:
    """argparse type for the scroll step."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if not config.MIN_SCROLL_STEP <= parsed <= config.MAX_SCROLL_STEP:
        raise argparse.ArgumentTypeError(
            f"value must be between {config.MIN_SCROLL_STEP} and {config.MAX_SCROLL_STEP}"
        )
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sessionview",
        description="Follow growing session transcripts in a scrollable terminal viewport.",
    )
    parser.add_argument("paths", nargs="+", metavar="PATH", help="Session files to open.")
    parser.add_argument(
        "--style",
        default=None,
        help="Highlight style: 'ansi' (16 colors) or a Pygments style name.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--step", type=_scroll_step, default=None, help="Lines per wheel tick or arrow key.")
    parser.add_argument("--render", action="store_true", help="Print highlighted session content and exit.")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write debug logs to PATH.")
    return parser


def configure_logging(log_file: str | None) -> None:
    """Send debug logs to ``log_file``; the terminal itself stays log-free."""
    if not log_file:
        return
    logging.basicConfig(filename=log_file, level=logging.DEBUG, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the viewer on the given session files."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    paths = [Path(raw) for raw in args.paths]
    for path in paths:
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        if path.is_dir():
            raise SystemExit(f"Not a file: {path}")

    options = ViewerOptions(
        style=args.style or config.load_style(),
        theme_name=args.theme or config.load_theme_name(),
        no_color=args.no_color,
        scroll_step=args.step if args.step is not None else config.load_scroll_step(),
    )

    if args.render:
        print_sessions(load_sessions(paths), options, sys.stdout.write)
        return
    run_viewer(paths, options)


if __name__ == "__main__":
    main()
