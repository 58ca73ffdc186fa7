"""Command-line front door for lazytable.

Parses CLI options, builds one of the demo datasets, and runs an interactive
table session. Without a terminal it prints a single static frame instead.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import load_session_config
from .demo_data import EXAMPLES, example_source
from .render import FrameRenderer
from .session import InteractiveSession
from .state import VirtualListState
from .style import PLAIN_STYLE, available_style_names
from .terminal import TerminalUnavailable

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Demonstrate an interactive virtual table with keyboard navigation."
    )
    parser.add_argument("--example", choices=sorted(EXAMPLES), default="users", help="Example dataset.")
    parser.add_argument("--rows", type=_nonnegative_int, default=100, help="Number of data rows to generate.")
    parser.add_argument("--height", type=_positive_int, default=None, help="Number of visible rows.")
    parser.add_argument(
        "--style",
        default=None,
        help=f"Visual style ({', '.join(available_style_names())}).",
    )
    parser.add_argument("--lazy", action="store_true", help="Fetch rows on demand through a lazy data source.")
    parser.add_argument("--exit-on-enter", action="store_true", default=None, help="Finish when Enter is pressed.")
    parser.add_argument("--log-file", metavar="PATH", help="Write log records to PATH.")
    parser.add_argument("--verbose", action="store_true", help="Log debug records (requires --log-file).")
    return parser


def configure_logging(log_file: str | None, verbose: bool) -> None:
    """Send logs to ``log_file`` when given; otherwise only warnings reach stderr."""
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG if verbose else logging.INFO,
            format=LOG_FORMAT,
        )
    else:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)


def print_static_frame(session: InteractiveSession, columns, out=None) -> None:
    """Print the first page of ``session``'s rows as plain text."""
    out = sys.stdout if out is None else out
    config = session.config
    state = VirtualListState(session.list_state.data_source, config.visible_height)
    renderer = FrameRenderer(columns, PLAIN_STYLE, config.terminal_width)
    out.write(renderer.build(state))
    out.flush()


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the selected demo table."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose and not args.log_file:
        parser.error("--verbose requires --log-file")
    configure_logging(args.log_file, args.verbose)

    config = load_session_config(
        visible_height=args.height,
        style_name=args.style,
        exit_on_enter=args.exit_on_enter,
    )
    title, make_row, columns = EXAMPLES[args.example]
    source = example_source(make_row, args.rows, lazy=args.lazy)
    session = InteractiveSession(source, columns, config=config)

    try:
        session.start()
    except TerminalUnavailable as exc:
        logger.info("no terminal available: %s", exc)
        print(f"{title} (non-interactive: {exc})")
        print_static_frame(session, columns)
        raise SystemExit(1)

    selected = session.current_selection()
    if selected is not None:
        print(f"You were viewing: {selected}")
    for row in session.selected_rows():
        print(f"Selected: {row}")
