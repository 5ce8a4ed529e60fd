import argparse
import logging
import random
import signal
import sys
from typing import List, Optional

from .app import create_app, setup_logging
from .config import settings
from .display import Display, DisplayOptions
from .errors import CatalogError, ShutdownRequested
from .stats import compute_accuracy, top_missed

logger = logging.getLogger(__name__)


def _on_sigterm(signum, frame):
    # Further signals must not interrupt the save that follows
    signal.signal(signal.SIGTERM, signal.SIG_IGN)
    raise ShutdownRequested(f"signal {signum}")


def install_signal_handlers() -> None:
    """SIGTERM unwinds the menu loop like Ctrl+C does, so both end in the same save."""
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _on_sigterm)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=settings.PROJECT_NAME,
        description="German article quiz: practice der/die/das from the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Answers during a quiz:
  1 / die / f      2 / der / m / r      3 / das / n
  ?  hint          s  skip              q  leave the quiz

Examples:
  derdiedas
  derdiedas --words my_words.json
  derdiedas --show-stats
        """,
    )
    parser.add_argument(
        "--words",
        default=settings.WORDS_FILE,
        help=f"Word list (.json or .csv), default: {settings.WORDS_FILE}",
    )
    parser.add_argument("--stats-file", help="Statistics file to read and update")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--seed", type=int, help="Seed the shuffle for reproducible quizzes")
    parser.add_argument(
        "--show-stats",
        action="store_true",
        help="Print lifetime statistics and exit",
    )
    parser.add_argument("--verbose", action="store_true", help="Also log to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    # undecodable bytes become U+FFFD and are rejected as invalid input
    if hasattr(sys.stdin, "reconfigure"):
        sys.stdin.reconfigure(errors="replace")

    display = Display(DisplayOptions.from_environment(sys.stdout, force_off=args.no_color))
    rng = random.Random(args.seed)

    try:
        app = create_app(args.words, args.stats_file, display=display, rng=rng)
    except CatalogError as e:
        logger.error(f"Error loading words: {e}")
        display.error(f"Error loading words: {e}")
        return 1

    if args.show_stats:
        display.statistics(
            app.stats,
            compute_accuracy(app.stats),
            top_missed(app.stats, app.words, settings.TOP_MISSED),
        )
        return 0

    install_signal_handlers()
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
