import logging
import random
import sys
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import get_log_dir, get_stats_path, get_data_dir, settings
from .display import Display, DisplayOptions
from .engine import LineReader, QuizEngine
from .errors import ConfigInputError, ShutdownRequested, StatisticsSaveError
from .models import SelectionMode, SessionResult, WordEntry
from .stats import StatisticsStore, compute_accuracy, top_missed
from .vocabulary import load_catalog

logger = logging.getLogger(__name__)


# --- Logging Setup ---
def setup_logging(log_dir: Optional[Path] = None, verbose: bool = False):
    logger = logging.getLogger(settings.PROJECT_NAME)
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_dir = Path(log_dir) if log_dir is not None else get_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / settings.LOG_FILE
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        sys.stderr.write(f"Warning: file logging disabled ({e})\n")

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    return logger


class State(Enum):
    MAIN_MENU = "main_menu"
    CUSTOM_CONFIG = "custom_config"
    RUNNING = "running"
    RESULTS = "results"
    STATS = "stats"
    EXIT = "exit"


QUIT_CHOICES = ("q", "quit", "exit")

DIFFICULTY_CHOICES = {
    "2": "easy",
    "easy": "easy",
    "e": "easy",
    "3": "medium",
    "medium": "medium",
    "m": "medium",
    "4": "hard",
    "hard": "hard",
    "h": "hard",
}


def parse_question_count(text: str) -> int:
    try:
        count = int(text)
    except ValueError as e:
        raise ConfigInputError(f"not a number: {text!r}") from e
    if not settings.CUSTOM_MIN <= count <= settings.CUSTOM_MAX:
        raise ConfigInputError(
            f"{count} is outside {settings.CUSTOM_MIN}-{settings.CUSTOM_MAX}"
        )
    return count


class QuizApp:
    """Main menu loop. Owns the catalog, the lifetime record and its store."""

    def __init__(
        self,
        words: List[WordEntry],
        store: StatisticsStore,
        display: Display,
        read_line=None,
        rng: Optional[random.Random] = None,
    ):
        self.words = words
        self.store = store
        self.display = display
        self.read_line = read_line or LineReader()
        self.stats = store.load()
        if store.last_load_error is not None:
            self.display.notice(
                f"Warning: could not parse {store.path.name}, starting fresh "
                f"({store.last_load_error})"
            )
        self.engine = QuizEngine(display, self.stats, self.read_line, rng)
        self.state = State.MAIN_MENU
        # Pending quiz request for RUNNING: (count, mode, difficulty)
        self._pending: Optional[Tuple[int, SelectionMode, Optional[str]]] = None
        self.last_result: Optional[SessionResult] = None
        self._finalized = False

    def run(self) -> None:
        """Drive the menu until the user quits, input closes or a signal arrives.

        Every way out ends in ``finalize`` so the statistics are always saved.
        """
        try:
            self.show_welcome()
            while self.state != State.EXIT:
                self.step()
        except (KeyboardInterrupt, EOFError, ShutdownRequested) as e:
            self.display.write()
            if isinstance(e, EOFError):
                self.display.notice("Input closed. Exiting...")
            self.display.notice("Saving stats and exiting...")
            logger.info(f"Shutting down on {type(e).__name__}")
            self.state = State.EXIT
        finally:
            self.finalize()

    def step(self) -> None:
        handler = {
            State.MAIN_MENU: self.main_menu,
            State.CUSTOM_CONFIG: self.custom_config,
            State.RUNNING: self.running,
            State.RESULTS: self.results,
            State.STATS: self.show_stats,
        }[self.state]
        self.state = handler()

    def show_welcome(self) -> None:
        self.display.welcome(compute_accuracy(self.stats), self.stats.total_quizzes)

    # --- States ---

    def main_menu(self) -> State:
        self.display.main_menu(settings.QUICK_QUIZ_SIZE)
        choice = self.read_line().lower()

        if choice == "1":
            self._pending = (settings.QUICK_QUIZ_SIZE, SelectionMode.UNIFORM, None)
            return State.RUNNING
        if choice == "2":
            return State.CUSTOM_CONFIG
        if choice == "3":
            return State.STATS
        if choice == "4":
            self._pending = (settings.PRACTICE_SIZE, SelectionMode.WEIGHTED, None)
            return State.RUNNING
        if choice in QUIT_CHOICES:
            self.display.write()
            self.display.notice("Tschüss! Keep practicing!")
            return State.EXIT

        self.display.error("Invalid choice. Please try again.")
        return State.MAIN_MENU

    def custom_config(self) -> State:
        self.display.prompt(
            f"\nHow many questions? ({settings.CUSTOM_MIN}-{settings.CUSTOM_MAX}): "
        )
        try:
            count = parse_question_count(self.read_line())
        except ConfigInputError as e:
            logger.debug(f"Custom quiz size rejected: {e}")
            self.display.error(f"Invalid number. Using default of {settings.CUSTOM_DEFAULT}.")
            count = settings.CUSTOM_DEFAULT

        self.display.difficulty_menu()
        difficulty = DIFFICULTY_CHOICES.get(self.read_line().lower())

        self._pending = (count, SelectionMode.UNIFORM, difficulty)
        return State.RUNNING

    def running(self) -> State:
        count, mode, difficulty = self._pending
        self._pending = None
        self.last_result = self.engine.run_session(self.words, count, mode, difficulty)
        return State.RESULTS

    def results(self) -> State:
        if self.last_result is not None and self.last_result.planned > 0:
            self.display.results(self.last_result)
        return State.MAIN_MENU

    def show_stats(self) -> State:
        self.display.statistics(
            self.stats,
            compute_accuracy(self.stats),
            top_missed(self.stats, self.words, settings.TOP_MISSED),
        )
        return State.MAIN_MENU

    # --- Persistence ---

    def save(self) -> bool:
        try:
            self.store.save(self.stats)
        except StatisticsSaveError as e:
            logger.error(str(e))
            self.display.warn_stderr(str(e))
            return False
        return True

    def finalize(self) -> None:
        if self._finalized:
            return
        self._finalized = True
        self.save()


def create_app(
    words_path: Union[str, Path, None] = None,
    stats_path: Union[str, Path, None] = None,
    display: Optional[Display] = None,
    read_line=None,
    rng: Optional[random.Random] = None,
) -> QuizApp:
    """Load the catalog (raising CatalogError if unusable) and the saved stats."""
    words = load_catalog(words_path or settings.WORDS_FILE, fallback_dir=get_data_dir())
    store = StatisticsStore(stats_path or get_stats_path())
    if display is None:
        display = Display(DisplayOptions.from_environment(sys.stdout))
    return QuizApp(words, store, display, read_line=read_line, rng=rng)
