import logging
import random
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, TextIO, Union

from .config import settings
from .display import Display
from .errors import InputParseError
from .models import (
    SKIP_ANSWER,
    Article,
    MistakeRecord,
    QuizPlan,
    SelectionMode,
    SessionResult,
    StatisticsRecord,
    WordEntry,
)

logger = logging.getLogger(__name__)


class Command(str, Enum):
    QUIT = "quit"
    HINT = "hint"
    SKIP = "skip"


COMMAND_ALIASES: Dict[str, Command] = {
    "q": Command.QUIT,
    "quit": Command.QUIT,
    "exit": Command.QUIT,
    "?": Command.HINT,
    "h": Command.HINT,
    "hint": Command.HINT,
    "s": Command.SKIP,
    "skip": Command.SKIP,
}

ARTICLE_ALIASES: Dict[str, Article] = {
    "1": Article.DIE,
    "die": Article.DIE,
    "f": Article.DIE,
    "fem": Article.DIE,
    "feminine": Article.DIE,
    "2": Article.DER,
    "der": Article.DER,
    "r": Article.DER,
    "m": Article.DER,
    "masc": Article.DER,
    "masculine": Article.DER,
    "3": Article.DAS,
    "das": Article.DAS,
    "n": Article.DAS,
    "neut": Article.DAS,
    "neuter": Article.DAS,
}


def parse_answer(text: str) -> Union[Article, Command]:
    """Map a typed answer to an article or a quiz command.

    Commands are checked before articles, so ``s`` means skip rather than
    the neuter ``das``.
    """
    key = text.strip().lower()
    if key in COMMAND_ALIASES:
        return COMMAND_ALIASES[key]
    if key in ARTICLE_ALIASES:
        return ARTICLE_ALIASES[key]
    raise InputParseError(f"unrecognised answer: {text!r}")


class LineReader:
    """Reads one trimmed line per call; raises EOFError once the stream is closed."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def __call__(self) -> str:
        stream = self.stream if self.stream is not None else sys.stdin
        line = stream.readline()
        if not line:
            raise EOFError("input closed")
        return line.strip()


# --- Question selection ---


def filter_by_difficulty(words: List[WordEntry], difficulty: str) -> List[WordEntry]:
    return [w for w in words if w.matches_difficulty(difficulty)]


def expand_practice_pool(
    words: List[WordEntry],
    stats: StatisticsRecord,
    max_repeats: int = settings.MAX_REPEATS,
) -> List[WordEntry]:
    """Repeat each missed word ``min(mistakes + 1, max_repeats)`` times.

    Words never missed contribute nothing.
    """
    pool = []
    for word in words:
        mistakes = stats.mistakes_for(word.term)
        if mistakes <= 0:
            continue
        pool.extend([word] * min(mistakes + 1, max_repeats))
    return pool


class QuizGenerator(ABC):
    """Strategy for picking the questions of one session."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    @abstractmethod
    def generate(self, words: List[WordEntry], count: int) -> QuizPlan:
        pass

    def _shuffled(self, words: List[WordEntry]) -> List[WordEntry]:
        shuffled = list(words)
        self.rng.shuffle(shuffled)
        return shuffled


class RandomQuizGenerator(QuizGenerator):
    """Quick and custom quizzes: distinct words, optionally of one difficulty."""

    def __init__(self, rng: random.Random, difficulty: Optional[str] = None):
        super().__init__(rng)
        self.difficulty = difficulty

    def generate(self, words: List[WordEntry], count: int) -> QuizPlan:
        notices = []
        available = words
        if self.difficulty:
            filtered = filter_by_difficulty(words, self.difficulty)
            if filtered:
                available = filtered
            else:
                notices.append(f"No words found for '{self.difficulty}'. Using all levels.")

        count = max(0, min(count, len(available)))
        return QuizPlan(questions=self._shuffled(available)[:count], notices=notices)


class PracticeQuizGenerator(QuizGenerator):
    """Practice mode: missed words only, repeated according to their mistake count."""

    def __init__(
        self,
        rng: random.Random,
        stats: StatisticsRecord,
        max_repeats: int = settings.MAX_REPEATS,
    ):
        super().__init__(rng)
        self.stats = stats
        self.max_repeats = max_repeats

    def generate(self, words: List[WordEntry], count: int) -> QuizPlan:
        pool = expand_practice_pool(words, self.stats, self.max_repeats)
        if not pool:
            return QuizPlan()

        challenging = len({w.term for w in pool})
        notice = f"Practice Mode: Focusing on {challenging} challenging words"
        count = min(count, len(pool))
        return QuizPlan(questions=self._shuffled(pool)[:count], notices=[notice])


class QuizFactory:
    """Factory to select the appropriate generator."""

    @staticmethod
    def create(
        mode: SelectionMode,
        rng: random.Random,
        stats: StatisticsRecord,
        difficulty: Optional[str] = None,
    ) -> QuizGenerator:
        if mode == SelectionMode.WEIGHTED:
            return PracticeQuizGenerator(rng, stats)
        return RandomQuizGenerator(rng, difficulty)


# --- Running a session ---


class QuizEngine:
    def __init__(
        self,
        display: Display,
        stats: StatisticsRecord,
        read_line=None,
        rng: Optional[random.Random] = None,
    ):
        self.display = display
        self.stats = stats
        self.read_line = read_line or LineReader()
        self.rng = rng or random.Random()

    def run_session(
        self,
        candidate_pool: List[WordEntry],
        question_count: int,
        selection_mode: SelectionMode = SelectionMode.UNIFORM,
        difficulty: Optional[str] = None,
    ) -> SessionResult:
        """Ask a sequence of questions and fold the outcome into the lifetime stats.

        Returns a result with ``planned == 0`` when there is nothing to ask
        (e.g. practice mode without any recorded mistakes).
        """
        generator = QuizFactory.create(selection_mode, self.rng, self.stats, difficulty)
        plan = generator.generate(candidate_pool, question_count)

        if not plan.questions:
            if selection_mode == SelectionMode.WEIGHTED:
                self.display.success("\nNo mistakes to practice yet! Great job!")
            else:
                self.display.error("No words available to quiz.")
            return SessionResult()

        for notice in plan.notices:
            self.display.notice(notice)

        logger.info(
            f"Session started [mode: {selection_mode.value}, difficulty: {difficulty or 'all'}, "
            f"questions: {len(plan.questions)}]"
        )

        total = len(plan.questions)
        result = SessionResult(planned=total)
        if selection_mode == SelectionMode.UNIFORM:
            self.display.quiz_header(total)

        for index, word in enumerate(plan.questions, start=1):
            if not self.ask_question(word, index, total, result):
                result.quit_early = True
                break
            result.total_answered += 1

        if self.stats.fold_session(result):
            logger.info(
                f"Session finished: {result.correct_count}/{result.total_answered} correct"
            )
        return result

    def ask_question(
        self, word: WordEntry, current: int, total: int, result: SessionResult
    ) -> bool:
        """Returns False when the user asked to leave the quiz."""
        self.display.question(word, current, total)

        while True:
            self.display.prompt("Your answer: ")
            try:
                answer = parse_answer(self.read_line())
            except InputParseError:
                self.display.error("Invalid input. Try 1/2/3 or der/die/das ('?': hint).")
                continue

            if answer == Command.QUIT:
                self.display.notice("Exiting quiz early...")
                return False
            if answer == Command.HINT:
                self.display.hint(word)
                continue
            if answer == Command.SKIP:
                self.mark_wrong(word, SKIP_ANSWER, result)
                return True

            if answer == word.article:
                result.correct_count += 1
                self.display.correct(word)
            else:
                self.mark_wrong(word, answer.value, result)
            return True

    def mark_wrong(self, word: WordEntry, user_answer: str, result: SessionResult) -> None:
        self.display.wrong(word)
        result.mistakes.append(
            MistakeRecord(
                term=word.term,
                user_answer=user_answer,
                correct_answer=word.article,
                translation=word.translation,
            )
        )
        self.stats.record_mistake(word.term)
