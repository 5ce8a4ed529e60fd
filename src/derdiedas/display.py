import os
import sys
from typing import List, Optional, TextIO, Tuple

from pydantic import BaseModel

from .models import Article, MistakeRecord, SessionResult, StatisticsRecord, WordEntry

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"
BOLD = "\033[1m"

RULE_WIDTH = 40


class DisplayOptions(BaseModel):
    color_enabled: bool = False

    @classmethod
    def from_environment(cls, stream: Optional[TextIO] = None, force_off: bool = False):
        """Colours are on only for a real terminal without NO_COLOR or TERM=dumb."""
        stream = stream if stream is not None else sys.stdout
        if force_off or os.environ.get("NO_COLOR"):
            return cls(color_enabled=False)
        term = os.environ.get("TERM", "")
        if not term or term == "dumb":
            return cls(color_enabled=False)
        isatty = getattr(stream, "isatty", None)
        return cls(color_enabled=bool(isatty and isatty()))


def score_color(percentage: float) -> str:
    if percentage >= 90:
        return GREEN
    if percentage >= 70:
        return YELLOW
    return RED


class Display:
    """All text the user sees goes through here."""

    def __init__(
        self,
        options: DisplayOptions,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self.options = options
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def paint(self, text: str, *codes: str) -> str:
        if not self.options.color_enabled or not codes:
            return text
        return f"{''.join(codes)}{text}{RESET}"

    def write(self, text: str = "", end: str = "\n") -> None:
        self.out.write(text + end)
        self.out.flush()

    def prompt(self, text: str) -> None:
        self.write(text, end="")

    def notice(self, text: str) -> None:
        self.write(self.paint(text, YELLOW))

    def success(self, text: str) -> None:
        self.write(self.paint(text, GREEN))

    def error(self, text: str) -> None:
        self.write(self.paint(text, RED))

    def warn_stderr(self, text: str) -> None:
        self.err.write(f"Warning: {text}\n")
        self.err.flush()

    # --- Screens ---

    def welcome(self, accuracy: Optional[float], total_quizzes: int) -> None:
        self.write(self.paint("=== German Article Quiz ===", BOLD, BLUE))
        self.write()
        if accuracy is None:
            self.write("Welcome! Let's start with a quick quiz to build your stats.")
        else:
            self.write(
                f"Welcome back! Your overall accuracy: {self.paint(f'{accuracy:.1f}%', CYAN)}"
            )
            self.write(f"Total quizzes completed: {total_quizzes}")
        self.write()

    def main_menu(self, quick_size: int) -> None:
        self.write()
        self.write(self.paint("Main Menu:", BOLD))
        self.write(f"1. Quick Quiz ({quick_size} questions)")
        self.write("2. Custom Quiz")
        self.write("3. View Statistics")
        self.write("4. Practice Mode (focus on mistakes)")
        self.write("q. Quit")
        self.prompt("\nYour choice: ")

    def difficulty_menu(self) -> None:
        self.write()
        self.write("Select difficulty:")
        self.write("1. All levels")
        self.write("2. Easy only")
        self.write("3. Medium only")
        self.write("4. Hard only")
        self.prompt("Your choice: ")

    def quiz_header(self, count: int) -> None:
        self.write()
        self.write(self.paint(f"Starting quiz with {count} questions...", BOLD, CYAN))
        self.write("-" * RULE_WIDTH)

    def question(self, word: WordEntry, current: int, total: int) -> None:
        self.write()
        self.write(self.paint(f"Question {current}/{total}", BOLD))
        if word.translation:
            self.write(f"({self.paint(word.translation, CYAN)})")
        self.write()
        self.write(f"What is the article for {self.paint(word.term, BOLD)}?")
        for number, article in enumerate(Article, start=1):
            self.write(f"  {self.paint(f'{number}.', YELLOW)} {article.value}")
        self.write()
        self.write("Type 1-3 or 'der/die/das'. '?': hint, 's': skip, 'q': quit quiz")

    def hint(self, word: WordEntry) -> None:
        bits = []
        if word.translation:
            bits.append(f"EN: {word.translation}")
        if word.category:
            bits.append(f"Category: {word.category}")
        if word.difficulty:
            bits.append(f"Difficulty: {word.difficulty}")
        if word.plural:
            bits.append(f"Plural: {word.plural}")
        if not bits:
            self.write("No hint available.")
            return
        self.write(f"Hint: {' | '.join(bits)}")

    def correct(self, word: WordEntry) -> None:
        text = self.paint("✓ Correct!", GREEN)
        if word.plural:
            text += f" (Plural: {word.plural})"
        self.write(text)

    def wrong(self, word: WordEntry) -> None:
        self.write(
            f"{self.paint('✗ Wrong!', RED)} The correct answer is "
            f"{self.paint(word.article.value, GREEN)} {word.term}"
        )

    def results(self, result: SessionResult) -> None:
        percentage = result.percentage
        if percentage is None:
            self.write()
            self.notice("No answers recorded.")
            return

        self.write()
        self.write("=" * RULE_WIDTH)
        self.write(self.paint("Quiz Complete!", BOLD))
        self.write(f"Time: {result.duration}")
        score = f"{result.correct_count}/{result.total_answered} ({percentage:.1f}%)"
        self.write(f"Score: {self.paint(score, score_color(percentage))}")

        if result.mistakes:
            self.write()
            self.notice("Mistakes to review:")
            for mistake in result.mistakes:
                self.write(self._mistake_line(mistake))

        self.write("=" * RULE_WIDTH)

    def _mistake_line(self, mistake: MistakeRecord) -> str:
        line = f"• {self.paint(mistake.correct_answer.value, BOLD)} {mistake.term}"
        if mistake.translation:
            line += f" ({mistake.translation})"
        return line + f" - you said: {self.paint(mistake.user_answer, RED)}"

    def statistics(
        self,
        record: StatisticsRecord,
        accuracy: Optional[float],
        missed: List[Tuple[WordEntry, int]],
    ) -> None:
        if accuracy is None:
            self.write()
            self.notice("No statistics available yet. Take a quiz first!")
            return

        self.write()
        self.write(self.paint("Overall Statistics:", BOLD, CYAN))
        self.write("-" * RULE_WIDTH)
        self.write(f"Total Quizzes: {record.total_quizzes}")
        self.write(f"Total Questions: {record.total_questions}")
        self.write(f"Correct Answers: {record.correct_answers}")
        self.write(f"Overall Accuracy: {self.paint(f'{accuracy:.1f}%', score_color(accuracy))}")

        if missed:
            self.write()
            self.notice("Most Challenging Words:")
            for word, count in missed:
                self.write(f"• {word.article.value} {word.term} - missed {count} time(s)")
