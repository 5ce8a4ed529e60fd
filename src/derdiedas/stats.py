import json
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import StatisticsLoadError, StatisticsSaveError
from .models import StatisticsRecord, WordEntry

logger = logging.getLogger(__name__)


class StatisticsStore:
    """Reads and writes the lifetime statistics file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.last_load_error: Optional[StatisticsLoadError] = None

    def load(self) -> StatisticsRecord:
        """Return the stored record, or a fresh one if the file is missing or broken."""
        self.last_load_error = None
        try:
            return self._read()
        except FileNotFoundError:
            logger.info(f"No statistics at {self.path}, starting fresh")
        except StatisticsLoadError as e:
            logger.warning(f"Could not parse {self.path}, starting fresh ({e})")
            self.last_load_error = e
        return StatisticsRecord()

    def _read(self) -> StatisticsRecord:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise StatisticsLoadError(str(e)) from e

        try:
            raw = json.loads(text)
            if not isinstance(raw, dict):
                raise StatisticsLoadError("expected a JSON object")
            return StatisticsRecord.model_validate(raw)
        except (ValueError, ValidationError) as e:
            raise StatisticsLoadError(str(e)) from e

    def save(self, record: StatisticsRecord) -> None:
        # previous stats.json stays intact until os.replace
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StatisticsSaveError(
                f"could not create data dir {self.path.parent}: {e}"
            ) from e

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as fh:
                fh.write(record.model_dump_json(indent=2))
                fh.write("\n")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StatisticsSaveError(f"could not save stats to {self.path}: {e}") from e

        logger.info(
            f"Saved statistics to {self.path} "
            f"({record.total_quizzes} quizzes, {record.total_questions} questions)"
        )


def compute_accuracy(record: StatisticsRecord) -> Optional[float]:
    """Lifetime accuracy in percent, or None when no question was ever answered."""
    if record.total_questions == 0:
        return None
    return record.correct_answers / record.total_questions * 100


def top_missed(
    record: StatisticsRecord, catalog: Iterable[WordEntry], n: int = 5
) -> List[Tuple[WordEntry, int]]:
    by_term = {}
    for word in catalog:
        by_term.setdefault(word.term, word)

    missed = [(term, count) for term, count in record.mistake_counts.items() if count > 0]
    missed.sort(key=lambda item: item[1], reverse=True)

    return [(by_term[term], count) for term, count in missed[:n] if term in by_term]
