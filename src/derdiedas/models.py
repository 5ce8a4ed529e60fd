from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Article(str, Enum):
    DIE = "die"
    DER = "der"
    DAS = "das"


class SelectionMode(str, Enum):
    UNIFORM = "uniform"
    WEIGHTED = "weighted"


SKIP_ANSWER = "(skip)"


class WordEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    term: str = Field(validation_alias=AliasChoices("term", "word"), min_length=1)
    article: Article
    translation: Optional[str] = Field(
        None, validation_alias=AliasChoices("translation", "english")
    )
    category: Optional[str] = None
    difficulty: Optional[str] = None
    plural: Optional[str] = None

    @field_validator("article", mode="before")
    @classmethod
    def _normalise_article(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("translation", "category", "difficulty", "plural", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        # CSV cells and hand-edited JSON often carry "" for "not set"
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def matches_difficulty(self, difficulty: str) -> bool:
        return (self.difficulty or "").lower() == difficulty.lower()


class Catalog(BaseModel):
    version: str = "1"
    data: List[WordEntry]

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_str(cls, value):
        return str(value)


class MistakeRecord(BaseModel):
    term: str
    user_answer: str
    correct_answer: Article
    translation: Optional[str] = None


class SessionResult(BaseModel):
    planned: int = 0
    correct_count: int = 0
    total_answered: int = 0
    mistakes: List[MistakeRecord] = []
    start_time: datetime = Field(default_factory=datetime.now)
    quit_early: bool = False

    @property
    def percentage(self) -> Optional[float]:
        if self.total_answered == 0:
            return None
        return self.correct_count / self.total_answered * 100

    @property
    def duration(self) -> timedelta:
        elapsed = datetime.now() - self.start_time
        return timedelta(seconds=round(elapsed.total_seconds()))


class StatisticsRecord(BaseModel):
    total_quizzes: int = Field(0, ge=0)
    total_questions: int = Field(0, ge=0)
    correct_answers: int = Field(0, ge=0)
    mistake_counts: Dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("mistake_counts", "word_stats"),
    )

    @field_validator("mistake_counts", mode="before")
    @classmethod
    def _null_counts(cls, value):
        return value if value is not None else {}

    @model_validator(mode="after")
    def _check_totals(self):
        if self.correct_answers > self.total_questions:
            raise ValueError(
                f"correct_answers ({self.correct_answers}) exceeds "
                f"total_questions ({self.total_questions})"
            )
        return self

    def record_mistake(self, term: str) -> int:
        self.mistake_counts[term] = self.mistake_counts.get(term, 0) + 1
        return self.mistake_counts[term]

    def mistakes_for(self, term: str) -> int:
        return self.mistake_counts.get(term, 0)

    def fold_session(self, result: SessionResult) -> bool:
        """Add a finished session to the lifetime totals.

        Sessions with no answered question are not counted.
        """
        if result.total_answered == 0:
            return False
        self.total_quizzes += 1
        self.total_questions += result.total_answered
        self.correct_answers += result.correct_count
        return True


class QuizPlan(BaseModel):
    questions: List[WordEntry] = []
    notices: List[str] = []
