"""
Domain models for the LearnDeck study core
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from .errors import ConfigurationError, InvalidConfigError


class Difficulty(Enum):
    """Mastery state of a word"""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        """Convert a raw value into a Difficulty"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown difficulty: {value!r}") from None


class StudyType(Enum):
    """Which words a study session draws from"""

    ALL = "all"
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: "StudyType | str") -> "StudyType":
        """Convert a raw value into a StudyType"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigError(f"Unknown study type: {value!r}") from None


@dataclass
class Word:
    """A vocabulary word and its review state"""

    id: Any
    word: str
    definition: str
    difficulty: Difficulty = Difficulty.NEW
    review_count: int = 0
    correct_count: int = 0
    last_reviewed: datetime | None = None
    next_review: datetime = field(default_factory=lambda: datetime.now() + timedelta(days=1))
    folders: frozenset = frozenset()
    article: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def accuracy(self) -> float | None:
        """Share of correct answers, None if never answered"""
        if self.review_count == 0:
            return None
        return self.correct_count / self.review_count

    @property
    def display_word(self) -> str:
        if self.article and self.article.strip():
            return f"{self.article} {self.word}"
        return self.word


@dataclass(frozen=True)
class Folder:
    """Named group of words"""

    id: Any
    name: str
    color: str = "#3B82F6"
    created_at: datetime | None = None


@dataclass(frozen=True)
class StudyConfig:
    """Per-session request: which words to study and how many"""

    study_type: StudyType = StudyType.ALL
    folder_id: Any = None
    folder_name: str = "All words"
    word_count: int | None = None

    @classmethod
    def from_values(
        cls,
        study_type: str,
        folder_id: Any = None,
        folder_name: str | None = None,
        word_count: int | None = None,
    ) -> "StudyConfig":
        """Build a config from raw request values"""
        if word_count is not None and word_count < 1:
            raise InvalidConfigError(f"word_count must be positive, got {word_count}")
        return cls(
            study_type=StudyType.parse(study_type),
            folder_id=folder_id,
            folder_name=folder_name or ("All words" if folder_id is None else str(folder_id)),
            word_count=word_count,
        )


@dataclass(frozen=True)
class ReviewResult:
    """Word state produced by one answer"""

    difficulty: Difficulty
    next_review: datetime
    last_reviewed: datetime
    review_count: int
    correct_count: int
    interval_days: float
    is_correct: bool

    def as_update(self) -> dict[str, Any]:
        """Fields written back to the word store"""
        return {
            "difficulty": self.difficulty.value,
            "next_review": self.next_review,
            "last_reviewed": self.last_reviewed,
            "review_count": self.review_count,
            "correct_count": self.correct_count,
        }


@dataclass
class SessionStats:
    """Running answer counters of a study session"""

    correct: int = 0
    total: int = 0

    @property
    def incorrect(self) -> int:
        return self.total - self.correct

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total

    def record(self, is_correct: bool) -> None:
        self.total += 1
        if is_correct:
            self.correct += 1

    def as_dict(self) -> dict[str, int]:
        return {"correct": self.correct, "total": self.total}


@dataclass
class StudySessionRecord:
    """Stored history entry for one study session"""

    id: int
    user_id: int
    folder_id: Any
    study_type: StudyType
    started_at: datetime
    words_studied: int = 0
    correct_answers: int = 0
    total_time_minutes: float = 0.0
    completed_at: datetime | None = None


@dataclass
class RecentStudyOption:
    """Recently used folder/study type combination"""

    folder_id: Any
    study_type: StudyType
    use_count: int
    last_used_at: datetime
