"""Value types used by the learning-rate engine and study sessions."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional


class LearningStatus(Enum):
    """Mastery status derived from a learning rate."""
    DIFFICULT = "difficult"  # 0 - 39
    LEARNING = "learning"  # 40 - 79
    MEMORIZED = "memorized"  # 80 - 100


class QuizType(Enum):
    """Available quiz modalities."""
    MULTIPLE = "multiple"  # Multiple choice
    SHORT = "short"  # Typed short answer
    TOEFL_COMPLETE = "toefl-complete"  # Complete-the-word


class RGB(NamedTuple):
    """An RGB color triple."""
    red: int
    green: int
    blue: int

    @property
    def hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


class WrongAnswerScore(NamedTuple):
    """Result of scoring a wrong answer. ``penalty`` is signed (e.g. -20)."""
    new_rate: int
    penalty: int


@dataclass(frozen=True)
class StatusConfig:
    """Display metadata for a learning status."""
    label: str
    color: str
    low: int
    high: int


@dataclass(frozen=True)
class AnswerOutcome:
    """What happened to a word after one answer in a study session."""
    word: Any
    is_correct: bool
    is_reasked: bool
    rate_before: int
    rate_after: int
    status: LearningStatus
    penalty: int = 0
    needs_break: bool = False
    is_complete: bool = False
    next_word: Optional[Any] = None

    @property
    def delta(self) -> int:
        return self.rate_after - self.rate_before
