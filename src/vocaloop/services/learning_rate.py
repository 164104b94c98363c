"""Learning-rate engine.

A word's learning rate is an integer score from 0 to 100. This module maps a
rate to a mastery status and a display color, and computes the new rate after
a quiz answer. Everything here is pure: no I/O and no randomness.

Status bands:
    DIFFICULT   0 - 39
    LEARNING   40 - 79
    MEMORIZED  80 - 100
"""
import math
from typing import Any, Dict, Iterable, List, Union

from vocaloop.models.learning_models import (
    LearningStatus,
    QuizType,
    RGB,
    StatusConfig,
    WrongAnswerScore,
)

MIN_RATE = 0
MAX_RATE = 100
LEARNING_THRESHOLD = 40
MEMORIZED_THRESHOLD = 80

DANGER_COLOR = RGB(239, 68, 68)
PROGRESS_COLOR = RGB(59, 130, 246)
SUCCESS_COLOR = RGB(34, 197, 94)

STATUS_CONFIG: Dict[LearningStatus, StatusConfig] = {
    LearningStatus.DIFFICULT: StatusConfig("Difficult", DANGER_COLOR.hex, MIN_RATE, LEARNING_THRESHOLD - 1),
    LearningStatus.LEARNING: StatusConfig("Learning", PROGRESS_COLOR.hex, LEARNING_THRESHOLD, MEMORIZED_THRESHOLD - 1),
    LearningStatus.MEMORIZED: StatusConfig("Memorized", SUCCESS_COLOR.hex, MEMORIZED_THRESHOLD, MAX_RATE),
}

# Harder modalities reward proportionally more
QUIZ_TYPE_WEIGHT: Dict[str, float] = {
    QuizType.MULTIPLE.value: 1.0,
    QuizType.SHORT.value: 1.4,
    QuizType.TOEFL_COMPLETE.value: 1.8,
}

BASE_CORRECT_GAIN = 12
FIRST_WRONG_PENALTY = -5
REPEATED_WRONG_PENALTY = -10
MAX_WRONG_MULTIPLIER = 3
REASKED_CORRECT_RECOVERY = 0.6
AI_SIMILAR_CORRECT_RECOVERY = 1.0
AI_SIMILAR_BONUS = 3


def _as_number(value: Any) -> float:
    """Coerce to float. None, NaN and non-numbers become 0."""
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # Integers beyond the float range
            return math.inf if value > 0 else -math.inf
        return 0.0 if math.isnan(number) else number
    return 0.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_rate(value: Any) -> int:
    """Round to an integer and clamp to [0, 100]."""
    number = min(float(MAX_RATE), max(float(MIN_RATE), _as_number(value)))
    return round_half_up(number)


def classify(rate: Any) -> LearningStatus:
    """Return the mastery status for a learning rate. Missing values count as 0."""
    r = _as_number(rate)
    if r >= MEMORIZED_THRESHOLD:
        return LearningStatus.MEMORIZED
    if r >= LEARNING_THRESHOLD:
        return LearningStatus.LEARNING
    return LearningStatus.DIFFICULT


def _interpolate(start: RGB, end: RGB, t: float) -> RGB:
    t = min(1.0, max(0.0, t))
    return RGB(*(
        round_half_up(a + (b - a) * t)
        for a, b in zip(start, end)
    ))


def color_for(rate: Any) -> RGB:
    """Return the display color for a learning rate.

    Danger fades into progress across the DIFFICULT band, progress fades into
    success across the LEARNING band, and MEMORIZED is flat success.
    """
    r = min(float(MAX_RATE), max(float(MIN_RATE), _as_number(rate)))

    if r < LEARNING_THRESHOLD:
        return _interpolate(DANGER_COLOR, PROGRESS_COLOR, r / (LEARNING_THRESHOLD - 1))
    if r < MEMORIZED_THRESHOLD:
        span = MEMORIZED_THRESHOLD - LEARNING_THRESHOLD - 1
        return _interpolate(PROGRESS_COLOR, SUCCESS_COLOR, (r - LEARNING_THRESHOLD) / span)
    return SUCCESS_COLOR


def quiz_weight(quiz_type: Union[QuizType, str, None]) -> float:
    """Reward weight for a quiz type; unknown types weigh 1.0."""
    if isinstance(quiz_type, QuizType):
        quiz_type = quiz_type.value
    return QUIZ_TYPE_WEIGHT.get(quiz_type, 1.0)


def score_on_correct(
    current_rate: Any = 0,
    quiz_type: Union[QuizType, str, None] = QuizType.MULTIPLE,
    is_reasked: bool = False,
    is_ai_similar: bool = False,
    last_penalty: Any = 0,
) -> int:
    """Compute the new learning rate after a correct answer.

    Args:
        current_rate: The word's rate before this answer.
        quiz_type: Modality the question was asked in.
        is_reasked: The word was answered wrongly earlier in this session.
        is_ai_similar: The re-ask used a paraphrased variant of the question.
        last_penalty: Magnitude of the most recent penalty on this word.

    Returns:
        The new rate, an integer in [0, 100].
    """
    penalty = abs(_as_number(last_penalty))

    if is_ai_similar and penalty > 0:
        # Full recovery plus a bonus for solving a rephrased variant
        gain = penalty * AI_SIMILAR_CORRECT_RECOVERY + AI_SIMILAR_BONUS
    elif is_reasked and penalty > 0:
        gain = penalty * REASKED_CORRECT_RECOVERY
    else:
        gain = BASE_CORRECT_GAIN * quiz_weight(quiz_type)

    return clamp_rate(_as_number(current_rate) + gain)


def score_on_wrong(current_rate: Any = 0, wrong_count: Any = 0) -> WrongAnswerScore:
    """Compute the new learning rate after a wrong answer.

    ``wrong_count`` is the word's wrong-answer count before this answer. The
    first miss costs little; repeated misses escalate up to a capped multiple.
    """
    count = int(min(float(MAX_WRONG_MULTIPLIER), max(0.0, _as_number(wrong_count))))

    if count == 0:
        penalty = FIRST_WRONG_PENALTY
    else:
        penalty = REPEATED_WRONG_PENALTY * count

    new_rate = clamp_rate(_as_number(current_rate) + penalty)
    return WrongAnswerScore(new_rate=new_rate, penalty=penalty)


def group_by_status(words: Iterable[Any]) -> Dict[LearningStatus, List[Any]]:
    """Bucket words by the status of their ``learning_rate``."""
    groups: Dict[LearningStatus, List[Any]] = {status: [] for status in LearningStatus}
    for word in words:
        groups[classify(getattr(word, "learning_rate", None))].append(word)
    return groups


def sort_by_learning_rate(words: Iterable[Any], descending: bool = False) -> List[Any]:
    """Sort words by learning rate; words without a rate sort as 0."""
    return sorted(
        words,
        key=lambda word: _as_number(getattr(word, "learning_rate", None)),
        reverse=descending,
    )
