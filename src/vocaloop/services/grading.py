"""Local quiz generation and answer grading."""
import logging
import random
from typing import Any, List, NamedTuple, Optional, Sequence

from vocaloop.config import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_OPTION = "Other meaning {}"


class GradeResult(NamedTuple):
    """Outcome of grading a typed answer."""
    similarity: float
    is_correct: bool


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        row = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            row.append(min(
                previous[j - 1] + cost,  # substitute
                row[j - 1] + 1,  # insert
                previous[j] + 1,  # delete
            ))
        previous = row
    return previous[-1]


def grade_short_answer(
    user_answer: str,
    correct_answer: str,
    threshold: Optional[float] = None,
) -> GradeResult:
    """Grade a typed answer by string similarity.

    Case and surrounding whitespace are ignored. Similarity is
    ``1 - distance / longer_length``; answers at or above ``threshold`` pass.
    """
    if threshold is None:
        threshold = settings.grading.similarity_threshold

    user = (user_answer or "").strip().lower()
    correct = (correct_answer or "").strip().lower()

    if user == correct:
        return GradeResult(similarity=1.0, is_correct=True)

    distance = levenshtein_distance(user, correct)
    similarity = 1 - distance / max(len(user), len(correct))
    logger.debug(f"Graded {user!r} against {correct!r}: similarity {similarity:.2f}")
    return GradeResult(similarity=similarity, is_correct=similarity >= threshold)


def multiple_choice_options(
    word: Any,
    all_words: Sequence[Any],
    count: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Build shuffled answer options for a word.

    The correct meaning is always present. Distractors are distinct meanings of
    other words; placeholders fill in when the word list is too small.
    """
    if count is None:
        count = settings.grading.choices_per_question
    rng = rng or random.Random()

    correct = word.meaning
    candidates = sorted({w.meaning for w in all_words if w.meaning and w.meaning != correct})
    needed = count - 1

    if len(candidates) >= needed:
        wrong_options = rng.sample(candidates, needed)
    else:
        logger.debug(f"Only {len(candidates)} distractors available for {word.text!r}, padding")
        wrong_options = list(candidates)
        index = 1
        while len(wrong_options) < needed:
            placeholder = PLACEHOLDER_OPTION.format(index)
            if placeholder != correct and placeholder not in wrong_options:
                wrong_options.append(placeholder)
            index += 1

    options = [correct] + wrong_options
    rng.shuffle(options)
    return options
