"""Learning queue for a single study session.

A wrong answer sends the current word to the back of the queue, a correct
answer removes it for good. Every function returns a new ``QueueState``.
"""
from dataclasses import replace
from typing import Any, Iterable, Optional

from vocaloop.models.queue_models import QueueState, SessionStats
from vocaloop.services.learning_rate import round_half_up

STUDY_BREAK_THRESHOLD = 3  # consecutive wrong answers


class QueueCompleteError(ValueError):
    """Raised when a queue mutation is attempted on a finished session."""


def initialize(words: Iterable[Any]) -> QueueState:
    """Create the queue state for a session, keeping the given order."""
    return QueueState(queue=tuple(words))


def current(state: QueueState) -> Optional[Any]:
    """Return the word to ask next, or None when the session is complete."""
    if not state.queue:
        return None
    return state.queue[0]


def _require_active(state: QueueState, operation: str) -> None:
    if not state.queue:
        raise QueueCompleteError(f"Cannot {operation}: the study queue is empty")


def record_correct(state: QueueState) -> QueueState:
    """Resolve the current word and move it to the answered list."""
    _require_active(state, "record a correct answer")
    word = state.queue[0]
    return replace(
        state,
        queue=state.queue[1:],
        answered_words=state.answered_words + (word,),
        consecutive_correct=state.consecutive_correct + 1,
        consecutive_wrong=0,
        stats=SessionStats(
            correct=state.stats.correct + 1,
            wrong=state.stats.wrong,
            total=state.stats.total + 1,
        ),
    )


def record_wrong(state: QueueState) -> QueueState:
    """Requeue the current word at the tail.

    With a single word left the same word stays current.
    """
    _require_active(state, "record a wrong answer")
    word = state.queue[0]
    return replace(
        state,
        queue=state.queue[1:] + (word,),
        consecutive_wrong=state.consecutive_wrong + 1,
        consecutive_correct=0,
        stats=SessionStats(
            correct=state.stats.correct,
            wrong=state.stats.wrong + 1,
            total=state.stats.total + 1,
        ),
    )


def needs_break(state: QueueState) -> bool:
    """Advise a study break after three wrong answers in a row."""
    return state.consecutive_wrong >= STUDY_BREAK_THRESHOLD


def is_complete(state: QueueState) -> bool:
    return not state.queue


def progress_percent(state: QueueState, total_words: int) -> int:
    """Percentage of the session's words answered correctly so far."""
    if not total_words or total_words <= 0:
        return 0
    return round_half_up(len(state.answered_words) / total_words * 100)
