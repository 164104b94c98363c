"""Models for study-session queue state."""
from dataclasses import dataclass, field
from typing import Any, Tuple


@dataclass(frozen=True)
class SessionStats:
    """Answer counters for one session."""
    correct: int = 0
    wrong: int = 0
    total: int = 0


@dataclass(frozen=True)
class QueueState:
    """Immutable state of a study-session queue.

    The word at ``queue[0]`` is the current one. Words answered correctly move
    to ``answered_words``; words answered wrongly go to the back of ``queue``.
    """
    queue: Tuple[Any, ...] = ()
    answered_words: Tuple[Any, ...] = ()
    consecutive_wrong: int = 0
    consecutive_correct: int = 0
    stats: SessionStats = field(default_factory=SessionStats)
