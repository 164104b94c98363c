"""Study service for choosing session words and running quiz sessions."""
import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Set, Union

from sqlalchemy.orm import Session

from vocaloop.config import settings
from vocaloop.models.learning_models import AnswerOutcome, QuizType
from vocaloop.models.models import Word
from vocaloop.models.queue_models import QueueState
from vocaloop.monitoring import (
    answers_total,
    learning_rate_delta,
    sessions_completed,
    sessions_started,
    study_breaks,
)
from vocaloop.services import learning_queue
from vocaloop.services.learning_queue import QueueCompleteError
from vocaloop.services.learning_rate import classify, score_on_correct, score_on_wrong
from vocaloop.services.word_service import WordService

logger = logging.getLogger(__name__)


class StudySession:
    """One quiz run over a fixed set of words.

    Owns its queue state; do not share a session between threads.
    """

    def __init__(self, word_service: WordService, words: Sequence[Word], quiz_type: QuizType):
        self.word_service = word_service
        self.quiz_type = quiz_type
        self.state: QueueState = learning_queue.initialize(words)
        self.total_words = len(self.state.queue)
        self._missed_word_ids: Set[int] = set()
        sessions_started.labels(quiz_type=quiz_type.value).inc()
        logger.info(f"Started {quiz_type.value} session with {self.total_words} words")

    @property
    def current_word(self) -> Optional[Word]:
        return learning_queue.current(self.state)

    @property
    def is_complete(self) -> bool:
        return learning_queue.is_complete(self.state)

    @property
    def needs_break(self) -> bool:
        return learning_queue.needs_break(self.state)

    @property
    def progress_percent(self) -> int:
        return learning_queue.progress_percent(self.state, self.total_words)

    def is_reasked(self, word: Optional[Word] = None) -> bool:
        """Whether the word (default: current) was missed earlier in this session."""
        word = word or self.current_word
        return word is not None and word.id in self._missed_word_ids

    def answer(self, is_correct: bool, is_ai_similar: bool = False) -> AnswerOutcome:
        """Score the current word, persist the result and advance the queue.

        ``is_ai_similar`` marks that a re-asked word was shown as a paraphrased
        variant; it is ignored for words not missed earlier in the session.

        Raises:
            QueueCompleteError: if the session has no words left.
        """
        word = self.current_word
        if word is None:
            raise QueueCompleteError("Cannot answer: the study session is complete")

        is_reasked = self.is_reasked(word)
        rate_before = word.learning_rate or 0
        penalty = 0

        if is_correct:
            new_rate = score_on_correct(
                current_rate=rate_before,
                quiz_type=self.quiz_type,
                is_reasked=is_reasked,
                is_ai_similar=is_reasked and is_ai_similar,
                last_penalty=word.last_penalty or 0,
            )
            self.word_service.record_correct(word, new_rate, self.quiz_type)
            self.state = learning_queue.record_correct(self.state)
        else:
            new_rate, penalty = score_on_wrong(
                current_rate=rate_before,
                wrong_count=word.wrong_count or 0,
            )
            self.word_service.record_wrong(word, new_rate, penalty, self.quiz_type)
            self._missed_word_ids.add(word.id)
            self.state = learning_queue.record_wrong(self.state)

        outcome_label = "correct" if is_correct else "wrong"
        answers_total.labels(quiz_type=self.quiz_type.value, outcome=outcome_label).inc()
        learning_rate_delta.labels(outcome=outcome_label).observe(new_rate - rate_before)

        outcome = AnswerOutcome(
            word=word,
            is_correct=is_correct,
            is_reasked=is_reasked,
            rate_before=rate_before,
            rate_after=new_rate,
            status=classify(new_rate),
            penalty=penalty,
            needs_break=self.needs_break,
            is_complete=self.is_complete,
            next_word=self.current_word,
        )
        logger.info(
            f"Word {word.id} answered {outcome_label}"
            f"{' (re-asked)' if is_reasked else ''}: {rate_before} -> {new_rate}"
        )

        if outcome.needs_break:
            study_breaks.inc()
            logger.info(f"{self.state.consecutive_wrong} wrong answers in a row, suggesting a break")
        if outcome.is_complete:
            sessions_completed.labels(quiz_type=self.quiz_type.value).inc()
            logger.info(f"Session complete: {self.summary()}")
        return outcome

    def summary(self) -> Dict[str, Any]:
        """Get session counters and progress."""
        stats = self.state.stats
        return {
            "quiz_type": self.quiz_type.value,
            "total_words": self.total_words,
            "answered": len(self.state.answered_words),
            "remaining": len(self.state.queue),
            "correct": stats.correct,
            "wrong": stats.wrong,
            "total": stats.total,
            "progress": self.progress_percent,
        }


class StudyService:
    """Service for choosing words and starting study sessions."""

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.word_service = WordService(db)
        self.rng = rng or random.Random()

    def choose_words(
        self,
        folder_ids: Optional[Sequence[int]] = None,
        limit: Optional[int] = None,
    ) -> List[Word]:
        """Choose words for a session from the given folders (all when empty)."""
        if limit is None:
            limit = settings.study.words_per_session
        if limit < 1:
            raise ValueError(f"Session limit must be positive, got {limit}")
        words = self.word_service.get_words(folder_ids=folder_ids)
        logger.info(f"Choosing up to {limit} of {len(words)} words for a session")

        if settings.study.shuffle_words:
            return self.rng.sample(words, min(len(words), limit))
        return words[:limit]

    def start_session(
        self,
        quiz_type: Union[QuizType, str, None] = None,
        folder_ids: Optional[Sequence[int]] = None,
        limit: Optional[int] = None,
    ) -> StudySession:
        """Start a session over freshly chosen words."""
        if quiz_type is None:
            quiz_type = settings.study.default_quiz_type
        quiz_type = QuizType(quiz_type)
        words = self.choose_words(folder_ids=folder_ids, limit=limit)
        return StudySession(self.word_service, words, quiz_type)
