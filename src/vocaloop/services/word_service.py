"""Service for managing words and folders in the system."""
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy.orm import Session
from sqlalchemy import func

from vocaloop.models.learning_models import LearningStatus, QuizType
from vocaloop.models.models import Folder, ReviewLog, Word
from vocaloop.monitoring import words_added
from vocaloop.services.learning_rate import classify, group_by_status, round_half_up

logger = logging.getLogger(__name__)


class WordService:
    """Service for managing words and folders in the system."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    # Folders

    def get_folder(self, folder_id: int) -> Optional[Folder]:
        """Get a folder by its ID."""
        return self.db.query(Folder).filter(Folder.id == folder_id).first()

    def get_folder_by_name(self, name: str) -> Optional[Folder]:
        """Get a folder by its name, ignoring case."""
        return self.db.query(Folder).filter(func.lower(Folder.name) == name.lower()).first()

    def list_folders(self) -> List[Folder]:
        """Get all folders ordered by name."""
        return self.db.query(Folder).order_by(Folder.name).all()

    def create_folder(self, name: str, color: Optional[str] = None) -> Folder:
        """Create a new folder."""
        name = name.strip()
        if not name:
            raise ValueError("Folder name must not be empty")
        if self.get_folder_by_name(name):
            raise ValueError(f"Folder {name!r} already exists")

        folder = Folder(name=name)
        if color:
            folder.color = color
        self.db.add(folder)
        self.db.commit()
        self.db.refresh(folder)
        logger.info(f"Created folder {folder.name!r} ({folder.id})")
        return folder

    def get_or_create_folder(self, name: str) -> Folder:
        """Get existing folder or create a new one."""
        return self.get_folder_by_name(name.strip()) or self.create_folder(name)

    def rename_folder(self, folder_id: int, name: str) -> Folder:
        """Rename a folder."""
        folder = self.get_folder(folder_id)
        if not folder:
            raise ValueError(f"Folder {folder_id} not found")
        name = name.strip()
        if not name:
            raise ValueError("Folder name must not be empty")
        existing = self.get_folder_by_name(name)
        if existing and existing.id != folder.id:
            raise ValueError(f"Folder {name!r} already exists")

        folder.name = name
        self.db.commit()
        self.db.refresh(folder)
        return folder

    def delete_folder(self, folder_id: int) -> bool:
        """Delete a folder. Its words stay, unfiled."""
        folder = self.get_folder(folder_id)
        if not folder:
            return False

        for word in folder.words:
            word.folder_id = None
        self.db.delete(folder)
        self.db.commit()
        logger.info(f"Deleted folder {folder_id}")
        return True

    def folder_word_counts(self) -> Dict[Optional[int], int]:
        """Count words per folder; unfiled words are counted under None."""
        rows = (
            self.db.query(Word.folder_id, func.count(Word.id))
            .group_by(Word.folder_id)
            .all()
        )
        return {folder_id: count for folder_id, count in rows}

    # Words

    def get_word(self, word_id: int) -> Optional[Word]:
        """Get a word by its ID."""
        return self.db.query(Word).filter(Word.id == word_id).first()

    def create_word(self, text: str, meaning: str, folder_id: Optional[int] = None) -> Word:
        """Create a new word."""
        text, meaning = text.strip(), meaning.strip()
        if not text or not meaning:
            raise ValueError("Word text and meaning must not be empty")
        if folder_id is not None and not self.get_folder(folder_id):
            raise ValueError(f"Folder {folder_id} not found")

        word = Word(text=text, meaning=meaning, folder_id=folder_id)
        self.db.add(word)
        self.db.commit()
        self.db.refresh(word)
        words_added.inc()
        logger.info(f"Created word {word.text!r} ({word.id})")
        return word

    def get_words(
        self,
        folder_ids: Optional[Sequence[int]] = None,
        status: Optional[LearningStatus] = None,
    ) -> List[Word]:
        """Get words, optionally limited to folders and a learning status."""
        query = self.db.query(Word)
        if folder_ids:
            query = query.filter(Word.folder_id.in_(list(folder_ids)))
        words = query.order_by(Word.id).all()

        if status is not None:
            words = [word for word in words if classify(word.learning_rate) == status]
        return words

    def update_word(self, word_id: int, **kwargs) -> Optional[Word]:
        """Update a word's attributes."""
        word = self.get_word(word_id)
        if not word:
            return None

        for key, value in kwargs.items():
            if hasattr(word, key):
                setattr(word, key, value)

        self.db.commit()
        self.db.refresh(word)
        return word

    def move_word(self, word_id: int, folder_id: Optional[int]) -> Word:
        """Move a word into a folder, or unfile it with ``folder_id=None``."""
        word = self.get_word(word_id)
        if not word:
            raise ValueError(f"Word {word_id} not found")
        if folder_id is not None and not self.get_folder(folder_id):
            raise ValueError(f"Folder {folder_id} not found")

        word.folder_id = folder_id
        self.db.commit()
        self.db.refresh(word)
        return word

    def delete_word(self, word_id: int) -> bool:
        """Delete a word and its review history."""
        word = self.get_word(word_id)
        if not word:
            return False

        self.db.delete(word)
        self.db.commit()
        return True

    # Scoring persistence

    def record_correct(
        self,
        word: Word,
        new_rate: int,
        quiz_type: Union[QuizType, str] = QuizType.MULTIPLE,
    ) -> Word:
        """Store the result of a correct answer. Clears the remembered penalty."""
        return self._record(word, new_rate, is_correct=True, penalty=0, quiz_type=quiz_type)

    def record_wrong(
        self,
        word: Word,
        new_rate: int,
        penalty: int,
        quiz_type: Union[QuizType, str] = QuizType.MULTIPLE,
    ) -> Word:
        """Store the result of a wrong answer and remember the penalty magnitude."""
        return self._record(word, new_rate, is_correct=False, penalty=penalty, quiz_type=quiz_type)

    def _record(
        self,
        word: Word,
        new_rate: int,
        is_correct: bool,
        penalty: int,
        quiz_type: Union[QuizType, str],
    ) -> Word:
        if isinstance(quiz_type, QuizType):
            quiz_type = quiz_type.value

        rate_before = word.learning_rate or 0
        word.learning_rate = new_rate
        word.review_count = (word.review_count or 0) + 1
        if is_correct:
            word.last_penalty = 0
        else:
            word.wrong_count = (word.wrong_count or 0) + 1
            word.last_penalty = abs(penalty)

        self.db.add(ReviewLog(
            word_id=word.id,
            quiz_type=quiz_type,
            is_correct=is_correct,
            rate_before=rate_before,
            rate_after=new_rate,
            penalty=penalty,
        ))
        self.db.commit()
        self.db.refresh(word)
        logger.debug(
            f"Word {word.id} {'correct' if is_correct else 'wrong'}: "
            f"{rate_before} -> {new_rate} (reviews {word.review_count}, wrong {word.wrong_count})"
        )
        return word

    def get_review_history(self, word_id: int) -> List[ReviewLog]:
        """Get the scored answers for a word, oldest first."""
        return (
            self.db.query(ReviewLog)
            .filter(ReviewLog.word_id == word_id)
            .order_by(ReviewLog.id)
            .all()
        )

    # Statistics

    def get_statistics(self) -> Dict[str, Any]:
        """Get totals per status, total reviews and average accuracy."""
        words = self.db.query(Word).all()
        groups = group_by_status(words)

        accuracy_sum = 0.0
        for word in words:
            reviews = word.review_count or 0
            if reviews > 0:
                accuracy_sum += (reviews - (word.wrong_count or 0)) / reviews * 100

        return {
            "total_words": len(words),
            "difficult": len(groups[LearningStatus.DIFFICULT]),
            "learning": len(groups[LearningStatus.LEARNING]),
            "memorized": len(groups[LearningStatus.MEMORIZED]),
            "total_reviews": sum(word.review_count or 0 for word in words),
            "average_accuracy": round_half_up(accuracy_sum / len(words)) if words else 0,
        }
