"""Database models for VocaLoop."""
from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from vocaloop.models.base import Base, TimestampMixin


class Folder(Base, TimestampMixin):
    """Folder model."""

    __tablename__ = "folders"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, default="#3B82F6")

    # Relationships
    words = relationship("Word", back_populates="folder")

    def __repr__(self) -> str:
        return f"<Folder id={self.id} name={self.name!r}>"


class Word(Base, TimestampMixin):
    """Word model.

    ``learning_rate`` is the 0-100 mastery score. ``last_penalty`` keeps the
    magnitude of the most recent penalty so a later re-ask can recover it.
    """

    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    text = Column(String, nullable=False)
    meaning = Column(String, nullable=False)
    folder_id = Column(Integer, ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)
    learning_rate = Column(Integer, default=0, nullable=False)
    wrong_count = Column(Integer, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    last_penalty = Column(Integer, default=0, nullable=False)

    # Relationships
    folder = relationship("Folder", back_populates="words")
    reviews = relationship("ReviewLog", back_populates="word", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Word id={self.id} text={self.text!r} rate={self.learning_rate}>"


class ReviewLog(Base, TimestampMixin):
    """One scored answer."""

    __tablename__ = "review_logs"

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False)
    quiz_type = Column(String, nullable=False)  # multiple, short, toefl-complete
    is_correct = Column(Boolean, nullable=False)
    rate_before = Column(Integer, nullable=False)
    rate_after = Column(Integer, nullable=False)
    penalty = Column(Integer, default=0)

    # Relationships
    word = relationship("Word", back_populates="reviews")
