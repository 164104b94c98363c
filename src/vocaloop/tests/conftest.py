"""Test configuration."""
import os
from typing import Generator

import pytest
from faker import Faker
from sqlalchemy.orm import Session

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

# Import after environment setup
from vocaloop.models import models  # noqa: E402,F401
from vocaloop.models.base import Base, SessionLocal, engine, init_db  # noqa: E402
from vocaloop.services.word_service import WordService  # noqa: E402

fake = Faker()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh in-memory database session for each test."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def word_service(db: Session) -> WordService:
    """Create a word service instance."""
    return WordService(db)


@pytest.fixture
def make_word(word_service: WordService):
    """Factory for words with unique text."""
    def _make_word(folder_id=None, **fields):
        word = word_service.create_word(
            text=fields.pop("text", None) or f"{fake.unique.word()}",
            meaning=fields.pop("meaning", None) or f"{fake.unique.word()} meaning",
            folder_id=folder_id,
        )
        if fields:
            word = word_service.update_word(word.id, **fields)
        return word
    return _make_word
