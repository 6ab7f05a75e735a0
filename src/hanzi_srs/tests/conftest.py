"""Test configuration."""
import os
from datetime import datetime, timedelta, UTC
from pathlib import Path
from typing import Callable, Generator

import pytest
from dotenv import load_dotenv
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from hanzi_srs.models.base import Base, enable_sqlite_foreign_keys
from hanzi_srs.models.models import ExampleSentence, User, Word, WordProgress
from hanzi_srs.services.storage import StorageService

fake = Faker()

NOW = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def engine():
    """Create an in-memory database shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def storage(db: Session) -> StorageService:
    return StorageService(db)


@pytest.fixture
def user(db: Session) -> User:
    """Create a test user."""
    user = User(id=fake.uuid4(), email=fake.email())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_word(db: Session) -> Callable[..., Word]:
    """Create words with explicit ids."""
    def _make_word(word_id: int, examples: int = 1) -> Word:
        word = Word(
            id=word_id,
            hanzi=f"{fake.word()}{word_id}",
            pinyin=fake.word(),
            translation_en=fake.word(),
        )
        for _ in range(examples):
            word.example_sentences.append(ExampleSentence(
                sentence_hanzi=fake.sentence(),
                sentence_translation_en=fake.sentence(),
            ))
        db.add(word)
        db.commit()
        db.refresh(word)
        return word
    return _make_word


@pytest.fixture
def make_progress(db: Session) -> Callable[..., WordProgress]:
    """Create progress rows relative to NOW."""
    def _make_progress(user: User, word: Word, due_in: timedelta, level: int = 1) -> WordProgress:
        progress = WordProgress(
            user_id=user.id,
            word_id=word.id,
            level=level,
            next_review_date=NOW + due_in,
            last_reviewed_at=NOW - timedelta(days=1),
        )
        db.add(progress)
        db.commit()
        db.refresh(progress)
        return progress
    return _make_progress
