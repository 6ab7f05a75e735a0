"""Database models for the flashcard backend."""
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from hanzi_srs.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """User settings keyed by the identity provider's user id."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=True)
    study_range_start = Column(Integer, nullable=True)
    study_range_end = Column(Integer, nullable=True)

    # Relationships
    progress = relationship("WordProgress", back_populates="user")


class Word(Base, TimestampMixin):
    """Word model."""

    __tablename__ = "words"
    __table_args__ = (UniqueConstraint("hanzi", "pinyin", name="uq_words_hanzi_pinyin"),)

    id = Column(Integer, primary_key=True)
    hanzi = Column(String, nullable=False)
    pinyin = Column(String, nullable=False)
    translation_en = Column(String, nullable=False)
    audio_url = Column(String, nullable=True)

    # Relationships
    example_sentences = relationship(
        "ExampleSentence",
        back_populates="word",
        cascade="all, delete-orphan",
        order_by="ExampleSentence.id",
    )
    user_progress = relationship("WordProgress", back_populates="word")

    def __repr__(self) -> str:
        return f"<Word {self.id} {self.hanzi} ({self.pinyin})>"


class ExampleSentence(Base, TimestampMixin):
    """Example sentence model."""

    __tablename__ = "example_sentences"

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False)
    sentence_hanzi = Column(String, nullable=False)
    sentence_pinyin = Column(String, nullable=True)
    sentence_translation_en = Column(String, nullable=True)

    # Relationships
    word = relationship("Word", back_populates="example_sentences")


class WordProgress(Base, TimestampMixin):
    """Per-user review state of a word."""

    __tablename__ = "word_progress"
    __table_args__ = (UniqueConstraint("user_id", "word_id", name="uq_word_progress_user_word"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    level = Column(Integer, nullable=False, default=0)
    next_review_date = Column(DateTime(timezone=True), nullable=False, index=True)
    last_reviewed_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="progress")
    word = relationship("Word", back_populates="user_progress")

    def __repr__(self) -> str:
        return f"<WordProgress user={self.user_id} word={self.word_id} level={self.level}>"
