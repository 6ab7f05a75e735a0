"""Tests for database models."""
from datetime import datetime, timedelta, UTC

import pytest
from sqlalchemy.exc import IntegrityError

from hanzi_srs.models.models import ExampleSentence, User, Word, WordProgress

NOW = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)


def test_user_creation(db) -> None:
    user = User(id="user-1", email="learner@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)

    assert user.study_range_start is None
    assert user.study_range_end is None
    assert user.created_at is not None


def test_word_with_examples(db) -> None:
    word = Word(hanzi="你好", pinyin="nǐ hǎo", translation_en="hello")
    word.example_sentences.append(ExampleSentence(sentence_hanzi="你好，老师！"))
    db.add(word)
    db.commit()
    db.refresh(word)

    assert word.id is not None
    assert word.audio_url is None
    assert word.example_sentences[0].word_id == word.id


def test_word_unique_on_hanzi_and_pinyin(db) -> None:
    db.add(Word(hanzi="好", pinyin="hǎo", translation_en="good"))
    db.commit()
    db.add(Word(hanzi="好", pinyin="hǎo", translation_en="well"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    db.add(Word(hanzi="好", pinyin="hào", translation_en="to like"))
    db.commit()
    assert db.query(Word).count() == 2


def test_progress_unique_per_user_and_word(db, user, make_word) -> None:
    word = make_word(1)
    for level in (1, 2):
        db.add(WordProgress(
            user_id=user.id,
            word_id=word.id,
            level=level,
            next_review_date=NOW + timedelta(days=1),
            last_reviewed_at=NOW,
        ))
    with pytest.raises(IntegrityError):
        db.commit()
