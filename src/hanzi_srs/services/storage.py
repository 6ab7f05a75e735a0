"""Storage collaborator for progress, words and user settings."""
import logging
from contextlib import contextmanager
from datetime import datetime, UTC
from typing import Iterator, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from hanzi_srs.exceptions import StorageError
from hanzi_srs.models.models import User, Word, WordProgress
from hanzi_srs.models.review_models import ProgressSnapshot, StudyRange
from hanzi_srs.monitoring import db_errors

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Return a timezone-aware UTC timestamp; naive values are taken as UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


class StorageService:
    """Key and range queries over the relational store."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Roll back and re-raise database failures as StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            db_errors.labels(operation_type=operation).inc()
            logger.error(f"Database error during {operation}: {e}")
            raise StorageError(operation, str(e)) from e

    def _insert(self, table):
        dialect = self.db.get_bind().dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect](table)
        except KeyError:
            raise StorageError("upsert", f"unsupported database dialect: {dialect}") from None

    def find_due_progress(
        self, user_id: str, study_range: StudyRange, now: datetime
    ) -> Optional[WordProgress]:
        """Get the most overdue progress row with a word inside the range."""
        with self._guard("find_due_progress"):
            return (
                self.db.query(WordProgress)
                .join(Word, WordProgress.word_id == Word.id)
                .options(joinedload(WordProgress.word).selectinload(Word.example_sentences))
                .filter(
                    WordProgress.user_id == user_id,
                    WordProgress.next_review_date <= as_utc(now),
                    Word.id >= study_range.start,
                    Word.id <= study_range.end,
                )
                .order_by(WordProgress.next_review_date.asc(), WordProgress.word_id.asc())
                .first()
            )

    def find_unseen_word(self, user_id: str, study_range: StudyRange) -> Optional[Word]:
        """Get the lowest-id word in the range that the user has never reviewed."""
        with self._guard("find_unseen_word"):
            return (
                self.db.query(Word)
                .options(selectinload(Word.example_sentences))
                .filter(
                    Word.id >= study_range.start,
                    Word.id <= study_range.end,
                    ~Word.user_progress.any(WordProgress.user_id == user_id),
                )
                .order_by(Word.id.asc())
                .first()
            )

    def find_random_word(self) -> Optional[Word]:
        """Get a random word from the whole corpus."""
        with self._guard("find_random_word"):
            return (
                self.db.query(Word)
                .options(selectinload(Word.example_sentences))
                .order_by(func.random())
                .first()
            )

    def find_user_range(self, user_id: str) -> Tuple[Optional[int], Optional[int]]:
        """Get the stored study range bounds of a user, either may be absent."""
        with self._guard("find_user_range"):
            user = self.db.get(User, user_id)
        if not user:
            return None, None
        return user.study_range_start, user.study_range_end

    def get_progress(self, user_id: str, word_id: int) -> Optional[ProgressSnapshot]:
        """Get the stored progress of a word, or None if it was never reviewed."""
        with self._guard("get_progress"):
            progress = (
                self.db.query(WordProgress)
                .filter(
                    WordProgress.user_id == user_id,
                    WordProgress.word_id == word_id,
                )
                .first()
            )
        if not progress:
            return None
        return ProgressSnapshot(
            level=progress.level,
            last_reviewed_at=as_utc(progress.last_reviewed_at),
        )

    def get_or_create_user(self, user_id: str, email: Optional[str] = None) -> User:
        """Get the settings row of a user, creating it on first use."""
        with self._guard("get_or_create_user"):
            statement = (
                self._insert(User.__table__)
                .values(
                    id=user_id,
                    email=email,
                    created_at=datetime.now(UTC),
                    updated_at=datetime.now(UTC),
                )
                .on_conflict_do_nothing(index_elements=["id"])
            )
            self.db.execute(statement)
            self.db.commit()
            return self.db.get(User, user_id)

    def upsert_progress(
        self,
        user_id: str,
        word_id: int,
        level: int,
        next_review_date: datetime,
        last_reviewed_at: datetime,
    ) -> WordProgress:
        """Create or update the progress row of (user, word) in one statement."""
        values = {
            "level": level,
            "next_review_date": as_utc(next_review_date),
            "last_reviewed_at": as_utc(last_reviewed_at),
            "updated_at": datetime.now(UTC),
        }
        with self._guard("upsert_progress"):
            statement = self._insert(WordProgress.__table__).values(
                user_id=user_id,
                word_id=word_id,
                created_at=datetime.now(UTC),
                **values,
            )
            statement = statement.on_conflict_do_update(
                index_elements=["user_id", "word_id"],
                set_=values,
            )
            self.db.execute(statement)
            self.db.commit()
            progress = (
                self.db.query(WordProgress)
                .filter(
                    WordProgress.user_id == user_id,
                    WordProgress.word_id == word_id,
                )
                .populate_existing()
                .one()
            )
        logger.debug(f"Progress stored for user {user_id}, word {word_id}: level {level}")
        return progress

    def update_user_range(self, user_id: str, start: int, end: int) -> User:
        """Store the study range of a user."""
        user = self.get_or_create_user(user_id)
        with self._guard("update_user_range"):
            user.study_range_start = start
            user.study_range_end = end
            self.db.commit()
            self.db.refresh(user)
        return user
