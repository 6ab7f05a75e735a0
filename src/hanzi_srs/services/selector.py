"""Word selection for the next flashcard."""
import logging
from datetime import datetime, UTC
from typing import Optional

from hanzi_srs.models.models import Word
from hanzi_srs.models.review_models import StudyRange
from hanzi_srs.monitoring import words_selected
from hanzi_srs.services.storage import StorageService

logger = logging.getLogger(__name__)


class SelectorService:
    """Picks the next word to show: due reviews first, then unseen words."""

    def __init__(self, storage: StorageService):
        """Initialize the service with a storage collaborator."""
        self.storage = storage

    def select_next_word(
        self,
        user_id: Optional[str],
        study_range: Optional[StudyRange] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Word]:
        """Get the next word for a user within an inclusive word id range.

        Returns the most overdue review in range, else the lowest-id word in
        range the user has never seen, else None when the user is caught up.
        Anonymous callers (no or empty user id) get a random word from the
        whole corpus.
        """
        if not user_id:
            return self.select_random_word()

        if study_range is None:
            study_range = StudyRange.default()
        if now is None:
            now = datetime.now(UTC)

        due_progress = self.storage.find_due_progress(user_id, study_range, now)
        if due_progress is not None and due_progress.word is not None:
            logger.info(f"Selected due word {due_progress.word_id} for user {user_id}")
            words_selected.labels(source="due").inc()
            return due_progress.word

        new_word = self.storage.find_unseen_word(user_id, study_range)
        if new_word is not None:
            logger.info(f"Selected new word {new_word.id} for user {user_id}")
            words_selected.labels(source="new").inc()
            return new_word

        logger.info(
            f"User {user_id} is all caught up within range {study_range.start}-{study_range.end}"
        )
        words_selected.labels(source="none").inc()
        return None

    def select_random_word(self) -> Optional[Word]:
        """Get a random word for a caller without progress tracking."""
        word = self.storage.find_random_word()
        words_selected.labels(source="random" if word is not None else "none").inc()
        return word

    def next_word_for_user(
        self, user_id: Optional[str], now: Optional[datetime] = None
    ) -> Optional[Word]:
        """Get the next word using the user's stored study range."""
        if not user_id:
            return self.select_random_word()
        start, end = self.storage.find_user_range(user_id)
        return self.select_next_word(user_id, StudyRange.from_bounds(start, end), now)
