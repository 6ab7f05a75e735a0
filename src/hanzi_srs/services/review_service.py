"""Service for submitting flashcard reviews."""
import logging
from datetime import datetime, UTC
from typing import Any, Mapping, Optional

from hanzi_srs.exceptions import AuthenticationError, ReviewValidationError
from hanzi_srs.models.models import WordProgress
from hanzi_srs.models.review_models import ReviewQuality, ReviewSubmission
from hanzi_srs.monitoring import reviews_submitted
from hanzi_srs.services.srs import calculate_next_review
from hanzi_srs.services.storage import StorageService

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_review(payload: Mapping[str, Any]) -> ReviewSubmission:
    """Validate a review payload of the form {"wordId": int, "quality": 0-3}."""
    word_id = payload.get("wordId")
    quality = payload.get("quality")
    if not _is_int(word_id) or not _is_int(quality) or quality not in set(ReviewQuality):
        raise ReviewValidationError(
            "Invalid input: wordId must be a number, quality must be 0, 1, 2, or 3"
        )
    return ReviewSubmission(word_id=word_id, quality=ReviewQuality(quality))


class ReviewService:
    """Service for recording how well a user recalled a word."""

    def __init__(self, storage: StorageService):
        """Initialize the service with a storage collaborator."""
        self.storage = storage

    def submit_review(
        self,
        user_id: Optional[str],
        payload: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> WordProgress:
        """Schedule the next review of a word and store the new progress."""
        if not user_id:
            raise AuthenticationError("A signed-in user is required to submit reviews")
        submission = parse_review(payload)
        return self.record_review(user_id, submission, now)

    def record_review(
        self,
        user_id: str,
        submission: ReviewSubmission,
        now: Optional[datetime] = None,
    ) -> WordProgress:
        """Store the outcome of an already validated review."""
        if now is None:
            now = datetime.now(UTC)

        existing = self.storage.get_progress(user_id, submission.word_id)
        result = calculate_next_review(existing, submission.quality, now)

        self.storage.get_or_create_user(user_id)
        progress = self.storage.upsert_progress(
            user_id,
            submission.word_id,
            level=result.new_level,
            next_review_date=result.next_review_date,
            last_reviewed_at=now,
        )
        reviews_submitted.labels(quality=submission.quality.name.lower()).inc()
        logger.info(
            f"User {user_id} rated word {submission.word_id} {submission.quality.name}: "
            f"level {result.new_level}, next review {result.next_review_date.isoformat()}"
        )
        return progress
