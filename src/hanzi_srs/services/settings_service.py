"""Service for user study settings."""
import logging
from typing import Any, Mapping, Optional

from hanzi_srs.config import settings
from hanzi_srs.exceptions import AuthenticationError, RangeValidationError
from hanzi_srs.models.review_models import StudyRange
from hanzi_srs.monitoring import range_updates
from hanzi_srs.services.storage import StorageService

logger = logging.getLogger(__name__)


def _check_bound(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise RangeValidationError(f"{name} must be an integer")
    if value < 1 or value > settings.study.max_word_id:
        raise RangeValidationError(f"{name} must be between 1 and {settings.study.max_word_id}")
    return value


class SettingsService:
    """Service for reading and updating the study range of a user."""

    def __init__(self, storage: StorageService):
        """Initialize the service with a storage collaborator."""
        self.storage = storage

    def get_study_range(self, user_id: str) -> StudyRange:
        """Get the effective study range, filling absent bounds with defaults."""
        start, end = self.storage.find_user_range(user_id)
        return StudyRange.from_bounds(start, end)

    def update_study_range(self, user_id: Optional[str], payload: Mapping[str, Any]) -> StudyRange:
        """Update one or both study range bounds.

        The payload holds ``studyRangeStart`` and/or ``studyRangeEnd``. A bound
        left out keeps its current value; the resulting range must satisfy
        start <= end.
        """
        if not user_id:
            raise AuthenticationError("A signed-in user is required to change settings")

        start = _check_bound("studyRangeStart", payload.get("studyRangeStart"))
        end = _check_bound("studyRangeEnd", payload.get("studyRangeEnd"))
        if start is None and end is None:
            raise RangeValidationError("No settings provided to update.")

        current = self.get_study_range(user_id)
        new_range = StudyRange(
            start if start is not None else current.start,
            end if end is not None else current.end,
        )
        if new_range.start > new_range.end:
            raise RangeValidationError("studyRangeStart cannot be greater than studyRangeEnd")

        self.storage.update_user_range(user_id, new_range.start, new_range.end)
        range_updates.inc()
        logger.info(f"User {user_id} study range set to {new_range.start}-{new_range.end}")
        return new_range
