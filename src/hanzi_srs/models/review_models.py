"""Value types exchanged between the services and the scheduling core."""
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional

from hanzi_srs.config import settings


class ReviewQuality(IntEnum):
    """How well the user recalled a word."""
    AGAIN = 0  # Complete failure
    HARD = 1  # Difficult recall
    GOOD = 2  # Correct recall with effort
    EASY = 3  # Effortless recall


@dataclass(frozen=True)
class StudyRange:
    """Inclusive bounds on the word ids a user studies."""
    start: int
    end: int

    @classmethod
    def default(cls) -> "StudyRange":
        return cls(settings.study.default_range_start, settings.study.default_range_end)

    @classmethod
    def from_bounds(cls, start: Optional[int], end: Optional[int]) -> "StudyRange":
        """Fill absent bounds from the default range."""
        default = cls.default()
        return cls(
            start if start is not None else default.start,
            end if end is not None else default.end,
        )


@dataclass(frozen=True)
class ProgressSnapshot:
    """Stored progress of a word that has been reviewed at least once."""
    level: int
    last_reviewed_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of scheduling a single review."""
    new_level: int
    next_review_date: datetime


@dataclass(frozen=True)
class ReviewSubmission:
    """Validated review payload."""
    word_id: int
    quality: ReviewQuality
