"""Spaced repetition scheduling.

Progress on a word is a single integer level. A failed review (Again or
Hard) drops the level back to 0 and brings the word back a few minutes
later. A successful review (Good or Easy) raises the level by one and
pushes the next review out to midnight plus the interval for the new level.
Easy reviews get a flat bonus on top of that interval.
"""
import math
from datetime import date, datetime, timedelta
from typing import Optional

from hanzi_srs.config import (
    LONG_TERM_BASE_DAYS,
    LONG_TERM_GROWTH,
    LONG_TERM_MIN_DAYS,
    settings,
)
from hanzi_srs.models.review_models import (
    ProgressSnapshot,
    ReviewQuality,
    ReviewResult,
)

# No interval can span more than the whole calendar
MAX_INTERVAL_DAYS = (date.max - date.min).days


def interval_for_level(level: int) -> float:
    """Return the base review interval in days for a level.

    Levels in the interval table use their fixed value. Levels above the
    table grow geometrically from the last table entry, never below
    LONG_TERM_MIN_DAYS and never above MAX_INTERVAL_DAYS. Levels below 1
    have no interval.
    """
    intervals = settings.study.review_intervals
    if level < 1:
        return 0
    if level in intervals:
        return intervals[level]
    top_level = max(intervals)
    try:
        days = LONG_TERM_BASE_DAYS * LONG_TERM_GROWTH ** (level - top_level)
    except OverflowError:
        return MAX_INTERVAL_DAYS
    return min(MAX_INTERVAL_DAYS, max(LONG_TERM_MIN_DAYS, days))


def start_of_day(moment: datetime) -> datetime:
    """Truncate a timestamp to midnight, keeping its timezone."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def add_days(day_start: datetime, days: int) -> datetime:
    """Add whole days to a midnight, stopping at the last representable day.

    The cap keeps one day of headroom so the result still converts to UTC
    from any timezone.
    """
    latest = datetime.max.replace(
        hour=0, minute=0, second=0, microsecond=0, tzinfo=day_start.tzinfo
    ) - timedelta(days=1)
    if days >= (latest - day_start).days:
        return latest
    return day_start + timedelta(days=days)


def calculate_next_review(
    progress: Optional[ProgressSnapshot],
    quality: ReviewQuality,
    now: datetime,
) -> ReviewResult:
    """Calculate the new level and next review date for a review.

    Args:
        progress: Stored progress, or None if the user never reviewed the word.
        quality: Recall quality, already validated by the caller.
        now: Moment of the review.
    """
    current_level = progress.level if progress is not None else 0

    if quality < ReviewQuality.GOOD:
        new_level = 0
        interval_days = 0
    else:
        new_level = current_level + 1
        base_interval = interval_for_level(new_level)
        if quality == ReviewQuality.EASY:
            interval_days = math.ceil(base_interval * settings.study.easy_bonus)
        else:
            # Whole days only; the fractional part of the long-term formula is dropped
            interval_days = int(base_interval)

    if interval_days > 0:
        next_review_date = add_days(start_of_day(now), interval_days)
    else:
        # A lapse comes back later in the same session
        next_review_date = now + timedelta(minutes=settings.study.relapse_delay_minutes)

    return ReviewResult(new_level=new_level, next_review_date=next_review_date)
