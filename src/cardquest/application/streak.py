"""Daily study streaks, counted on the learner's local calendar."""

import logging
from datetime import datetime, timedelta

from cardquest.application.scheduler import local_date
from cardquest.domain.constants import DEFAULT_TIMEZONE
from cardquest.domain.errors import InvalidTimezoneError

logger = logging.getLogger(__name__)


def next_streak(
    current_streak: int,
    last_review_at: datetime | None,
    now: datetime,
    timezone_name: str | None = None,
) -> int:
    """
    Streak value after a review made at `now`.

    - first review ever: 1
    - already reviewed today: unchanged
    - last review was yesterday: +1
    - a day or more was missed: back to 1
    """
    if last_review_at is None:
        return 1

    tz_name = timezone_name or DEFAULT_TIMEZONE
    try:
        today = local_date(now, tz_name)
        last_day = local_date(last_review_at, tz_name)
    except InvalidTimezoneError as e:
        logger.warning(f"Streak falls back to UTC: {e}")
        today = local_date(now, DEFAULT_TIMEZONE)
        last_day = local_date(last_review_at, DEFAULT_TIMEZONE)

    if last_day == today:
        return max(current_streak, 1)
    if last_day == today - timedelta(days=1):
        return current_streak + 1
    return 1
