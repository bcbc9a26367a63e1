"""
SM-2 scheduler with a capped step schedule.

Ease factors follow the classic SuperMemo-2 update. Intervals do not grow
exponentially: they walk a fixed ladder of 1, 2, 5, 7, 14 and 28 days and
stay at 28 once reached.

This is a pure computation module with no I/O; the only ambient input is the
wall clock, and callers can pass `now` explicitly.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cardquest.application.grading import validate_grade
from cardquest.domain.constants import (
    EASE_PRECISION,
    INTERVAL_STEPS,
    MIN_EASE,
    PASSING_GRADE,
)
from cardquest.domain.errors import InvalidTimezoneError
from cardquest.domain.models import ScheduleResult, ScheduleState

logger = logging.getLogger(__name__)

Normalizer = Callable[[datetime, str], datetime]


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def resolve_zone(tz_name: str) -> ZoneInfo:
    """Look up an IANA zone, raising InvalidTimezoneError when it is unknown."""
    if not tz_name or not isinstance(tz_name, str):
        raise InvalidTimezoneError(str(tz_name), "empty name")
    try:
        return ZoneInfo(tz_name)
    # Directory names ("America") and over-long names surface as OSError
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezoneError(tz_name, str(e)) from e


def local_date(ts: datetime, tz_name: str) -> date:
    """Calendar date of an instant as seen in the given zone."""
    return ensure_aware(ts).astimezone(resolve_zone(tz_name)).date()


def normalize_to_local_midnight(ts: datetime, tz_name: str) -> datetime:
    """
    Move an instant to 00:00:00 of the same calendar day in `tz_name`.

    The calendar date is taken in-zone, then midnight is built with that
    zone's UTC offset for that date. The result is returned in UTC.
    """
    zone = resolve_zone(tz_name)
    day = ensure_aware(ts).astimezone(zone).date()
    midnight = datetime(day.year, day.month, day.day, tzinfo=zone)
    return midnight.astimezone(timezone.utc)


def next_interval(repetitions: int) -> int:
    """Interval in days for a passing review with this repetition count."""
    step = min(repetitions - 1, len(INTERVAL_STEPS) - 1)
    return INTERVAL_STEPS[max(step, 0)]


def next_ease(prior_ease: float, quality: int) -> float:
    # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    miss = 5 - quality
    ease = prior_ease + (0.1 - miss * (0.08 + miss * 0.02))
    return round(max(ease, MIN_EASE), EASE_PRECISION)


def schedule(
    quality: int,
    prior_repetitions: int,
    prior_ease: float,
    timezone_name: str | None = None,
    now: datetime | None = None,
    normalizer: Normalizer = normalize_to_local_midnight,
) -> ScheduleResult:
    """
    Compute the next schedule for a card after one graded review.

    Args:
        quality: Quality grade 0-5.
        prior_repetitions: Consecutive passes before this review.
        prior_ease: Ease factor before this review.
        timezone_name: Learner's IANA zone; when given, the due instant is
            moved to local midnight.
        now: Review time; defaults to the current UTC time.
        normalizer: Local-midnight function, injectable for tests.

    Returns:
        ScheduleResult. `normalized` is False if the timezone could not be
        applied and the raw instant was kept.
    """
    validate_grade(quality)
    if prior_repetitions < 0:
        raise ValueError(f"prior_repetitions must be >= 0, got {prior_repetitions}")

    if quality < PASSING_GRADE:
        repetitions = 0
        interval = 1
    else:
        repetitions = prior_repetitions + 1
        interval = next_interval(repetitions)

    ease = next_ease(prior_ease, quality)

    now = ensure_aware(now or datetime.now(timezone.utc))
    next_review = now + timedelta(days=interval)
    normalized = True

    if timezone_name:
        try:
            next_review = normalizer(next_review, timezone_name)
        except (InvalidTimezoneError, ValueError) as e:
            logger.warning(f"Failed to normalize next review to local midnight: {e}")
            normalized = False

    return ScheduleResult(
        ease_factor=ease,
        interval=interval,
        repetitions=repetitions,
        next_review=next_review,
        normalized=normalized,
    )


def is_due(state: ScheduleState | None, now: datetime) -> bool:
    """A card is due only if it has been reviewed before and its time has come."""
    if state is None:
        return False
    return ensure_aware(state.next_review) <= ensure_aware(now)


def apply_review(
    prior: ScheduleState | None,
    result: ScheduleResult,
    review_mode: bool,
    now: datetime,
) -> ScheduleState:
    """
    Decide which parts of a scheduler result to keep.

    Practising a card that is not yet due (study or endless play) only moves
    the ease factor, so the spaced-repetition timeline is left intact. Review
    mode, a due card, or a first review take the whole result.
    """
    if prior is None or review_mode or is_due(prior, now):
        return result.to_state()

    return ScheduleState(
        ease_factor=result.ease_factor,
        interval=prior.interval,
        repetitions=prior.repetitions,
        next_review=prior.next_review,
    )
