"""
YAML study-state files for the CLI.

Holds one learner's XP/streak record and the schedule state of every card
they have reviewed, keyed by card id:

    learner:
      total_xp: 120
      current_streak: 3
      last_review_at: '2025-01-01T12:00:00Z'
    schedules:
      bio_001:
        ease_factor: 2.6
        interval: 2
        repetitions: 2
        next_review: '2025-01-03T00:00:00Z'

A missing file is a learner who has not studied yet.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import yaml  # type: ignore
from pydantic import AfterValidator, BaseModel, Field, ValidationError

from cardquest.domain.constants import MIN_EASE
from cardquest.domain.errors import StateFileError
from cardquest.domain.models import LearnerStats, ScheduleState

logger = logging.getLogger(__name__)


def _as_utc(v: datetime | None) -> datetime | None:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


# Naive timestamps in hand-edited files are read as UTC
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class ScheduleRecord(BaseModel):
    ease_factor: float = Field(ge=MIN_EASE)
    interval: int = Field(ge=1)
    repetitions: int = Field(ge=0)
    next_review: UtcDatetime


class LearnerRecord(BaseModel):
    total_xp: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    last_review_at: UtcDatetime | None = None


class StudyStateFile(BaseModel):
    learner: LearnerRecord = Field(default_factory=LearnerRecord)
    schedules: dict[str, ScheduleRecord] = Field(default_factory=dict)


def load_study_state(path: Path) -> tuple[dict[str, ScheduleState], LearnerStats]:
    """Read schedules and learner stats; an absent file gives empty state."""
    if not path.exists():
        logger.info(f"No state file at {path}; starting from scratch")
        return {}, LearnerStats()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        state = StudyStateFile.model_validate(data)
    except OSError as e:
        raise StateFileError(f"Cannot read state file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise StateFileError(f"{path}: invalid YAML: {e}") from e
    except ValidationError as e:
        raise StateFileError(f"{path}: invalid study state: {e}") from e

    schedules = {
        card_id: ScheduleState(
            ease_factor=rec.ease_factor,
            interval=rec.interval,
            repetitions=rec.repetitions,
            next_review=rec.next_review,
        )
        for card_id, rec in state.schedules.items()
    }
    learner = LearnerStats(
        total_xp=state.learner.total_xp,
        current_streak=state.learner.current_streak,
        last_review_at=state.learner.last_review_at,
    )
    logger.debug(f"Loaded {len(schedules)} schedule records from {path}")
    return schedules, learner


def save_study_state(
    path: Path, schedules: dict[str, ScheduleState], learner: LearnerStats
) -> None:
    """Write schedules and learner stats, replacing the file."""
    state = StudyStateFile(
        learner=LearnerRecord(
            total_xp=learner.total_xp,
            current_streak=learner.current_streak,
            last_review_at=learner.last_review_at,
        ),
        schedules={
            card_id: ScheduleRecord(
                ease_factor=s.ease_factor,
                interval=s.interval,
                repetitions=s.repetitions,
                next_review=s.next_review,
            )
            for card_id, s in schedules.items()
        },
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(state.model_dump(mode="json"), sort_keys=False),
            encoding="utf-8",
        )
    except OSError as e:
        raise StateFileError(f"Cannot write state file {path}: {e}") from e
    logger.debug(f"Saved {len(schedules)} schedule records to {path}")
