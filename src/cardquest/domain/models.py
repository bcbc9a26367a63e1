"""
Domain models for the learning engine.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime

from .constants import DEFAULT_EASE


@dataclass(frozen=True)
class Card:
    """
    A flashcard as seen by the engine.

    Content is owned by the deck-management side; the engine never changes it.
    """

    id: str
    front: str
    back: str
    front_image_url: str | None = None
    back_image_url: str | None = None


@dataclass(frozen=True)
class ScheduleState:
    """
    Per-(card, learner) spaced-repetition state.

    Attributes:
        ease_factor: SM-2 ease, never below 1.3.
        interval: Days until the next review, one of the fixed steps.
        repetitions: Consecutive passing reviews; 0 after a failure.
        next_review: Timezone-aware instant the card becomes due.
    """

    ease_factor: float
    interval: int
    repetitions: int
    next_review: datetime


@dataclass(frozen=True)
class ScheduleResult:
    """
    Output of one scheduler run.

    `normalized` is False when a timezone was requested but local-midnight
    normalization failed and the raw instant was kept.
    """

    ease_factor: float
    interval: int
    repetitions: int
    next_review: datetime
    normalized: bool = True

    def to_state(self) -> ScheduleState:
        return ScheduleState(
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
            next_review=self.next_review,
        )


@dataclass(frozen=True)
class AnswerGrade:
    """Similarity score and the grade derived from it."""

    score: float
    grade: int
    correct: bool
    perfect: bool


@dataclass(frozen=True)
class LevelInfo:
    level: int
    current_xp: int
    xp_for_next_level: int
    title: str


@dataclass
class LearnerStats:
    """Per-learner gamification record (XP and daily streak)."""

    total_xp: int = 0
    current_streak: int = 0
    last_review_at: datetime | None = None


def default_ease(state: ScheduleState | None) -> float:
    """Ease for banding and scheduling; unseen cards count as 2.5."""
    return state.ease_factor if state is not None else DEFAULT_EASE
