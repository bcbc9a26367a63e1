"""
Review Service: application layer orchestrator.

Runs one typed-answer submission through the engine: similarity, grade,
schedule update, XP award and streak, persisting through the repository
ports.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from cardquest.application.config import EngineConfig
from cardquest.application.grading import grade_answer
from cardquest.application.scheduler import apply_review, ensure_aware, schedule
from cardquest.application.streak import next_streak
from cardquest.application.xp import level_from_xp, xp_for_grade
from cardquest.domain.constants import DEFAULT_EASE
from cardquest.domain.models import AnswerGrade, Card, LearnerStats, LevelInfo, ScheduleState
from cardquest.domain.ports import LearnerRepository, ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    answer: AnswerGrade
    state: ScheduleState
    xp_earned: int
    total_xp: int
    level: LevelInfo
    streak: int

    @property
    def grade(self) -> int:
        return self.answer.grade

    @property
    def correct(self) -> bool:
        return self.answer.correct

    @property
    def perfect(self) -> bool:
        return self.answer.perfect


class ReviewService:
    """
    Application service for grading and recording reviews.

    Follows Dependency Inversion: depends on the repository ports,
    not concrete storage.
    """

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        learner_repo: LearnerRepository,
        config: EngineConfig | None = None,
    ):
        self._schedules = schedule_repo
        self._learners = learner_repo
        self._config = config or EngineConfig()

    def submit(
        self,
        learner_id: str,
        card: Card,
        typed: str,
        review_mode: bool = False,
        timezone_name: str | None = None,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """
        Grade a typed answer and record its effects.

        Args:
            learner_id: Who answered.
            card: The card answered; `card.back` is the expected answer.
            typed: What the learner typed.
            review_mode: Review sessions always move the schedule; practice on
                a card that is not yet due only adjusts its ease.
            timezone_name: Learner's IANA zone; defaults to the configured one.
            now: Review time; defaults to the current UTC time.
        """
        now = ensure_aware(now or datetime.now(timezone.utc))
        tz_name = timezone_name or self._config.default_timezone

        answer = grade_answer(typed, card.back)

        prior = self._schedules.get(card.id, learner_id)
        result = schedule(
            answer.grade,
            prior.repetitions if prior else 0,
            prior.ease_factor if prior else DEFAULT_EASE,
            timezone_name=tz_name,
            now=now,
        )
        state = apply_review(prior, result, review_mode, now)
        self._schedules.save(card.id, learner_id, state)

        stats = self._learners.get(learner_id) or LearnerStats()
        xp_earned = xp_for_grade(answer.grade)
        streak = next_streak(stats.current_streak, stats.last_review_at, now, tz_name)
        stats = LearnerStats(
            total_xp=stats.total_xp + xp_earned,
            current_streak=streak,
            last_review_at=now,
        )
        self._learners.save(learner_id, stats)

        logger.debug(
            f"Review {learner_id}/{card.id}: score={answer.score:.3f} grade={answer.grade} "
            f"interval={state.interval} ease={state.ease_factor} xp=+{xp_earned}"
        )

        return ReviewOutcome(
            answer=answer,
            state=state,
            xp_earned=xp_earned,
            total_xp=stats.total_xp,
            level=level_from_xp(stats.total_xp),
            streak=streak,
        )

    def level_for(self, learner_id: str) -> LevelInfo:
        stats = self._learners.get(learner_id) or LearnerStats()
        return level_from_xp(stats.total_xp)
