"""
Mastery metrics derived from raw schedule state.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from cardquest.application.scheduler import is_due
from cardquest.domain.constants import (
    DEFAULT_EASE,
    DIFFICULTY_LABELS,
    MASTERED_LABEL,
    MASTERED_MIN_EASE,
    MASTERED_MIN_INTERVAL,
)
from cardquest.domain.models import ScheduleState


def difficulty_label(ease: float) -> str:
    """Human label for an ease factor, from "Very Hard" to "Mastered"."""
    for ceiling, label in DIFFICULTY_LABELS:
        if ease <= ceiling:
            return label
    return MASTERED_LABEL


@dataclass
class MasterySummary:
    """
    Learner progress over a set of cards.
    """

    total_cards: int
    studied: int
    due: int
    mastered: int
    learning: int
    new: int
    avg_ease: float


class MasteryCalculator:
    """
    Computes mastery metrics from ScheduleState objects.

    Stateless and side-effect free.
    """

    def is_mastered(self, state: ScheduleState) -> bool:
        return state.ease_factor >= MASTERED_MIN_EASE and state.interval >= MASTERED_MIN_INTERVAL

    def summarize(
        self,
        states: Iterable[ScheduleState],
        total_cards: int,
        now: datetime,
    ) -> MasterySummary:
        """
        Summarize schedule states for a learner (or one deck).

        Args:
            states: Schedule state of every studied card.
            total_cards: Cards available, studied or not.
            now: Reference time for the due count.
        """
        states = list(states)
        studied = len(states)
        mastered = sum(1 for s in states if self.is_mastered(s))
        due = sum(1 for s in states if is_due(s, now))

        avg_ease = (
            sum(s.ease_factor for s in states) / studied if studied else DEFAULT_EASE
        )

        return MasterySummary(
            total_cards=total_cards,
            studied=studied,
            due=due,
            mastered=mastered,
            learning=studied - mastered,
            new=max(0, total_cards - studied),
            avg_ease=round(avg_ease, 2),
        )
