"""
Ports (interfaces) for schedule and learner persistence.

These define the contract the hosting application's storage must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import LearnerStats, ScheduleState


class ScheduleRepository(ABC):
    """
    Port for per-(card, learner) schedule state.

    Implementations:
        - InMemoryScheduleRepository: dict-backed, for tests and the CLI.
    """

    @abstractmethod
    def get(self, card_id: str, learner_id: str) -> ScheduleState | None:
        """
        Fetch the schedule state for a card, or None if never reviewed.
        """
        pass

    @abstractmethod
    def save(self, card_id: str, learner_id: str, state: ScheduleState) -> None:
        """
        Create or replace the schedule state for a card.
        """
        pass

    @abstractmethod
    def all_for_learner(self, learner_id: str) -> dict[str, ScheduleState]:
        """
        Return every schedule state a learner has, keyed by card id.
        """
        pass


class LearnerRepository(ABC):
    """Port for per-learner XP and streak records."""

    @abstractmethod
    def get(self, learner_id: str) -> LearnerStats | None:
        pass

    @abstractmethod
    def save(self, learner_id: str, stats: LearnerStats) -> None:
        pass
