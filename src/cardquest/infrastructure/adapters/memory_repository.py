"""
In-memory repositories: dict-backed implementations of the storage ports.

Used by the CLI and the tests; the hosting application supplies real storage.
"""

from dataclasses import replace

from cardquest.domain.models import LearnerStats, ScheduleState
from cardquest.domain.ports import LearnerRepository, ScheduleRepository


class InMemoryScheduleRepository(ScheduleRepository):
    def __init__(self, states: dict[tuple[str, str], ScheduleState] | None = None):
        self._states: dict[tuple[str, str], ScheduleState] = dict(states or {})

    def get(self, card_id: str, learner_id: str) -> ScheduleState | None:
        return self._states.get((card_id, learner_id))

    def save(self, card_id: str, learner_id: str, state: ScheduleState) -> None:
        self._states[(card_id, learner_id)] = state

    def all_for_learner(self, learner_id: str) -> dict[str, ScheduleState]:
        return {cid: s for (cid, lid), s in self._states.items() if lid == learner_id}


class InMemoryLearnerRepository(LearnerRepository):
    def __init__(self):
        self._stats: dict[str, LearnerStats] = {}

    def get(self, learner_id: str) -> LearnerStats | None:
        stats = self._stats.get(learner_id)
        # Hand out copies so callers cannot mutate stored records
        return replace(stats) if stats else None

    def save(self, learner_id: str, stats: LearnerStats) -> None:
        self._stats[learner_id] = replace(stats)
