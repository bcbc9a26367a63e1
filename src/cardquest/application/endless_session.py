"""
Endless practice session: unlimited play over the adaptive queue.

There are no lives here. Wrong answers cost points instead and the missed
card comes back a few positions later.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from cardquest.application.queue_builder import advance_endless_queue, seed_endless_queue
from cardquest.domain.constants import ENDLESS_WRONG_PENALTY, SCORE_CORRECT, SCORE_PERFECT
from cardquest.domain.errors import EmptyDeckError
from cardquest.domain.models import Card

logger = logging.getLogger(__name__)

Phase = Literal["question", "feedback_correct", "feedback_incorrect", "finished"]


class EndlessSnapshot(BaseModel):
    queue_ids: list[str]
    score: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    incorrect_answers: int = Field(default=0, ge=0)
    total_cards_seen: int = Field(default=0, ge=0)
    elapsed_seconds: int = Field(default=0, ge=0)


@dataclass
class EndlessSession:
    full_set: list[Card]
    queue: list[Card]
    rng: random.Random = field(default_factory=random.Random, repr=False)
    score: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    total_cards_seen: int = 0
    elapsed_seconds: int = 0
    phase: Phase = "question"

    @classmethod
    def start(cls, cards: Sequence[Card], rng: random.Random | None = None) -> "EndlessSession":
        if not cards:
            raise EmptyDeckError("Add cards to this deck before studying.")
        rng = rng or random.Random()
        return cls(full_set=list(cards), queue=seed_endless_queue(cards, rng), rng=rng)

    @property
    def current_card(self) -> Card:
        return self.queue[0]

    @property
    def finished(self) -> bool:
        return self.phase == "finished"

    def submit(self, correct: bool, perfect: bool = False) -> Phase:
        """Record an answer to the current card."""
        if self.phase != "question":
            return self.phase

        self.total_cards_seen += 1
        if correct:
            self.score += SCORE_PERFECT if perfect else SCORE_CORRECT
            self.correct_answers += 1
            self.phase = "feedback_correct"
        else:
            self.score = max(0, self.score - ENDLESS_WRONG_PENALTY)
            self.incorrect_answers += 1
            self.phase = "feedback_incorrect"
        return self.phase

    def next_card(self) -> Card:
        """Leave feedback and move to the next card in the queue."""
        if self.phase not in ("feedback_correct", "feedback_incorrect"):
            return self.current_card

        was_incorrect = self.phase == "feedback_incorrect"
        failed = self.current_card if was_incorrect else None
        self.queue = advance_endless_queue(
            self.queue, was_incorrect, failed, self.full_set, self.rng
        )
        self.phase = "question"
        return self.current_card

    def tick(self, seconds: int = 1) -> None:
        if not self.finished:
            self.elapsed_seconds += seconds

    def finish(self) -> None:
        self.phase = "finished"

    # ---------- Persistence ----------

    def snapshot(self) -> EndlessSnapshot:
        return EndlessSnapshot(
            queue_ids=[c.id for c in self.queue],
            score=self.score,
            correct_answers=self.correct_answers,
            incorrect_answers=self.incorrect_answers,
            total_cards_seen=self.total_cards_seen,
            elapsed_seconds=self.elapsed_seconds,
        )

    @classmethod
    def resume(
        cls,
        data: str | dict[str, Any],
        cards: Sequence[Card],
        rng: random.Random | None = None,
    ) -> "EndlessSession":
        """
        Restore a saved endless session. Ids no longer in the deck are dropped;
        if nothing is left the session starts over.
        """
        try:
            snap = (
                EndlessSnapshot.model_validate_json(data)
                if isinstance(data, str)
                else EndlessSnapshot.model_validate(data)
            )
        except ValidationError as e:
            logger.warning(f"Discarding unreadable endless snapshot: {e}")
            return cls.start(cards, rng)

        by_id = {c.id: c for c in cards}
        queue = [by_id[cid] for cid in snap.queue_ids if cid in by_id]
        if not queue:
            return cls.start(cards, rng)

        return cls(
            full_set=list(cards),
            queue=queue,
            rng=rng or random.Random(),
            score=snap.score,
            correct_answers=snap.correct_answers,
            incorrect_answers=snap.incorrect_answers,
            total_cards_seen=snap.total_cards_seen,
            elapsed_seconds=snap.elapsed_seconds,
        )
