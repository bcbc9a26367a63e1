"""
Queue builder for study sessions.

Two policies:
1. Classic/review sessions: optional due-only filtering, then cards grouped
   into ease bands, hardest band first, shuffled within each band.
2. Endless practice: a self-replenishing queue where missed cards come back
   a few positions later.

Randomness comes from an injectable `random.Random` so orderings can be
reproduced in tests.
"""

import logging
import math
import random
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TypeVar

from cardquest.application.scheduler import is_due
from cardquest.domain.constants import (
    ENDLESS_MIN_QUEUE,
    ENDLESS_REQUEUE_MAX_OFFSET,
    ENDLESS_REQUEUE_MIN_OFFSET,
)
from cardquest.domain.models import Card, ScheduleState, default_ease

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates shuffle. Returns a new list; the input is untouched."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def ease_band(ease: float) -> int:
    """Band key at 0.1 resolution, rounding halves up."""
    return math.floor(ease * 10 + 0.5)


def build_ordered_session(
    cards: Sequence[Card],
    schedule_by_card_id: Mapping[str, ScheduleState],
    due_only: bool,
    now: datetime,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Order cards for a classic or review session.

    Args:
        cards: The deck's cards.
        schedule_by_card_id: Known schedule state per card id. Missing cards
            count as never reviewed (ease 2.5, not due).
        due_only: Review mode; keep only cards whose review time has passed.
        now: Reference time for the due check.
        rng: Random source for the in-band shuffle.

    Returns:
        Cards from the lowest ease band (hardest) to the highest.
    """
    rng = rng or random.Random()

    selected = [
        card
        for card in cards
        if not due_only or is_due(schedule_by_card_id.get(card.id), now)
    ]

    bands: dict[int, list[Card]] = {}
    for card in selected:
        key = ease_band(default_ease(schedule_by_card_id.get(card.id)))
        bands.setdefault(key, []).append(card)

    ordered: list[Card] = []
    for key in sorted(bands):
        ordered.extend(shuffle(bands[key], rng))

    logger.debug(
        f"Built session: {len(ordered)}/{len(cards)} cards in {len(bands)} bands "
        f"(due_only={due_only})"
    )
    return ordered


def _top_up(queue: list[Card], full_set: Sequence[Card], rng: random.Random) -> list[Card]:
    while len(queue) < ENDLESS_MIN_QUEUE:
        queue = queue + shuffle(full_set, rng)
    return queue


def seed_endless_queue(full_set: Sequence[Card], rng: random.Random | None = None) -> list[Card]:
    """Initial endless queue: a shuffled deck, topped up to the minimum length."""
    if not full_set:
        raise ValueError("Endless queue needs at least one card")
    rng = rng or random.Random()
    return _top_up(shuffle(full_set, rng), full_set, rng)


def advance_endless_queue(
    queue: Sequence[Card],
    was_incorrect: bool,
    failed_card: Card | None,
    full_set: Sequence[Card],
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Move the endless queue past its front card.

    A missed card is put back 3-5 positions from the new front (or at the end
    when the queue is shorter). Whenever fewer than 3 cards remain, a fresh
    shuffle of the whole deck is appended.
    """
    if not full_set:
        raise ValueError("Endless queue needs at least one card")
    rng = rng or random.Random()

    new_queue = list(queue[1:])

    if was_incorrect and failed_card is not None:
        offset = rng.randint(ENDLESS_REQUEUE_MIN_OFFSET, ENDLESS_REQUEUE_MAX_OFFSET)
        insert_pos = min(offset, len(new_queue))
        new_queue.insert(insert_pos, failed_card)

    return _top_up(new_queue, full_set, rng)
