import json
import random

import pytest

from cardquest.application.endless_session import EndlessSession
from cardquest.domain.errors import EmptyDeckError


def test_start_rejects_empty_deck():
    with pytest.raises(EmptyDeckError):
        EndlessSession.start([])


def test_start_fills_queue(make_cards, rng):
    session = EndlessSession.start(make_cards(2), rng)
    assert len(session.queue) >= 3
    assert session.phase == "question"
    assert session.current_card is session.queue[0]


def test_scoring_and_penalty(make_cards, rng):
    session = EndlessSession.start(make_cards(4), rng)

    session.submit(correct=True, perfect=True)
    assert session.score == 10
    session.next_card()
    session.submit(correct=False)
    assert session.score == 7
    session.next_card()
    session.submit(correct=True)
    assert session.score == 12

    assert session.correct_answers == 2
    assert session.incorrect_answers == 1
    assert session.total_cards_seen == 3


def test_score_never_negative(make_cards, rng):
    session = EndlessSession.start(make_cards(4), rng)
    session.submit(correct=False)
    assert session.score == 0
    assert session.phase == "feedback_incorrect"


def test_missed_card_comes_back_later(make_cards):
    cards = make_cards(5)
    for seed in range(20):
        session = EndlessSession.start(cards, random.Random(seed))
        missed = session.current_card
        session.submit(correct=False)
        session.next_card()
        assert session.queue.index(missed) in (3, 4, 5)


def test_correct_card_leaves_front(make_cards, rng):
    session = EndlessSession.start(make_cards(6), rng)
    first, second = session.queue[0], session.queue[1]
    session.submit(correct=True)
    assert session.next_card() is second
    assert session.current_card is not first


def test_submit_outside_question_is_ignored(make_cards, rng):
    session = EndlessSession.start(make_cards(4), rng)
    session.submit(correct=True, perfect=True)
    assert session.submit(correct=True, perfect=True) == "feedback_correct"
    assert session.score == 10
    assert session.total_cards_seen == 1


def test_next_card_requires_feedback(make_cards, rng):
    session = EndlessSession.start(make_cards(4), rng)
    queue = list(session.queue)
    session.next_card()
    assert session.queue == queue


def test_tick_and_finish(make_cards, rng):
    session = EndlessSession.start(make_cards(3), rng)
    session.tick()
    session.tick(4)
    assert session.elapsed_seconds == 5

    session.finish()
    assert session.finished
    session.tick()
    assert session.elapsed_seconds == 5
    assert session.submit(correct=True) == "finished"


def test_snapshot_and_resume(make_cards, rng):
    cards = make_cards(5)
    session = EndlessSession.start(cards, rng)
    session.submit(correct=True, perfect=True)
    session.next_card()
    session.tick(30)

    restored = EndlessSession.resume(session.snapshot().model_dump_json(), cards, rng)

    assert [c.id for c in restored.queue] == [c.id for c in session.queue]
    assert restored.score == 10
    assert restored.total_cards_seen == 1
    assert restored.elapsed_seconds == 30
    assert restored.phase == "question"


def test_resume_drops_unknown_cards(make_cards, rng):
    cards = make_cards(3)
    data = {"queue_ids": ["c1", "gone", "c3"], "score": 4}
    restored = EndlessSession.resume(data, cards, rng)
    assert [c.id for c in restored.queue] == ["c1", "c3"]
    assert restored.score == 4


def test_resume_with_nothing_left_starts_over(make_cards, rng):
    cards = make_cards(3)
    restored = EndlessSession.resume(json.dumps({"queue_ids": ["x", "y"], "score": 50}), cards, rng)
    assert restored.score == 0
    assert len(restored.queue) >= 3


def test_resume_garbage_starts_over(make_cards, rng):
    restored = EndlessSession.resume("{broken", make_cards(3), rng)
    assert restored.score == 0
    assert restored.phase == "question"
