import logging
from datetime import datetime, timedelta, timezone

import pytest

from cardquest.application.streak import next_streak

NOW = datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)


def test_first_review_starts_streak():
    assert next_streak(0, None, NOW) == 1


def test_same_day_keeps_streak():
    assert next_streak(4, NOW - timedelta(hours=3), NOW) == 4


def test_same_day_never_below_one():
    assert next_streak(0, NOW - timedelta(hours=1), NOW) == 1


def test_yesterday_extends_streak():
    assert next_streak(4, NOW - timedelta(days=1), NOW) == 5


def test_missed_day_resets():
    assert next_streak(9, NOW - timedelta(days=3), NOW) == 1


def test_calendar_day_uses_learner_timezone():
    now = datetime(2025, 1, 2, 1, 0, tzinfo=timezone.utc)
    last = datetime(2025, 1, 1, 23, 0, tzinfo=timezone.utc)

    # Different UTC days...
    assert next_streak(3, last, now, "UTC") == 4
    # ...but both fall on 2 January in Bangkok
    assert next_streak(3, last, now, "Asia/Bangkok") == 3


def test_bad_timezone_falls_back_to_utc(caplog):
    with caplog.at_level(logging.WARNING, logger="cardquest.application.streak"):
        assert next_streak(2, NOW - timedelta(days=1), NOW, "Nowhere/Land") == 3
    assert "falls back to UTC" in caplog.text


@pytest.mark.parametrize("tz_name", ["America", "a" * 300])
def test_malformed_timezone_falls_back_to_utc(tz_name):
    assert next_streak(2, NOW - timedelta(days=1), NOW, tz_name) == 3
