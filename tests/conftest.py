import random
from datetime import datetime, timezone

import pytest

from cardquest.domain.models import Card


@pytest.fixture
def now():
    """A fixed review time: 2025-01-01 12:00 UTC."""
    return datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def cards():
    return [
        Card(id="c1", front="Powerhouse of the cell", back="Mitochondria"),
        Card(id="c2", front="Capital of France", back="Paris"),
        Card(id="c3", front="H2O", back="Water"),
    ]


@pytest.fixture
def make_cards():
    def _make(n: int, back: str = "answer") -> list[Card]:
        return [Card(id=f"c{i}", front=f"Question {i}", back=back) for i in range(1, n + 1)]

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config
    monkeypatch.setenv("HOME", str(home))
    for var in ("CARDQUEST_DEFAULT_TIMEZONE", "CARDQUEST_SEED", "CARDQUEST_DECK_DIR"):
        monkeypatch.delenv(var, raising=False)
    return home
