"""Tests for CLI commands: help, check, schedule, level, study and config."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from cardquest.interface import cli
from cardquest.interface.cli import app

runner = CliRunner()


@pytest.fixture
def write_deck(tmp_path):
    def _write(backs):
        path = tmp_path / "deck.yaml"
        cards = [{"id": f"c{i}", "front": f"Question {i}", "back": b} for i, b in enumerate(backs)]
        path.write_text(yaml.safe_dump({"title": "Test", "cards": cards}), encoding="utf-8")
        return path

    return _write


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "adaptive flashcard learning engine" in result.stdout
    for command in ("check", "schedule", "level", "study", "config"):
        assert command in result.stdout


# --- check ---


def test_check_close_answer():
    result = runner.invoke(app, ["check", "Mitochondria", "mitocondria"])
    assert result.exit_code == 0
    assert "Grade: 4" in result.stdout
    assert "Correct: yes" in result.stdout
    assert "Perfect: no" in result.stdout
    assert "XP: 10" in result.stdout


def test_check_exact_answer_ignores_punctuation():
    result = runner.invoke(app, ["check", "Mitochondria", "MITOCHONDRIA!!"])
    assert "Score: 1.000  Grade: 5" in result.stdout
    assert "XP: 15" in result.stdout


# --- schedule ---


def test_schedule_outputs_json():
    result = runner.invoke(app, ["schedule", "--grade", "5", "--reps", "1"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["interval"] == 2
    assert data["repetitions"] == 2
    assert data["ease_factor"] == 2.6
    assert data["normalized"] is True


def test_schedule_invalid_grade():
    result = runner.invoke(app, ["schedule", "-g", "7"])
    assert result.exit_code == 1


def test_schedule_unknown_timezone_still_schedules():
    result = runner.invoke(app, ["schedule", "-g", "4", "--tz", "Not/AZone"])
    assert result.exit_code == 0
    assert '"normalized": false' in result.stdout
    assert "not recognised" in result.stdout


# --- level ---


def test_level():
    result = runner.invoke(app, ["level", "350"])
    assert result.exit_code == 0
    assert "Level 3 (Novice)  50/300 XP" in result.stdout


def test_level_negative_xp():
    assert runner.invoke(app, ["level", "--", "-5"]).exit_code == 1


# --- study ---


def test_study_complete_deck(mock_home, write_deck):
    deck = write_deck(["yes", "yes"])
    result = runner.invoke(app, ["study", str(deck), "--seed", "1"], input="yes\nyes\n")
    assert result.exit_code == 0
    assert "Deck Complete!" in result.stdout
    assert "Score: 20" in result.stdout
    assert "XP: +30" in result.stdout


def test_study_game_over(mock_home, write_deck):
    deck = write_deck(["a"] * 6)
    result = runner.invoke(app, ["study", str(deck), "--seed", "1"], input="zzz\n" * 5)
    assert result.exit_code == 0
    assert "Game Over" in result.stdout
    assert "Incorrect: 5" in result.stdout


def test_study_quit(mock_home, write_deck):
    deck = write_deck(["yes", "yes", "yes"])
    result = runner.invoke(app, ["study", str(deck)], input="yes\n:q\n")
    assert result.exit_code == 0
    assert "Session Over" in result.stdout
    assert "Score: 10  Correct: 1  Incorrect: 0" in result.stdout


def test_study_endless(mock_home, write_deck):
    deck = write_deck(["yes", "yes"])
    result = runner.invoke(
        app, ["study", str(deck), "--endless", "--seed", "3"], input="yes\nno\n:q\n"
    )
    assert result.exit_code == 0
    assert "Session Over" in result.stdout
    assert "Score: 7" in result.stdout
    assert "Cards seen: 2" in result.stdout


def test_study_review_for_new_learner(mock_home, write_deck):
    deck = write_deck(["yes"])
    result = runner.invoke(app, ["study", str(deck), "--review"])
    assert result.exit_code == 0
    assert "No cards are due" in result.stdout


def test_study_empty_deck(mock_home, tmp_path):
    deck = tmp_path / "empty.yaml"
    deck.write_text("title: Empty\ncards: []\n")
    result = runner.invoke(app, ["study", str(deck)])
    assert result.exit_code == 0
    assert "No cards" in result.stdout


def test_study_missing_deck(mock_home, tmp_path):
    result = runner.invoke(app, ["study", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1
    assert "Cannot read deck file" in result.output


def test_study_bad_timezone(mock_home, write_deck):
    deck = write_deck(["yes"])
    result = runner.invoke(app, ["study", str(deck), "--tz", "Mars/Olympus_Mons"])
    assert result.exit_code == 1


@pytest.mark.parametrize("tz_name", ["America", "a" * 300])
def test_study_malformed_timezone(mock_home, write_deck, tz_name):
    deck = write_deck(["yes"])
    result = runner.invoke(app, ["study", str(deck), "--tz", tz_name])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


class _Clock:
    """Replays monotonic readings, repeating the last one."""

    def __init__(self, *readings):
        self._readings = list(readings)

    def monotonic(self):
        if len(self._readings) > 1:
            return self._readings.pop(0)
        return self._readings[0]


def test_study_endless_reports_time(mock_home, write_deck, monkeypatch):
    monkeypatch.setattr(cli, "time", _Clock(100.0, 110.0, 125.5, 142.0))
    deck = write_deck(["yes", "yes"])
    result = runner.invoke(
        app, ["study", str(deck), "--endless", "--seed", "3"], input="yes\nno\n:q\n"
    )
    assert result.exit_code == 0
    assert "Time: 0:42" in result.stdout


def _write_state(path, schedules, total_xp=0):
    path.write_text(
        yaml.safe_dump({"learner": {"total_xp": total_xp}, "schedules": schedules}),
        encoding="utf-8",
    )


def test_study_review_runs_due_cards(mock_home, write_deck, tmp_path):
    deck = write_deck(["yes", "yes"])
    state = tmp_path / "state.yaml"
    _write_state(
        state,
        {
            "c0": {
                "ease_factor": 2.5,
                "interval": 1,
                "repetitions": 1,
                "next_review": "2020-01-01T00:00:00Z",
            },
            "c1": {
                "ease_factor": 2.5,
                "interval": 1,
                "repetitions": 1,
                "next_review": "2999-01-01T00:00:00Z",
            },
        },
        total_xp=100,
    )

    result = runner.invoke(
        app, ["study", str(deck), "--review", "--state", str(state)], input="yes\n"
    )

    assert result.exit_code == 0
    assert "[1/1]" in result.stdout
    assert "Deck Complete!" in result.stdout
    assert "Score: 10" in result.stdout

    saved = yaml.safe_load(state.read_text())
    assert saved["schedules"]["c0"]["repetitions"] == 2
    assert saved["schedules"]["c0"]["interval"] == 2
    assert saved["schedules"]["c1"]["repetitions"] == 1
    assert saved["learner"]["total_xp"] == 115
    assert saved["learner"]["current_streak"] == 1


def test_study_creates_state_file(mock_home, write_deck, tmp_path):
    deck = write_deck(["yes", "yes"])
    state = tmp_path / "progress" / "state.yaml"

    result = runner.invoke(app, ["study", str(deck), "--state", str(state)], input="yes\nyes\n")

    assert result.exit_code == 0
    saved = yaml.safe_load(state.read_text())
    assert set(saved["schedules"]) == {"c0", "c1"}
    assert saved["learner"]["total_xp"] == 30


def test_study_bad_state_file(mock_home, write_deck, tmp_path):
    deck = write_deck(["yes"])
    state = tmp_path / "state.yaml"
    state.write_text("schedules: [unclosed")
    result = runner.invoke(app, ["study", str(deck), "--state", str(state)])
    assert result.exit_code == 1


def test_study_finds_deck_under_deck_dir(mock_home, write_deck):
    deck = write_deck(["yes"])
    config_file = mock_home / ".config" / "cardquest" / "config.toml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(f'deck_dir = "{deck.parent.as_posix()}"\n')

    result = runner.invoke(app, ["study", deck.name], input="yes\n")

    assert result.exit_code == 0
    assert "Deck Complete!" in result.stdout


# --- config ---


def test_config_show(mock_home):
    config_file = mock_home / ".config" / "cardquest" / "config.toml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text('default_timezone = "Europe/Berlin"\nseed = 5\n')

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["default_timezone"] == "Europe/Berlin"
    assert data["seed"] == 5
    assert data["deck_dir"] is None
