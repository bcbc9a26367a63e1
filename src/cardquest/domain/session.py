"""
Session types: states, events and the context a study session carries.

The transition logic lives in `cardquest.application.session_machine`.
"""

from dataclasses import dataclass, field
from enum import Enum

from .constants import STARTING_LIVES
from .models import Card


class SessionState(str, Enum):
    QUESTION = "question"
    FEEDBACK_CORRECT = "feedback_correct"
    FEEDBACK_INCORRECT = "feedback_incorrect"
    COMPLETED = "completed"
    GAME_OVER = "game_over"
    SESSION_OVER = "session_over"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {SessionState.COMPLETED, SessionState.GAME_OVER, SessionState.SESSION_OVER}
)

PLAYING = "playing"


def game_status_for(state: SessionState) -> str:
    """Status flag shown to the player; terminal states use their own name."""
    return state.value if state.is_terminal else PLAYING


# ---------- Events ----------


@dataclass(frozen=True)
class SubmitAnswer:
    correct: bool
    perfect: bool = False


@dataclass(frozen=True)
class NextCard:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Restart:
    pass


SessionEvent = SubmitAnswer | NextCard | Quit | Restart


@dataclass(frozen=True)
class SessionContext:
    """
    Session-local progress. Replaced, never mutated, on each transition.
    """

    cards: tuple[Card, ...] = field(default_factory=tuple)
    current_index: int = 0
    lives: int = STARTING_LIVES
    score: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    game_status: str = PLAYING

    @property
    def has_more_cards(self) -> bool:
        return self.current_index < len(self.cards) - 1

    @property
    def current_card(self) -> Card | None:
        if 0 <= self.current_index < len(self.cards):
            return self.cards[self.current_index]
        return None
