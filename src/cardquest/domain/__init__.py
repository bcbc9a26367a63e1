# Domain Package
from .errors import (
    CardquestError,
    DeckFileError,
    EmptyDeckError,
    InvalidGradeError,
    InvalidTimezoneError,
    StateFileError,
)
from .models import AnswerGrade, Card, LearnerStats, LevelInfo, ScheduleResult, ScheduleState
from .ports import LearnerRepository, ScheduleRepository
from .session import (
    NextCard,
    Quit,
    Restart,
    SessionContext,
    SessionEvent,
    SessionState,
    SubmitAnswer,
)

__all__ = [
    "AnswerGrade",
    "Card",
    "CardquestError",
    "DeckFileError",
    "EmptyDeckError",
    "InvalidGradeError",
    "InvalidTimezoneError",
    "LearnerRepository",
    "LearnerStats",
    "LevelInfo",
    "NextCard",
    "Quit",
    "Restart",
    "ScheduleRepository",
    "ScheduleResult",
    "ScheduleState",
    "SessionContext",
    "SessionEvent",
    "SessionState",
    "StateFileError",
    "SubmitAnswer",
]
