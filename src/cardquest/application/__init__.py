from .grading import grade, grade_answer, is_correct, is_perfect
from .queue_builder import advance_endless_queue, build_ordered_session
from .scheduler import normalize_to_local_midnight, schedule
from .session_machine import SessionStateMachine, transition
from .utils.text import similarity
from .xp import level_from_xp, title_for_level, xp_for_grade

__all__ = [
    "SessionStateMachine",
    "advance_endless_queue",
    "build_ordered_session",
    "grade",
    "grade_answer",
    "is_correct",
    "is_perfect",
    "level_from_xp",
    "normalize_to_local_midnight",
    "schedule",
    "similarity",
    "title_for_level",
    "transition",
    "xp_for_grade",
]
