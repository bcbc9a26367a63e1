"""
Quality grading: turns a similarity score into an SM-2 grade (0-5).

Score map:
    5  perfect response            (score >= 0.95)
    4  correct after hesitation    (score >= 0.80)
    3  correct with difficulty     (score >= 0.60)
    2  incorrect, seemed easy      (score >= 0.40)
    1  incorrect, recognised later (score >= 0.20)
    0  complete blackout
"""

from cardquest.application.utils.text import similarity
from cardquest.domain.constants import (
    CORRECT_GRADE,
    GRADE_THRESHOLDS,
    MAX_GRADE,
    MIN_GRADE,
    PERFECT_GRADE,
)
from cardquest.domain.errors import InvalidGradeError
from cardquest.domain.models import AnswerGrade


def validate_grade(grade: object) -> int:
    """Return the grade unchanged, or raise InvalidGradeError.

    Grades index every downstream policy table, so out-of-range values are
    rejected rather than clamped.
    """
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise InvalidGradeError(grade)
    if not MIN_GRADE <= grade <= MAX_GRADE:
        raise InvalidGradeError(grade)
    return grade


def grade(score: float) -> int:
    """Map a similarity score in [0, 1] to a quality grade."""
    for threshold, value in GRADE_THRESHOLDS:
        if score >= threshold:
            return value
    return MIN_GRADE


def is_correct(quality: int) -> bool:
    return validate_grade(quality) >= CORRECT_GRADE


def is_perfect(quality: int) -> bool:
    return validate_grade(quality) == PERFECT_GRADE


def grade_answer(typed: str, expected: str) -> AnswerGrade:
    """Score a typed answer and derive its grade in one step."""
    score = similarity(typed, expected)
    quality = grade(score)
    return AnswerGrade(
        score=score,
        grade=quality,
        correct=is_correct(quality),
        perfect=is_perfect(quality),
    )
