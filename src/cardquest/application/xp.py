"""
XP and levelling.

Levelling curve: going from level L to L+1 costs 100*L XP, so the
cumulative XP needed to reach level L is 50*(L-1)*L.
"""

import math

from cardquest.application.grading import validate_grade
from cardquest.domain.constants import (
    CORRECT_GRADE,
    LEVEL_TITLES,
    PERFECT_GRADE,
    XP_CORRECT,
    XP_PER_LEVEL_STEP,
    XP_PERFECT,
)
from cardquest.domain.models import LevelInfo


def xp_for_grade(quality: int) -> int:
    """XP awarded for one review."""
    validate_grade(quality)
    if quality == PERFECT_GRADE:
        return XP_PERFECT
    if quality >= CORRECT_GRADE:
        return XP_CORRECT
    return 0


def cumulative_xp_for_level(level: int) -> int:
    return (XP_PER_LEVEL_STEP // 2) * (level - 1) * level


def level_from_xp(total_xp: int) -> LevelInfo:
    """
    Derive level, progress within the level and the cost of the next one.
    """
    if total_xp < 0:
        raise ValueError(f"total_xp must be >= 0, got {total_xp}")

    # Solve 50*(L-1)*L <= total_xp with the quadratic formula
    level = math.floor((1 + math.sqrt(1 + total_xp / 12.5)) / 2)

    # Guard against sqrt rounding at exact level boundaries
    while level > 1 and cumulative_xp_for_level(level) > total_xp:
        level -= 1
    while cumulative_xp_for_level(level + 1) <= total_xp:
        level += 1

    return LevelInfo(
        level=level,
        current_xp=total_xp - cumulative_xp_for_level(level),
        xp_for_next_level=XP_PER_LEVEL_STEP * level,
        title=title_for_level(level),
    )


def title_for_level(level: int) -> str:
    for threshold, title in LEVEL_TITLES:
        if level >= threshold:
            return title
    return LEVEL_TITLES[-1][1]
