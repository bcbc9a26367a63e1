"""Centralized constants for the cardquest engine.

All magic numbers and policy tables live here so every layer
imports from a single source of truth.
"""

# ---------- Grading ----------
MIN_GRADE = 0
MAX_GRADE = 5
PASSING_GRADE = 3  # below this the card counts as forgotten
CORRECT_GRADE = 4
PERFECT_GRADE = 5

# Highest threshold first; first match wins.
GRADE_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (0.95, 5),
    (0.80, 4),
    (0.60, 3),
    (0.40, 2),
    (0.20, 1),
)

# ---------- Scheduler ----------
DEFAULT_EASE = 2.5
MIN_EASE = 1.3
EASE_PRECISION = 3
INTERVAL_STEPS: tuple[int, ...] = (1, 2, 5, 7, 14, 28)  # days

# ---------- XP / Levels ----------
XP_PERFECT = 15
XP_CORRECT = 10
XP_PER_LEVEL_STEP = 100

LEVEL_TITLES: tuple[tuple[int, str], ...] = (
    (50, "Grandmaster"),
    (40, "Master"),
    (30, "Expert"),
    (20, "Scholar"),
    (10, "Apprentice"),
    (5, "Learner"),
    (1, "Novice"),
)

# ---------- Session ----------
STARTING_LIVES = 5
SCORE_PERFECT = 10
SCORE_CORRECT = 5

# ---------- Endless Mode ----------
ENDLESS_MIN_QUEUE = 3
ENDLESS_REQUEUE_MIN_OFFSET = 3
ENDLESS_REQUEUE_MAX_OFFSET = 5
ENDLESS_WRONG_PENALTY = 3

# ---------- Mastery ----------
MASTERED_MIN_EASE = 2.5
MASTERED_MIN_INTERVAL = 21

DIFFICULTY_LABELS: tuple[tuple[float, str], ...] = (
    (1.5, "Very Hard"),
    (1.8, "Hard"),
    (2.2, "Medium"),
    (2.5, "Easy"),
)
MASTERED_LABEL = "Mastered"

# ---------- Timezone ----------
DEFAULT_TIMEZONE = "UTC"
