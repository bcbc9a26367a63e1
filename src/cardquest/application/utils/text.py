"""Answer normalization and fuzzy matching.

Pure functions, no I/O.
"""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normalize free text for comparison.

    Lowercases, drops every character that is neither alphanumeric nor
    whitespace, collapses whitespace runs into one space and trims the ends.
    """
    kept = "".join(ch for ch in text.lower() if ch.isalnum() or ch.isspace())
    return _WHITESPACE.sub(" ", kept).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance (insert, delete, substitute)."""
    if len(a) < len(b):
        return levenshtein_distance(b, a)

    if not b:
        return len(a)

    previous_row = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current_row = [i]
        for j, cb in enumerate(b, start=1):
            insertions = previous_row[j] + 1
            deletions = current_row[j - 1] + 1
            substitutions = previous_row[j - 1] + (ca != cb)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(typed: str, expected: str) -> float:
    """
    Score how close a typed answer is to the expected one, in [0, 1].

    Both strings are normalized first. An expected answer that normalizes to
    nothing scores 0 so malformed cards can never be "answered".
    """
    norm_typed = normalize_text(typed)
    norm_expected = normalize_text(expected)

    if not norm_expected:
        return 0.0
    if norm_typed == norm_expected:
        return 1.0

    distance = levenshtein_distance(norm_typed, norm_expected)
    max_len = max(len(norm_typed), len(norm_expected))

    return max(0.0, (max_len - distance) / max_len)
