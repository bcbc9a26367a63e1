from .text import levenshtein_distance, normalize_text, similarity

__all__ = ["levenshtein_distance", "normalize_text", "similarity"]
