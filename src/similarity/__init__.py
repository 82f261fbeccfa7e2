"""String similarity helpers used for typo correction and suggestions.

Example:
    >>> from src.similarity import find_closest
    >>> find_closest("Containr", ["Text", "Container"]).candidate
    'Container'
"""

from .lib import (
    Match,
    find_closest,
    levenshtein,
    rank_similar,
    similarity,
)

__all__ = [
    "Match",
    "find_closest",
    "levenshtein",
    "rank_similar",
    "similarity",
]
