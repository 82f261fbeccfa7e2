"""Normalized edit-distance similarity and nearest-candidate search.

The fixer rewrites a value only when the best candidate clears a threshold,
and the validator reuses the same scoring read-only to build suggestions.
Comparison is case-insensitive throughout.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Match:
    """A candidate paired with its similarity score."""

    candidate: str
    score: float


def levenshtein(a: str, b: str) -> int:
    """Compute the Levenshtein edit distance between two strings.

    Wagner-Fischer dynamic programming over two rolling rows.

    Args:
        a: First string.
        b: Second string.

    Returns:
        Minimum number of single-character insertions, deletions or
        substitutions turning `a` into `b`.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    len_b = len(b)
    prev_row = list(range(len_b + 1))
    curr_row = [0] * (len_b + 1)

    for i in range(1, len(a) + 1):
        curr_row[0] = i
        for j in range(1, len_b + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            curr_row[j] = min(
                prev_row[j] + 1,
                curr_row[j - 1] + 1,
                prev_row[j - 1] + cost,
            )
        prev_row, curr_row = curr_row, prev_row

    return prev_row[len_b]


def similarity(a: str, b: str) -> float:
    """Normalized, case-insensitive similarity in [0.0, 1.0].

    Defined as ``1 - levenshtein(a, b) / max(len(a), len(b))``. Two empty
    strings are identical.
    """
    a_lower = a.lower()
    b_lower = b.lower()
    longest = max(len(a_lower), len(b_lower))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a_lower, b_lower) / longest


def find_closest(
    value: str, candidates: Iterable[str], threshold: float = 0.0
) -> Match | None:
    """Find the candidate most similar to `value`.

    Ties keep the first candidate encountered, so callers control the
    tie-break through candidate order.

    Args:
        value: The string to match.
        candidates: Ordered candidate strings.
        threshold: Minimum score a match must reach.

    Returns:
        The best Match at or above `threshold`, or None.
    """
    best: Match | None = None
    for candidate in candidates:
        score = similarity(value, candidate)
        if best is None or score > best.score:
            best = Match(candidate, score)
    if best is None or best.score < threshold:
        return None
    return best


def rank_similar(
    value: str,
    candidates: Iterable[str],
    limit: int = 3,
    threshold: float = 0.0,
) -> list[Match]:
    """Rank candidates by similarity, best first.

    The sort is stable, so equal scores keep candidate order.
    """
    scored = [Match(c, similarity(value, c)) for c in candidates]
    scored = [m for m in scored if m.score >= threshold]
    scored.sort(key=lambda m: m.score, reverse=True)
    return scored[:limit]
