"""Similarity scoring between canonical strings."""

from typing import NamedTuple

from rapidfuzz.distance import Levenshtein

# Score granted to a field that contains the query verbatim but is not an exact match.
SUBSTRING_BOOST = 0.85


class FieldScore(NamedTuple):
    """Score of one field plus whether the query occurs in it verbatim."""

    score: float
    substring: bool


def edit_distance(a: str, b: str) -> int:
    """Unweighted Levenshtein distance (insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Calculate a bounded similarity between two strings.

    Args:
        a: First string
        b: Second string

    Returns:
        1 - distance / max(len(a), len(b)); two empty strings score 1.0
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / max_len


def field_score(query: str, candidate: str, boost: float = SUBSTRING_BOOST) -> FieldScore:
    """
    Score a canonical query against one canonical field.

    A non-empty query found verbatim inside the candidate scores at least
    ``boost`` and is flagged as a substring match, also when its base score
    is already higher.
    """
    base = similarity(query, candidate)
    if query and query in candidate:
        return FieldScore(max(base, boost), True)
    return FieldScore(base, False)
