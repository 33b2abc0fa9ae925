"""Column name similarity (normalized names scored by Levenshtein distance)."""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

_SEPARATORS = re.compile(r"[_\s-]")

# Score for one normalized name containing the other. Flat, regardless of
# how much longer the containing name is.
CONTAINMENT_SCORE = 0.8


def normalize_column_name(name: str) -> str:
    """Lowercase a column name and drop underscores, whitespace and hyphens."""
    return _SEPARATORS.sub("", str(name).lower())


def column_similarity(name1: str, name2: str) -> float:
    """Score how alike two column names are.

    Identical normalized names score 1.0, containment scores
    ``CONTAINMENT_SCORE``, anything else is ``1 - distance / longest``.

    Args:
        name1: First column name
        name2: Second column name

    Returns:
        Similarity in [0, 1]

    Example:
        >>> column_similarity("Customer_ID", "customer id")
        1.0
        >>> column_similarity("CustomerID", "ID")
        0.8
    """
    a = normalize_column_name(name1)
    b = normalize_column_name(name2)

    if a == b:
        return 1.0
    if a in b or b in a:
        return CONTAINMENT_SCORE

    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))
