"""
Fuzzy Matcher — scores how well typed text matches a category field.

The score is deliberately simple and deterministic so suggestions never
reshuffle between keystrokes:
  exact match                → 100
  target contains query      → up to 80, scaled by how much of it is covered
  each shared token          → +7
  target starts with query   → +10
capped at 100. Query and target are not interchangeable.
"""

from __future__ import annotations

import math
import re
from typing import Set


class FuzzyScore:
    """Scoring constants."""
    EXACT_MATCH = 100
    SUBSTRING_MATCH_BASE = 80
    SUBSTRING_BONUS = 10
    TOKEN_OVERLAP_MULTIPLIER = 7
    PREFIX_MATCH_BONUS = 10
    MINIMUM_MATCH_THRESHOLD = 60


_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def _tokens(text: str) -> Set[str]:
    return {t for t in _TOKEN_SPLIT.split(text) if t}


def fuzzy_score(query: str, target: str) -> int:
    """Return a similarity score in [0, 100] for query against target."""
    if not query or not target:
        return 0
    a = query.lower().strip()
    b = target.lower().strip()
    if not a or not b:
        return 0
    if a == b:
        return FuzzyScore.EXACT_MATCH

    score = 0
    if a in b:
        score = min(
            FuzzyScore.SUBSTRING_MATCH_BASE,
            math.floor(len(a) / len(b) * FuzzyScore.SUBSTRING_MATCH_BASE
                       + FuzzyScore.SUBSTRING_BONUS),
        )

    overlap = len(_tokens(a) & _tokens(b))
    score += overlap * FuzzyScore.TOKEN_OVERLAP_MULTIPLIER

    if b.startswith(a):
        score += FuzzyScore.PREFIX_MATCH_BONUS

    return min(score, FuzzyScore.EXACT_MATCH)
