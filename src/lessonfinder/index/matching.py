"""Approximate string matching primitives."""

from __future__ import annotations

import re
from typing import List

_TOKEN = re.compile(r"\w+", re.UNICODE)


def tokenize(query: str, *, min_length: int = 1) -> List[str]:
    """Lowercase ``query`` and split it into word tokens.

    Tokens shorter than ``min_length`` are dropped; duplicates keep their
    first position only.
    """
    seen: set[str] = set()
    tokens: List[str] = []
    for token in _TOKEN.findall(query.lower()):
        if len(token) < min_length or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens


def substring_distance(pattern: str, text: str) -> int:
    """Smallest edit distance between ``pattern`` and any substring of ``text``.

    Sellers' variant of Levenshtein: the match may start and end anywhere in
    ``text`` at no cost. Returns ``len(pattern)`` when ``text`` is empty.
    """
    m = len(pattern)
    if m == 0:
        return 0
    if pattern in text:
        return 0

    # prev[i]: distance of pattern[:i] ending at the previous text position
    prev = list(range(m + 1))
    best = m
    for ch in text:
        cur = [0] * (m + 1)
        for i in range(1, m + 1):
            cost = 0 if pattern[i - 1] == ch else 1
            cur[i] = min(prev[i - 1] + cost, prev[i] + 1, cur[i - 1] + 1)
        if cur[m] < best:
            best = cur[m]
        prev = cur
    return best


def token_score(token: str, text: str) -> float:
    """Normalized distance in ``[0, 1]``; ``0`` is an exact substring hit."""
    if not token:
        return 0.0
    return min(substring_distance(token, text) / len(token), 1.0)
