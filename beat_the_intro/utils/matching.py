from __future__ import annotations

import re
from enum import Enum

from ..config import MATCHING

# ----------------------------
# Answer normalization
# ----------------------------

# Single non-greedy pass; nested brackets are not balanced ("((Extended) Mix)" leaves " Mix)").
_BRACKETED_RE = re.compile(r"\(.*?\)|\[.*?\]|\{.*?\}")
_NON_WORD_RE = re.compile(r"[^0-9a-z_\s]")
_SPACES_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """
    Canonicalize a guess or a reference title/artist for comparison.

    - lowercase
    - drop bracketed annotations like "(Remastered 2011)" or "[Live]"
    - drop anything that is not an ASCII letter, digit, underscore or whitespace
    - collapse spaces and trim
    """
    s = (text or "").lower()
    s = _BRACKETED_RE.sub("", s)
    s = _NON_WORD_RE.sub("", s)
    return _SPACES_RE.sub(" ", s).strip()


# ----------------------------
# Edit distance / similarity
# ----------------------------


def edit_distance(a: str, b: str) -> int:
    """
    Levenshtein distance between `a` and `b` (unit cost insert/delete/substitute).

    The table has len(b)+1 rows and len(a)+1 columns; row 0 and column 0 hold the distance
    from the empty string.
    """
    dp = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]
    for i in range(len(a) + 1):
        dp[0][i] = i
    for j in range(len(b) + 1):
        dp[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            dp[j][i] = min(
                dp[j][i - 1] + 1,
                dp[j - 1][i] + 1,
                dp[j - 1][i - 1] + cost,
            )
    return dp[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """
    Similarity ratio in [0, 1] between two raw strings, after normalization.

    1.0 means identical once normalized. Two answers that both normalize to "" are treated as
    identical (1.0) instead of dividing by zero.
    """
    na = normalize(a)
    nb = normalize(b)
    max_len = max(len(na), len(nb))
    if max_len == 0:
        return 1.0
    return 1.0 - edit_distance(na, nb) / max_len


def is_match(a: str, b: str) -> bool:
    return similarity(a, b) >= MATCHING.match_threshold


# ----------------------------
# Presentation bands
# ----------------------------


class AccuracyBand(str, Enum):
    EXACT = "exact"
    CLOSE = "close"
    MISS = "miss"


def accuracy_band(ratio: float) -> AccuracyBand:
    """Bucket a similarity ratio for display (exact >= 0.8, close >= 0.6, else miss)."""
    if ratio >= MATCHING.match_threshold:
        return AccuracyBand.EXACT
    if ratio >= MATCHING.close_threshold:
        return AccuracyBand.CLOSE
    return AccuracyBand.MISS


def accuracy_percent(ratio: float) -> int:
    return int(round(ratio * 100.0))
