from __future__ import annotations

from enum import Enum

from ..config import SCORING, ScoringConfig


class ScoringVariant(str, Enum):
    # Title base point + speed bonus, flat artist point (0..4).
    TIMED = "timed"
    # Older rule set: one point per correct field, no speed bonus (0..2).
    FLAT = "flat"


def clamp_elapsed(elapsed_s: float, *, cfg: ScoringConfig = SCORING) -> float:
    return min(max(float(elapsed_s), 0.0), float(cfg.round_duration_s))


def score(
    title_correct: bool,
    artist_correct: bool,
    elapsed_s: float,
    *,
    variant: ScoringVariant = ScoringVariant.TIMED,
    cfg: ScoringConfig = SCORING,
) -> int:
    """
    Points awarded for one round.

    Timed variant: +1 for the title, +2 more if it came within 3s or +1 within 10s, and +1 for
    the artist. The flat variant ignores elapsed time.
    """
    points = 0
    if title_correct:
        points += cfg.title_points
        if variant == ScoringVariant.TIMED:
            if elapsed_s <= cfg.fast_s:
                points += cfg.fast_bonus
            elif elapsed_s <= cfg.medium_s:
                points += cfg.medium_bonus
    if artist_correct:
        points += cfg.artist_points
    return points


def max_points(*, variant: ScoringVariant = ScoringVariant.TIMED, cfg: ScoringConfig = SCORING) -> int:
    return score(True, True, 0.0, variant=variant, cfg=cfg)


def parse_variant(raw: str | ScoringVariant) -> ScoringVariant:
    if isinstance(raw, ScoringVariant):
        return raw
    s = str(raw or "").strip().lower()
    try:
        return ScoringVariant(s)
    except ValueError:
        allowed = ", ".join(v.value for v in ScoringVariant)
        raise ValueError(f"Unknown scoring variant '{raw}'. Allowed: {allowed}") from None
