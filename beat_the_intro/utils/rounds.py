from __future__ import annotations

import logging
import random
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from ..config import MATCHING, SCORING, ScoringConfig
from .matching import normalize, similarity
from .scoring import ScoringVariant, clamp_elapsed, score
from .tracks import Track


@dataclass(frozen=True)
class RoundResult:
    track_id: str
    name: str
    artist: str
    user_answer: str
    user_artist_answer: str
    title_similarity: float
    artist_similarity: float
    is_correct_title: bool
    is_correct_artist: bool
    elapsed_s: float
    score: int
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def evaluate_guess(
    track: Track,
    title_answer: str,
    artist_answer: str,
    elapsed_s: float,
    *,
    variant: ScoringVariant = ScoringVariant.TIMED,
    cfg: ScoringConfig = SCORING,
    timestamp: str | None = None,
) -> RoundResult:
    """
    Judge one guess (title + artist) against a track and compute the points for the round.

    Elapsed time is clamped to the round duration before scoring. A track without artist
    metadata has nothing to match, so the artist is never correct for it.
    """
    elapsed = clamp_elapsed(elapsed_s, cfg=cfg)
    title_sim = similarity(title_answer or "", track.name)
    artist_sim = similarity(artist_answer or "", track.primary_artist)
    title_ok = title_sim >= MATCHING.match_threshold
    artist_ok = bool(normalize(track.primary_artist)) and artist_sim >= MATCHING.match_threshold
    return RoundResult(
        track_id=track.id,
        name=track.name,
        artist=track.primary_artist,
        user_answer=title_answer or "",
        user_artist_answer=artist_answer or "",
        title_similarity=title_sim,
        artist_similarity=artist_sim,
        is_correct_title=title_ok,
        is_correct_artist=artist_ok,
        elapsed_s=elapsed,
        score=score(title_ok, artist_ok, elapsed, variant=variant, cfg=cfg),
        timestamp=timestamp if timestamp is not None else _now_iso(),
    )


# ----------------------------
# Round state machine
# ----------------------------


class RoundStatus(str, Enum):
    SELECTING = "selecting"
    PLAYING = "playing"
    REVEALED = "revealed"


class InvalidRoundState(RuntimeError):
    pass


def pick_track(tracks: list[Track], rng: random.Random | None = None) -> Track:
    playable = [t for t in tracks if t.is_playable]
    if not playable:
        raise ValueError("No playable tracks (every track is missing a preview URL).")
    return (rng or random).choice(playable)


@dataclass
class GameSession:
    """
    One player's game: selecting -> playing -> revealed -> selecting ...

    The session owns the round timer and the running total; judging is delegated to
    `evaluate_guess`.
    """

    variant: ScoringVariant = ScoringVariant.TIMED
    cfg: ScoringConfig = SCORING
    clock: Callable[[], float] = time.monotonic
    status: RoundStatus = RoundStatus.SELECTING
    current_track: Track | None = None
    total_score: int = 0
    results: list[RoundResult] = field(default_factory=list)
    _started_at: float | None = field(default=None, repr=False)

    def _require(self, *allowed: RoundStatus, action: str) -> None:
        if self.status not in allowed:
            raise InvalidRoundState(
                f"Cannot {action} while round is '{self.status.value}' "
                f"(expected: {', '.join(s.value for s in allowed)})"
            )

    def start_round(self, track: Track) -> None:
        self._require(RoundStatus.SELECTING, RoundStatus.REVEALED, action="start a round")
        self.current_track = track
        self._started_at = self.clock()
        self.status = RoundStatus.PLAYING
        logging.debug(f"[ROUND] Started track={track.id} ({track.name})")

    def elapsed(self) -> float:
        if self.status != RoundStatus.PLAYING or self._started_at is None:
            return 0.0
        return clamp_elapsed(self.clock() - self._started_at, cfg=self.cfg)

    def time_left(self) -> float:
        if self.status != RoundStatus.PLAYING:
            return 0.0
        return max(0.0, float(self.cfg.round_duration_s) - self.elapsed())

    def is_expired(self) -> bool:
        return self.status == RoundStatus.PLAYING and self.time_left() <= 0.0

    def submit(self, title_answer: str, artist_answer: str = "") -> RoundResult:
        self._require(RoundStatus.PLAYING, action="submit an answer")
        if self.current_track is None:
            raise InvalidRoundState("Cannot submit an answer: no track is playing")
        result = evaluate_guess(
            self.current_track,
            title_answer,
            artist_answer,
            self.elapsed(),
            variant=self.variant,
            cfg=self.cfg,
        )
        self.total_score += result.score
        self.results.append(result)
        self.status = RoundStatus.REVEALED
        self._started_at = None
        logging.debug(
            f"[ROUND] Revealed track={result.track_id} score={result.score} "
            f"total={self.total_score}"
        )
        return result

    def next_round(self) -> None:
        self._require(RoundStatus.REVEALED, action="move to the next round")
        self.current_track = None
        self.status = RoundStatus.SELECTING
