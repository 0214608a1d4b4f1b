from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingConfig:
    # Similarity ratio (0..1) at which a guess counts as correct.
    match_threshold: float = 0.8
    # Lower band used only for presentation ("close, but not quite").
    close_threshold: float = 0.6


@dataclass(frozen=True)
class ScoringConfig:
    """
    Time bands for the title speed bonus.

    A correct title earns `title_points`, plus `fast_bonus` when answered within `fast_s`
    seconds, else `medium_bonus` within `medium_s` seconds. A correct artist earns a flat
    `artist_points`.
    """

    title_points: int = 1
    artist_points: int = 1
    fast_s: float = 3.0
    fast_bonus: int = 2
    medium_s: float = 10.0
    medium_bonus: int = 1
    # Length of one round (preview clip); elapsed time is clamped to [0, round_duration_s].
    round_duration_s: float = 30.0


@dataclass(frozen=True)
class RetryConfig:
    retries: int = 3
    base_sleep_s: float = 1.0
    jitter_s: float = 0.3
    http_429_default_retry_after_s: float = 5.0


@dataclass(frozen=True)
class RequestConfig:
    timeout_s: int = 10


@dataclass(frozen=True)
class SpotifyConfig:
    api_base_url: str = "https://api.spotify.com/v1"
    min_interval_s: float = 0.1
    # Spotify caps playlist item pages at 100.
    playlist_page_size: int = 100
    # Safety net against a `next` link that never ends.
    max_playlist_pages: int = 50


@dataclass(frozen=True)
class CLIConfig:
    token_env_var: str = "SPOTIFY_TOKEN"
    default_history_file: str = "game_history.csv"


MATCHING = MatchingConfig()
SCORING = ScoringConfig()
RETRY = RetryConfig()
REQUEST = RequestConfig()
SPOTIFY = SpotifyConfig()
CLI = CLIConfig()
