"""API clients for track metadata sources."""

from .spotify_client import SpotifyAuthError, SpotifyClient, track_from_api

__all__ = [
    "SpotifyAuthError",
    "SpotifyClient",
    "track_from_api",
]
