from __future__ import annotations

import logging
from typing import Any

import requests

from ..config import SPOTIFY
from ..utils.tracks import Track
from ..utils.utilities import RateLimiter
from .http_client import BearerJSONClient, TokenRejectedError
from .parse import as_dict, as_list, as_str, first_image_url, names_from_objects


class SpotifyAuthError(TokenRejectedError):
    """The access token was rejected (expired or revoked); the caller must log in again."""


def track_from_api(obj: dict[str, Any]) -> Track | None:
    """Map a Spotify track object to a Track; None for empty/local items without an id."""
    data = as_dict(obj)
    track_id = as_str(data.get("id"))
    name = as_str(data.get("name"))
    if not track_id or not name:
        return None
    album = as_dict(data.get("album"))
    return Track(
        id=track_id,
        name=name,
        artists=tuple(names_from_objects(data.get("artists"))),
        preview_url=as_str(data.get("preview_url")) or None,
        album_image=first_image_url(album.get("images")) or None,
    )


class SpotifyClient:
    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = SPOTIFY.api_base_url,
        min_interval_s: float = SPOTIFY.min_interval_s,
    ):
        token = (access_token or "").strip()
        if not token:
            raise ValueError("Spotify access token is required.")
        self.base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self.stats: dict[str, int] = {
            "track_fetch": 0,
            "track_not_found": 0,
            "playlist_pages": 0,
            "playlist_skipped_unplayable": 0,
            # HTTP request counters (attempts, including retries).
            "http_get": 0,
        }
        self._http = BearerJSONClient(
            self._session,
            token,
            RateLimiter(min_interval_s=min_interval_s),
            context_prefix="Spotify",
            auth_error=SpotifyAuthError,
            stats=self.stats,
        )

    def get_track(self, track_id: str) -> Track | None:
        tid = as_str(track_id)
        if not tid:
            return None
        data = self._http.get_json(f"{self.base_url}/tracks/{tid}", context=f"track id={tid}")
        if data is None:
            logging.warning(f"Not found in Spotify: track {tid}")
            self.stats["track_not_found"] += 1
            return None
        self.stats["track_fetch"] += 1
        return track_from_api(data)

    def get_playlist_tracks(
        self, playlist_id: str, *, include_unplayable: bool = False
    ) -> list[Track]:
        """
        All tracks of a playlist, following pagination.

        Tracks without a preview clip can't be played in a round and are skipped unless
        `include_unplayable` is set.
        """
        pid = as_str(playlist_id)
        if not pid:
            return []
        out: list[Track] = []
        pages = 0
        for data in self._http.iter_pages(
            f"{self.base_url}/playlists/{pid}/tracks",
            params={"limit": SPOTIFY.playlist_page_size},
            context=f"playlist id={pid}",
            max_pages=SPOTIFY.max_playlist_pages,
        ):
            pages += 1
            self.stats["playlist_pages"] += 1
            for item in as_list(data.get("items")):
                track = track_from_api(as_dict(item).get("track"))
                if track is None:
                    continue
                if not include_unplayable and not track.is_playable:
                    self.stats["playlist_skipped_unplayable"] += 1
                    continue
                out.append(track)

        if pages == 0:
            logging.warning(f"Not found in Spotify: playlist {pid}")
        logging.info(
            f"[SPOTIFY] Playlist {pid}: {len(out)} tracks "
            f"(skipped_unplayable={self.stats['playlist_skipped_unplayable']}, pages={pages})"
        )
        return out

