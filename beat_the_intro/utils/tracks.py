from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class Track:
    id: str
    name: str
    artists: tuple[str, ...] = field(default_factory=tuple)
    preview_url: str | None = None
    album_image: str | None = None

    @property
    def primary_artist(self) -> str:
        return self.artists[0] if self.artists else ""

    @property
    def is_playable(self) -> bool:
        return bool(self.preview_url)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "name": self.name, "artists": list(self.artists)}
        if self.preview_url:
            out["preview_url"] = self.preview_url
        if self.album_image:
            out["album_image"] = self.album_image
        return out

    @staticmethod
    def from_dict(obj: dict[str, Any]) -> Track:
        """
        Build a Track from a track-set entry.

        Accepts either `artists: [..]` or a single `artist: ".."`.
        """
        artists = obj.get("artists")
        if artists is None:
            single = str(obj.get("artist") or "").strip()
            names = [single] if single else []
        elif isinstance(artists, str):
            names = [artists.strip()] if artists.strip() else []
        else:
            names = [str(a).strip() for a in artists if str(a or "").strip()]
        return Track(
            id=str(obj.get("id") or "").strip(),
            name=str(obj.get("name") or "").strip(),
            artists=tuple(names),
            preview_url=(str(obj.get("preview_url") or "").strip() or None),
            album_image=(str(obj.get("album_image") or "").strip() or None),
        )


# ----------------------------
# Track sets (YAML)
# ----------------------------


def load_track_set(path: str | Path) -> list[Track]:
    """
    Load a playlist-like track set from YAML.

    Format:
        name: All Out 80s
        tracks:
          - id: 4uLU6hMCjMI75M1A2tKUQC
            name: Never Gonna Give You Up
            artists: [Rick Astley]
            preview_url: https://...
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Track set not found: {p}")
    with open(p, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict) or not isinstance(raw.get("tracks", []), list):
        raise ValueError(f"Track set has an unsupported format (expected a 'tracks' list): {p}")

    out: list[Track] = []
    for item in raw.get("tracks") or []:
        if not isinstance(item, dict):
            continue
        t = Track.from_dict(item)
        if not t.id or not t.name:
            continue
        out.append(t)
    return out


def save_track_set(tracks: list[Track], path: str | Path, *, name: str = "") -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    doc: dict[str, Any] = {"name": name, "tracks": [t.to_dict() for t in tracks]}
    with open(p, "w", encoding="utf-8") as f:
        yaml.safe_dump(doc, f, allow_unicode=True, sort_keys=False)


def tracks_by_id(tracks: list[Track]) -> dict[str, Track]:
    return {t.id: t for t in tracks}
