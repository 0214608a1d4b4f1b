from __future__ import annotations

from typing import Any


def as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: object) -> list[Any]:
    return value if isinstance(value, list) else []


def names_from_objects(items: object) -> list[str]:
    """Extract non-empty `name` fields from a list of API objects (artists, genres...)."""
    out: list[str] = []
    for it in as_list(items):
        name = as_str(as_dict(it).get("name"))
        if name:
            out.append(name)
    return out


def first_image_url(images: object) -> str:
    """Spotify lists images largest first; take the first with a URL."""
    for img in as_list(images):
        url = as_str(as_dict(img).get("url"))
        if url:
            return url
    return ""
