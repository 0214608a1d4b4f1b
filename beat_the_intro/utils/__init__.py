"""
Utility functions and helpers.

This module intentionally uses lazy attribute loading to avoid importing heavier
submodules (e.g., pandas) unless they are needed.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AccuracyBand",
    "GameSession",
    "HistorySummary",
    "InvalidRoundState",
    "RoundResult",
    "RoundStatus",
    "ScoringVariant",
    "Track",
    "accuracy_band",
    "append_history",
    "edit_distance",
    "evaluate_guess",
    "is_match",
    "load_history",
    "load_track_set",
    "normalize",
    "pick_track",
    "read_csv",
    "save_track_set",
    "score",
    "share_text",
    "similarity",
    "summarize_history",
    "write_csv",
]

_MODULE_BY_NAME = {
    "AccuracyBand": "matching",
    "accuracy_band": "matching",
    "edit_distance": "matching",
    "is_match": "matching",
    "normalize": "matching",
    "similarity": "matching",
    "ScoringVariant": "scoring",
    "score": "scoring",
    "Track": "tracks",
    "load_track_set": "tracks",
    "save_track_set": "tracks",
    "GameSession": "rounds",
    "InvalidRoundState": "rounds",
    "RoundResult": "rounds",
    "RoundStatus": "rounds",
    "evaluate_guess": "rounds",
    "pick_track": "rounds",
    "HistorySummary": "history",
    "append_history": "history",
    "load_history": "history",
    "share_text": "history",
    "summarize_history": "history",
    "read_csv": "utilities",
    "write_csv": "utilities",
}


def __getattr__(name: str) -> Any:  # pragma: no cover
    module = _MODULE_BY_NAME.get(name)
    if module is None:
        raise AttributeError(name)

    from importlib import import_module

    return getattr(import_module(f".{module}", __name__), name)
