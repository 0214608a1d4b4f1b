from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..schema import HISTORY_COLUMNS, RESULT_TO_HISTORY_COL
from .rounds import RoundResult
from .utilities import ensure_columns, parse_bool_cell, parse_float_cell, read_csv, write_csv


def _result_row(result: RoundResult) -> dict[str, str]:
    raw = result.to_dict()
    row: dict[str, str] = {}
    for attr, col in RESULT_TO_HISTORY_COL.items():
        v = raw[attr]
        if isinstance(v, bool):
            row[col] = "true" if v else "false"
        elif isinstance(v, float):
            row[col] = f"{v:.4f}"
        else:
            row[col] = str(v)
    return row


def load_history(path: str | Path) -> pd.DataFrame:
    p = Path(path)
    if not p.exists():
        return pd.DataFrame(columns=list(HISTORY_COLUMNS), dtype=str)
    df = ensure_columns(read_csv(p), {c: "" for c in HISTORY_COLUMNS})
    return df[list(HISTORY_COLUMNS)]


def append_history(results: list[RoundResult], path: str | Path) -> pd.DataFrame:
    """Append revealed rounds to the history CSV (created on first use). Returns the full history."""
    existing = load_history(path)
    if not results:
        return existing
    new_rows = pd.DataFrame([_result_row(r) for r in results], columns=list(HISTORY_COLUMNS))
    out = pd.concat([existing, new_rows], ignore_index=True) if len(existing) else new_rows
    write_csv(out, path)
    return out


@dataclass(frozen=True)
class HistorySummary:
    rounds: int
    total_score: int
    title_accuracy: float
    artist_accuracy: float
    mean_correct_title_elapsed_s: float | None
    fastest_track: str
    fastest_elapsed_s: float | None

    def format(self) -> str:
        mean = (
            f"{self.mean_correct_title_elapsed_s:.1f}s"
            if self.mean_correct_title_elapsed_s is not None
            else "-"
        )
        fastest = (
            f"{self.fastest_track} in {self.fastest_elapsed_s:.1f}s"
            if self.fastest_elapsed_s is not None
            else "-"
        )
        return (
            f"rounds={self.rounds} total_score={self.total_score} "
            f"title_accuracy={self.title_accuracy:.0%} artist_accuracy={self.artist_accuracy:.0%} "
            f"mean_title_time={mean} fastest={fastest}"
        )


def summarize_history(df: pd.DataFrame) -> HistorySummary:
    if df.empty:
        return HistorySummary(0, 0, 0.0, 0.0, None, "", None)

    scores = df["Score"].map(lambda v: int(parse_float_cell(v)))
    title_ok = df["IsCorrectTitle"].map(parse_bool_cell)
    artist_ok = df["IsCorrectArtist"].map(parse_bool_cell)
    elapsed = df["ElapsedTime"].map(parse_float_cell)

    correct_elapsed = elapsed[title_ok]
    mean_elapsed = float(correct_elapsed.mean()) if len(correct_elapsed) else None
    fastest_track = ""
    fastest_elapsed: float | None = None
    if len(correct_elapsed):
        idx = correct_elapsed.idxmin()
        fastest_track = str(df.at[idx, "Name"])
        fastest_elapsed = float(correct_elapsed.loc[idx])

    return HistorySummary(
        rounds=int(len(df)),
        total_score=int(scores.sum()),
        title_accuracy=float(title_ok.mean()),
        artist_accuracy=float(artist_ok.mean()),
        mean_correct_title_elapsed_s=mean_elapsed,
        fastest_track=fastest_track,
        fastest_elapsed_s=fastest_elapsed,
    )


def share_text(result: RoundResult) -> str:
    """Shareable one-round summary."""
    headline = (
        f"I got it in {result.elapsed_s:.1f} seconds!"
        if result.is_correct_title
        else "I couldn't get this one!"
    )
    title_mark = "[x]" if result.is_correct_title else "[ ]"
    artist_mark = "[x]" if result.is_correct_artist else "[ ]"
    return (
        "Beat the Intro\n\n"
        f"{headline}\n"
        f"Song: {result.name}\n"
        f"Artist: {result.artist}\n"
        f"My Score: {result.score} points\n"
        f"{title_mark} Title: {result.user_answer}\n"
        f"{artist_mark} Artist: {result.user_artist_answer}"
    )
