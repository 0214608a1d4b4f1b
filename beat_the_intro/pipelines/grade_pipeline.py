from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..schema import GRADE_INPUT_DEFAULTS
from ..utils.matching import accuracy_band
from ..utils.rounds import evaluate_guess
from ..utils.scoring import ScoringVariant
from ..utils.tracks import Track, load_track_set, tracks_by_id
from ..utils.utilities import ensure_columns, parse_float_cell, read_csv, write_csv


def _row_track(row: pd.Series, tracks: dict[str, Track] | None) -> Track | None:
    """Reference track for a row: explicit Name/Artist wins, else resolve TrackId."""
    track_id = str(row.get("TrackId", "") or "").strip()
    name = str(row.get("Name", "") or "").strip()
    artist = str(row.get("Artist", "") or "").strip()
    if name:
        return Track(id=track_id, name=name, artists=(artist,) if artist else ())
    if track_id and tracks is not None:
        return tracks.get(track_id)
    return None


def grade_guesses(
    df: pd.DataFrame,
    tracks: dict[str, Track] | None = None,
    *,
    variant: ScoringVariant = ScoringVariant.TIMED,
) -> pd.DataFrame:
    """
    Score recorded guesses row by row.

    Rows whose reference track can't be determined score 0 and keep empty reference fields.
    """
    out = ensure_columns(df.copy(), dict(GRADE_INPUT_DEFAULTS))
    title_sim: list[str] = []
    artist_sim: list[str] = []
    title_acc: list[str] = []
    artist_acc: list[str] = []
    title_ok: list[str] = []
    artist_ok: list[str] = []
    points: list[str] = []
    unresolved = 0

    for idx, row in out.iterrows():
        track = _row_track(row, tracks)
        if track is None:
            unresolved += 1
            logging.warning(
                f"grade: no reference track for row {idx} "
                f"(TrackId='{row.get('TrackId', '')}'); scoring 0"
            )
            title_sim.append("")
            artist_sim.append("")
            title_acc.append("")
            artist_acc.append("")
            title_ok.append("false")
            artist_ok.append("false")
            points.append("0")
            continue

        res = evaluate_guess(
            track,
            str(row.get("UserAnswer", "") or ""),
            str(row.get("UserArtistAnswer", "") or ""),
            parse_float_cell(row.get("ElapsedTime", "")),
            variant=variant,
        )
        out.at[idx, "Name"] = track.name
        out.at[idx, "Artist"] = track.primary_artist
        title_sim.append(f"{res.title_similarity:.4f}")
        artist_sim.append(f"{res.artist_similarity:.4f}")
        title_acc.append(accuracy_band(res.title_similarity).value)
        artist_acc.append(accuracy_band(res.artist_similarity).value)
        title_ok.append("true" if res.is_correct_title else "false")
        artist_ok.append("true" if res.is_correct_artist else "false")
        points.append(str(res.score))

    out["TitleSimilarity"] = title_sim
    out["ArtistSimilarity"] = artist_sim
    out["TitleAccuracy"] = title_acc
    out["ArtistAccuracy"] = artist_acc
    out["IsCorrectTitle"] = title_ok
    out["IsCorrectArtist"] = artist_ok
    out["Score"] = points
    if unresolved:
        logging.warning(f"grade: {unresolved} rows had no reference track")
    return out


def run_grade(
    *,
    input_csv: Path,
    output_csv: Path,
    tracks_yaml: Path | None = None,
    variant: ScoringVariant = ScoringVariant.TIMED,
) -> pd.DataFrame:
    tracks = tracks_by_id(load_track_set(tracks_yaml)) if tracks_yaml is not None else None
    df = read_csv(input_csv)
    graded = grade_guesses(df, tracks, variant=variant)
    write_csv(graded, output_csv)

    total = sum(int(p) for p in graded["Score"]) if len(graded) else 0
    logging.info(
        f"✔ Graded {len(graded)} guesses (variant={variant.value}, total_score={total}): "
        f"{output_csv}"
    )
    return graded
