from __future__ import annotations

from typing import Any

# -----------------------------------------------------------------------------
# CSV schema / column sets
# -----------------------------------------------------------------------------

# Game history, one row per revealed round (oldest first).
HISTORY_COLUMNS: tuple[str, ...] = (
    "TrackId",
    "Name",
    "Artist",
    "Timestamp",
    "Score",
    "UserAnswer",
    "UserArtistAnswer",
    "IsCorrectTitle",
    "IsCorrectArtist",
    "TitleSimilarity",
    "ArtistSimilarity",
    "ElapsedTime",
)

# RoundResult attribute -> history column.
RESULT_TO_HISTORY_COL: dict[str, str] = {
    "track_id": "TrackId",
    "name": "Name",
    "artist": "Artist",
    "timestamp": "Timestamp",
    "score": "Score",
    "user_answer": "UserAnswer",
    "user_artist_answer": "UserArtistAnswer",
    "is_correct_title": "IsCorrectTitle",
    "is_correct_artist": "IsCorrectArtist",
    "title_similarity": "TitleSimilarity",
    "artist_similarity": "ArtistSimilarity",
    "elapsed_s": "ElapsedTime",
}

# Batch grading: input columns (Name/Artist may instead come from TrackId + a track set).
GRADE_INPUT_DEFAULTS: dict[str, Any] = {
    "TrackId": "",
    "Name": "",
    "Artist": "",
    "UserAnswer": "",
    "UserArtistAnswer": "",
    "ElapsedTime": "",
}

# Columns appended by batch grading.
GRADE_OUTPUT_COLUMNS: tuple[str, ...] = (
    "TitleSimilarity",
    "ArtistSimilarity",
    "TitleAccuracy",
    "ArtistAccuracy",
    "IsCorrectTitle",
    "IsCorrectArtist",
    "Score",
)
