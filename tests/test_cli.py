from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_cli_requires_command() -> None:
    from beat_the_intro.cli import main

    with pytest.raises(SystemExit):
        main([])


def test_cli_evaluate_prints_json_and_appends_history(tmp_path: Path, capsys) -> None:
    from beat_the_intro.cli import main
    from beat_the_intro.utils.history import load_history

    hist = tmp_path / "history.csv"
    main(
        [
            "evaluate",
            "--title",
            "The Final Countdown",
            "--artist",
            "Europe",
            "--title-guess",
            "the final countdown ",
            "--artist-guess",
            "Europ",
            "--elapsed",
            "5",
            "--history",
            str(hist),
            "--logs-dir",
            str(tmp_path / "logs"),
        ]
    )
    payload = json.loads(capsys.readouterr().out)
    assert payload["is_correct_title"] is True
    assert payload["is_correct_artist"] is True
    assert payload["score"] == 3
    assert payload["title_accuracy"] == "exact"
    assert payload["artist_accuracy_percent"] == 83

    df = load_history(hist)
    assert df["Name"].tolist() == ["The Final Countdown"]
    assert list((tmp_path / "logs").glob("log-*-evaluate.log"))


def test_cli_grade_writes_default_output(tmp_path: Path) -> None:
    import pandas as pd

    from beat_the_intro.cli import main
    from beat_the_intro.utils.utilities import read_csv

    inp = tmp_path / "guesses.csv"
    pd.DataFrame(
        [{"Name": "Hey Jude", "Artist": "The Beatles", "UserAnswer": "hey jude", "ElapsedTime": "20"}]
    ).to_csv(inp, index=False)

    main(["grade", str(inp), "--log-file", str(tmp_path / "grade.log")])

    graded = read_csv(tmp_path / "guesses_graded.csv")
    assert graded.loc[0, "Score"] == "1"


def test_cli_fetch_playlist_requires_token(tmp_path: Path, monkeypatch) -> None:
    from beat_the_intro.cli import main

    monkeypatch.delenv("SPOTIFY_TOKEN", raising=False)
    with pytest.raises(SystemExit, match="Missing Spotify access token"):
        main(
            [
                "fetch-playlist",
                "p1",
                "--out",
                str(tmp_path / "p1.yaml"),
                "--log-file",
                str(tmp_path / "f.log"),
            ]
        )


def test_cli_evaluate_without_artist_or_guesses_scores_zero(tmp_path: Path, capsys) -> None:
    from beat_the_intro.cli import main

    main(
        [
            "evaluate",
            "--title",
            "Big Yellow Taxi",
            "--elapsed",
            "5",
            "--log-file",
            str(tmp_path / "e.log"),
        ]
    )
    payload = json.loads(capsys.readouterr().out)
    assert payload["is_correct_artist"] is False
    assert payload["score"] == 0


def _write_track_set(path: Path) -> None:
    from beat_the_intro.utils.tracks import Track, save_track_set

    save_track_set(
        [
            Track(id="1", name="Take On Me", artists=("a-ha",), preview_url="https://p/1"),
            Track(id="2", name="Africa", artists=("TOTO",)),
        ],
        path,
        name="80s",
    )


def test_cli_play_runs_rounds_over_playable_tracks_and_appends_history(
    tmp_path: Path, monkeypatch, capsys
) -> None:
    from beat_the_intro.cli import main
    from beat_the_intro.utils.history import load_history

    tracks = tmp_path / "tracks.yaml"
    _write_track_set(tracks)
    answers = iter(["take on me", "A-ha"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    hist = tmp_path / "history.csv"
    main(
        [
            "play",
            str(tracks),
            "--rounds",
            "3",
            "--seed",
            "7",
            "--history",
            str(hist),
            "--log-file",
            str(tmp_path / "p.log"),
        ]
    )
    out = capsys.readouterr().out
    assert "Round 1/1: https://p/1" in out
    assert "Take On Me by a-ha: +4" in out
    assert "Final score: 4/4" in out

    df = load_history(hist)
    assert df["TrackId"].tolist() == ["1"]
    assert df["Score"].tolist() == ["4"]


def test_cli_play_stops_when_input_closes(tmp_path: Path, monkeypatch, capsys) -> None:
    from beat_the_intro.cli import main

    tracks = tmp_path / "tracks.yaml"
    _write_track_set(tracks)

    def closed(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed)
    hist = tmp_path / "history.csv"
    main(["play", str(tracks), "--history", str(hist), "--log-file", str(tmp_path / "p.log")])
    assert "Final score: 0/0" in capsys.readouterr().out
    assert not hist.exists()


def test_cli_play_without_playable_tracks_exits(tmp_path: Path) -> None:
    from beat_the_intro.cli import main
    from beat_the_intro.utils.tracks import Track, save_track_set

    tracks = tmp_path / "tracks.yaml"
    save_track_set([Track(id="2", name="Africa", artists=("TOTO",))], tracks)
    with pytest.raises(SystemExit, match="No playable tracks"):
        main(["play", str(tracks), "--log-file", str(tmp_path / "p.log")])
