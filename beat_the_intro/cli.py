"""Command-line interface for Beat the Intro."""

from __future__ import annotations

import argparse
import json
import logging
import os
import random
import shlex
import sys
from datetime import datetime
from pathlib import Path

from .config import CLI
from .utils.history import append_history, load_history, share_text, summarize_history
from .utils.matching import accuracy_band, accuracy_percent
from .utils.rounds import GameSession, evaluate_guess, pick_track
from .utils.scoring import max_points, parse_variant
from .utils.tracks import Track, load_track_set, save_track_set


def setup_logging(log_file: Path) -> None:
    """Configure logging to both console and file."""
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s.%(msecs)03d - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    # Console goes to stderr so stdout stays clean for JSON output.
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Silence verbose HTTP debug logs by default
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    logging.info(f"Logging to file: {log_file}")


def _default_log_file(*, command_name: str, logs_dir: Path) -> Path:
    logs_dir.mkdir(parents=True, exist_ok=True)

    now = datetime.now()
    stamp = now.strftime("%Y%m%d-%H%M%S") + f".{now.microsecond // 1000:03d}"
    candidate = logs_dir / f"log-{stamp}-{command_name}.log"
    if not candidate.exists():
        return candidate

    for i in range(2, 1000):
        p = logs_dir / f"log-{stamp}-{command_name}-{i}.log"
        if not p.exists():
            return p
    return logs_dir / f"log-{stamp}-{command_name}-{os.getpid()}.log"


def _setup_logging_from_args(args: argparse.Namespace, *, command_name: str) -> None:
    logs_dir = args.logs_dir or (Path.cwd() / "data" / "logs")
    setup_logging(args.log_file or _default_log_file(command_name=command_name, logs_dir=logs_dir))
    if args.debug:
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        for handler in root_logger.handlers:
            handler.setLevel(logging.DEBUG)
        logging.getLogger("urllib3").setLevel(logging.DEBUG)

    argv = " ".join(shlex.quote(a) for a in sys.argv)
    logging.info(f"Invocation: {argv}")


def _command_evaluate(args: argparse.Namespace) -> None:
    _setup_logging_from_args(args, command_name="evaluate")
    variant = parse_variant(args.variant)
    track = Track(
        id=args.track_id or "",
        name=args.title,
        artists=(args.artist,) if args.artist else (),
    )
    result = evaluate_guess(
        track, args.title_guess or "", args.artist_guess or "", args.elapsed, variant=variant
    )
    payload = result.to_dict()
    payload["title_accuracy"] = accuracy_band(result.title_similarity).value
    payload["artist_accuracy"] = accuracy_band(result.artist_similarity).value
    payload["title_accuracy_percent"] = accuracy_percent(result.title_similarity)
    payload["artist_accuracy_percent"] = accuracy_percent(result.artist_similarity)
    print(json.dumps(payload, ensure_ascii=False, indent=2))

    if args.history is not None:
        append_history([result], args.history)
        logging.info(f"✔ Appended round to history: {args.history}")
    if args.share:
        print(share_text(result))


def _command_play(args: argparse.Namespace) -> None:
    _setup_logging_from_args(args, command_name="play")
    variant = parse_variant(args.variant)
    pool = [t for t in load_track_set(args.tracks) if t.is_playable]
    if not pool:
        raise SystemExit(f"No playable tracks in {args.tracks} (every track lacks a preview URL).")
    rounds = min(max(1, args.rounds), len(pool))
    rng = random.Random(args.seed) if args.seed is not None else None
    session = GameSession(variant=variant)

    for n in range(1, rounds + 1):
        track = pick_track(pool, rng)
        pool.remove(track)
        session.start_round(track)
        print(f"Round {n}/{rounds}: {track.preview_url}")
        try:
            title_answer = input("Title: ")
            artist_answer = input("Artist: ")
        except EOFError:
            logging.warning(f"Input closed; game stopped after {len(session.results)} rounds")
            break
        if session.is_expired():
            print("Time's up!")
        result = session.submit(title_answer, artist_answer)
        print(
            f"  {result.name} by {result.artist or '?'}: +{result.score} "
            f"(title {accuracy_percent(result.title_similarity)}% "
            f"{accuracy_band(result.title_similarity).value}, "
            f"artist {accuracy_percent(result.artist_similarity)}% "
            f"{accuracy_band(result.artist_similarity).value})"
        )
        session.next_round()

    played = len(session.results)
    print(f"Final score: {session.total_score}/{played * max_points(variant=variant)}")
    if args.history is not None and session.results:
        append_history(session.results, args.history)
        logging.info(f"✔ Appended {played} rounds to history: {args.history}")


def _command_grade(args: argparse.Namespace) -> None:
    from .pipelines.grade_pipeline import run_grade

    _setup_logging_from_args(args, command_name="grade")
    out = args.out or args.input.with_name(f"{args.input.stem}_graded.csv")
    run_grade(
        input_csv=args.input,
        output_csv=out,
        tracks_yaml=args.tracks,
        variant=parse_variant(args.variant),
    )


def _command_history(args: argparse.Namespace) -> None:
    _setup_logging_from_args(args, command_name="history")
    path = args.path or Path(CLI.default_history_file)
    df = load_history(path)
    if df.empty:
        logging.info(f"No recent games in {path}. Start playing to see your game history here!")
        return
    logging.info(f"History {path}: {summarize_history(df).format()}")


def _command_fetch_playlist(args: argparse.Namespace) -> None:
    from .clients.spotify_client import SpotifyClient

    _setup_logging_from_args(args, command_name="fetch-playlist")
    token = args.token or os.environ.get(CLI.token_env_var, "")
    if not token:
        raise SystemExit(
            f"Missing Spotify access token. Pass --token or set {CLI.token_env_var}."
        )
    client = SpotifyClient(token)
    tracks = client.get_playlist_tracks(args.playlist_id, include_unplayable=args.include_unplayable)
    save_track_set(tracks, args.out, name=args.name or args.playlist_id)
    logging.info(f"✔ Track set written: {args.out} (tracks={len(tracks)})")


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        raise SystemExit(
            "Missing command. Use one of: evaluate, play, grade, history, fetch-playlist. "
            "Run `python run.py --help` for usage."
        )

    parser = argparse.ArgumentParser(description="Score song-intro guesses by fuzzy text match")
    sub = parser.add_subparsers(dest="command", required=True)

    p_common = argparse.ArgumentParser(add_help=False)
    p_common.add_argument(
        "--logs-dir",
        type=Path,
        help="Logs directory (default: ./data/logs)",
    )
    p_common.add_argument(
        "--log-file",
        type=Path,
        help="Log file path (default: <logs-dir>/log-<timestamp>-<command>.log)",
    )
    p_common.add_argument(
        "--debug", action="store_true", help="Enable DEBUG logging (default: INFO)"
    )

    p_eval = sub.add_parser(
        "evaluate", help="Judge one guess against a title/artist and print the result", parents=[p_common]
    )
    p_eval.add_argument("--title", required=True, help="Reference track title")
    p_eval.add_argument("--artist", default="", help="Reference primary artist")
    p_eval.add_argument("--track-id", default="", help="Track id recorded in history")
    p_eval.add_argument("--title-guess", default="", help="Player's title answer")
    p_eval.add_argument("--artist-guess", default="", help="Player's artist answer")
    p_eval.add_argument(
        "--elapsed", type=float, default=0.0, help="Seconds from playback start to submit"
    )
    p_eval.add_argument(
        "--variant", default="timed", help="Scoring rules: timed (default) or flat"
    )
    p_eval.add_argument("--history", type=Path, help="Append the result to this history CSV")
    p_eval.add_argument("--share", action="store_true", help="Also print share text")
    p_eval.set_defaults(_fn=_command_evaluate)

    p_play = sub.add_parser(
        "play", help="Play rounds in the terminal over a track set YAML", parents=[p_common]
    )
    p_play.add_argument("tracks", type=Path, help="Track set YAML (see fetch-playlist)")
    p_play.add_argument("--rounds", type=int, default=5, help="Number of rounds (default: 5)")
    p_play.add_argument(
        "--variant", default="timed", help="Scoring rules: timed (default) or flat"
    )
    p_play.add_argument("--seed", type=int, help="Random seed for track order")
    p_play.add_argument("--history", type=Path, help="Append the played rounds to this history CSV")
    p_play.set_defaults(_fn=_command_play)

    p_grade = sub.add_parser(
        "grade", help="Score a CSV of recorded guesses", parents=[p_common]
    )
    p_grade.add_argument(
        "input",
        type=Path,
        help="Guesses CSV (UserAnswer, UserArtistAnswer, ElapsedTime + Name/Artist or TrackId)",
    )
    p_grade.add_argument("--out", type=Path, help="Output CSV (default: <input>_graded.csv)")
    p_grade.add_argument("--tracks", type=Path, help="Track set YAML to resolve TrackId")
    p_grade.add_argument(
        "--variant", default="timed", help="Scoring rules: timed (default) or flat"
    )
    p_grade.set_defaults(_fn=_command_grade)

    p_hist = sub.add_parser("history", help="Summarize a game history CSV", parents=[p_common])
    p_hist.add_argument(
        "path", type=Path, nargs="?", help=f"History CSV (default: {CLI.default_history_file})"
    )
    p_hist.set_defaults(_fn=_command_history)

    p_fetch = sub.add_parser(
        "fetch-playlist",
        help="Download a Spotify playlist's previewable tracks into a track set YAML",
        parents=[p_common],
    )
    p_fetch.add_argument("playlist_id", help="Spotify playlist id")
    p_fetch.add_argument("--out", type=Path, required=True, help="Output track set YAML")
    p_fetch.add_argument("--name", default="", help="Track set name (default: playlist id)")
    p_fetch.add_argument(
        "--token", default="", help=f"Spotify access token (default: ${CLI.token_env_var})"
    )
    p_fetch.add_argument(
        "--include-unplayable",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Keep tracks without a preview clip (default: false)",
    )
    p_fetch.set_defaults(_fn=_command_fetch_playlist)

    ns = parser.parse_args(argv)
    ns._fn(ns)
    return


if __name__ == "__main__":
    main()
