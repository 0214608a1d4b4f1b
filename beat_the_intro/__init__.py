"""Beat the Intro - fuzzy answer matching and time-banded scoring for song-intro guessing."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("beat-the-intro")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
