from __future__ import annotations

import pytest

PAIRS = [
    ("kitten", "sitting"),
    ("", "abc"),
    ("flaw", "lawn"),
    ("bohemian rhapsody", "bohemian rapsody"),
    ("yesterday", "tomorrow"),
    ("a", ""),
]


def test_edit_distance_classic_example() -> None:
    from beat_the_intro.utils.matching import edit_distance

    assert edit_distance("kitten", "sitting") == 3


def test_edit_distance_base_cases() -> None:
    from beat_the_intro.utils.matching import edit_distance

    assert edit_distance("", "") == 0
    assert edit_distance("", "abcd") == 4
    assert edit_distance("abc", "") == 3
    assert edit_distance("same", "same") == 0


@pytest.mark.parametrize("a,b", PAIRS)
def test_edit_distance_is_symmetric_and_matches_rapidfuzz(a: str, b: str) -> None:
    from rapidfuzz.distance import Levenshtein

    from beat_the_intro.utils.matching import edit_distance

    assert edit_distance(a, b) == edit_distance(b, a)
    assert edit_distance(a, b) == Levenshtein.distance(a, b)


def test_edit_distance_does_not_normalize() -> None:
    from beat_the_intro.utils.matching import edit_distance

    assert edit_distance("Abc", "abc") == 1


def test_similarity_identity_and_empty() -> None:
    from beat_the_intro.utils.matching import similarity

    assert similarity("Hey Jude", "Hey Jude") == 1.0
    assert similarity("", "") == 1.0
    # Both sides normalize to "".
    assert similarity("(Live)", "!!!") == 1.0


@pytest.mark.parametrize("a,b", PAIRS + [("Hello (Live)", "hello!"), ("Big Yellow Taxi", "")])
def test_similarity_is_symmetric_and_bounded(a: str, b: str) -> None:
    from beat_the_intro.utils.matching import similarity

    s = similarity(a, b)
    assert s == similarity(b, a)
    assert 0.0 <= s <= 1.0


def test_similarity_ratio_uses_longer_normalized_length() -> None:
    from beat_the_intro.utils.matching import similarity

    # distance 3 over max length 7
    assert similarity("Kitten", "SITTING!") == pytest.approx(1 - 3 / 7)


def test_is_match_threshold() -> None:
    from beat_the_intro.utils.matching import is_match

    assert is_match("Bohemian Rhapsody", "bohemian rhapsody") is True
    assert is_match("bohemian rapsody", "Bohemian Rhapsody") is True
    assert is_match("Yesterday", "Tomorrow") is False
    # 8/10 exactly on the threshold counts.
    assert is_match("abcdefghij", "abcdefghXY") is True
    assert is_match("abcdefghij", "abcdefgXYZ") is False


def test_is_match_ignores_bracketed_annotation_on_reference() -> None:
    from beat_the_intro.utils.matching import is_match

    assert is_match("hotel california", "Hotel California (2013 Remaster)") is True


def test_accuracy_bands() -> None:
    from beat_the_intro.utils.matching import AccuracyBand, accuracy_band, accuracy_percent

    assert accuracy_band(1.0) == AccuracyBand.EXACT
    assert accuracy_band(0.8) == AccuracyBand.EXACT
    assert accuracy_band(0.79) == AccuracyBand.CLOSE
    assert accuracy_band(0.6) == AccuracyBand.CLOSE
    assert accuracy_band(0.59) == AccuracyBand.MISS
    assert accuracy_percent(0.857) == 86


def test_end_to_end_trailing_space_answer_matches() -> None:
    from beat_the_intro.utils.matching import is_match, normalize, similarity

    answer, title = "the final countdown ", "The Final Countdown"
    assert normalize(answer) == normalize(title)
    assert similarity(answer, title) == 1.0
    assert is_match(answer, title) is True


def test_end_to_end_no_answer_scores_nothing() -> None:
    from beat_the_intro.utils.matching import is_match, similarity
    from beat_the_intro.utils.scoring import score

    assert similarity("", "Big Yellow Taxi") == 0.0
    assert is_match("", "Big Yellow Taxi") is False
    for elapsed in (0.0, 2.0, 9.0, 30.0):
        assert score(False, False, elapsed) == 0
