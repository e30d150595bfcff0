"""
Unit tests for the keyword sentiment classifier.
"""

from src.engine.sentiment import (
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    STRONG_NEGATIVES,
    classify,
    score,
)
from src.models.enums import Sentiment


def test_empty_text_is_neutral():
    assert classify("", "", "") == Sentiment.NEUTRAL
    assert classify("", "") == Sentiment.NEUTRAL


def test_strong_negative_override():
    """A strong negative word with any negative score forces negative."""
    text = "This process is broken and terrible, a critical failure"
    result = score(text, "", "")

    # broken, terrible, critical, and "failure" matched by both "fail" and "failure"
    assert result.negative == 5
    assert result.positive == 0
    assert result.strong_negative is True
    assert classify(text, "", "") == Sentiment.NEGATIVE


def test_clearly_positive_text():
    result = score(
        "We will improve efficiency and increase quality significantly",
        "This solution will streamline and optimize the workflow to boost output",
        "Expect to save cost and enhance quality"
    )

    assert result.difference >= 2
    assert result.label == Sentiment.POSITIVE


def test_stem_matches_word_prefix():
    """'improve' counts 'improved' and 'improvement', but not mid-word hits."""
    assert score("improved improvement", "").positive == 2
    assert score("unimproved", "").positive == 0


def test_matching_is_case_insensitive():
    assert score("IMPROVE Better", "").positive == 2
    assert classify("IMPROVE Better", "") == Sentiment.POSITIVE


def test_negation_phrase_adds_to_negative_score():
    result = score("it is not working", "")

    assert result.negative == 1
    assert result.label == Sentiment.NEGATIVE


def test_length_bonus():
    long_solution = "a" * 51
    long_benefit = "b" * 31

    assert score("", long_solution).positive == 1
    assert classify("", long_solution) == Sentiment.NEUTRAL

    assert score("", long_solution, long_benefit).positive == 2
    assert classify("", long_solution, long_benefit) == Sentiment.POSITIVE


def test_length_bonus_counts_utf16_units():
    # Each emoji is one code point but two UTF-16 units
    assert score("", "\U0001F600" * 26).positive == 1
    assert score("", "\U0001F600" * 25).positive == 0
    assert score("", "", "\U0001F680" * 16).positive == 1
    assert score("", "", "\U0001F680" * 15).positive == 0
    assert score("", "é" * 51).positive == 1


def test_strong_negative_needs_small_difference():
    """Enough positive words outweigh a strong negative."""
    text = "Critical fix: improve, enhance, optimize and boost the line"
    result = score(text, "")

    assert result.strong_negative is True
    assert result.difference >= 2
    assert result.label == Sentiment.POSITIVE


def test_vocabulary_sizes():
    assert len(POSITIVE_WORDS) == 48
    assert len(NEGATIVE_WORDS) == 58
    assert len(STRONG_NEGATIVES) == 8
