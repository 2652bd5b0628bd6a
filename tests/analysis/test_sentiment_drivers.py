"""Tests for sentiment driver detection."""
from __future__ import annotations

import pytest

from src.analysis.sentiment import identify_sentiment_drivers


def test_impact_is_mean_minus_neutral(make_response):
    responses = [
        make_response("I love the new office", score=90),
        make_response("I love flexible hours", score=0.7),
        make_response("Deadlines leave me stressed", score=20),
    ]

    drivers = {d.phrase: d for d in identify_sentiment_drivers(responses)}

    assert drivers["love"].frequency == 2
    assert drivers["love"].sentiment_impact == pytest.approx(30)
    assert drivers["stressed"].sentiment_impact == pytest.approx(-30)
    assert drivers["love"].context == ["I love the new office", "I love flexible hours"]


def test_sorted_by_absolute_impact_with_stable_ties(make_response):
    responses = [
        make_response("great and happy", score=70),
        make_response("a real problem", score=10),
    ]

    drivers = identify_sentiment_drivers(responses)

    assert [d.phrase for d in drivers] == ["problem", "great", "happy"]


def test_unscored_responses_read_as_neutral(make_response):
    drivers = identify_sentiment_drivers([make_response("issue with tooling")])
    assert drivers[0].sentiment_impact == 0


def test_context_excludes_long_responses_and_caps(make_response):
    long_text = "frustrated " + "x" * 200
    responses = [make_response(long_text, score=10)] + [
        make_response(f"frustrated {i}", score=10) for i in range(5)
    ]

    driver = identify_sentiment_drivers(responses)[0]

    assert driver.frequency == 6
    assert driver.context == ["frustrated 0", "frustrated 1", "frustrated 2"]


def test_custom_phrases_and_limit(make_response):
    responses = [make_response("meeting heavy week, every meeting overran", score=5)]

    drivers = identify_sentiment_drivers(responses, phrases=["meeting", "calendar"], limit=1)

    assert [(d.phrase, d.frequency) for d in drivers] == [("meeting", 1)]
