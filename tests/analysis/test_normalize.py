"""Tests for sentiment normalization and numeric helpers."""
from __future__ import annotations

import datetime

import pytest

from src.analysis.normalize import (
    duration_minutes,
    mean_sentiment,
    normalize_sentiment,
    round_half_up,
    std_dev,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 50),
        (0.9, 90),
        (90, 90),
        (1, 100),
        (0.5, 50),
        (0, 0),
        (150, 100),
        (-5, 0),
    ],
)
def test_normalize_sentiment(raw, expected):
    assert normalize_sentiment(raw) == pytest.approx(expected)


def test_unit_and_percent_scales_agree(make_response):
    unit = make_response("fine", score=0.9)
    percent = make_response("fine", score=90)

    assert unit.normalized_sentiment == pytest.approx(percent.normalized_sentiment)
    assert mean_sentiment([unit]) == pytest.approx(mean_sentiment([percent]))


def test_mean_sentiment_skips_unscored(make_response):
    responses = [make_response(score=80), make_response(score=None), make_response(score=0.4)]
    assert mean_sentiment(responses) == pytest.approx(60)


def test_mean_sentiment_default_when_nothing_scored(make_response):
    assert mean_sentiment([]) == 50
    assert mean_sentiment([make_response(score=None)], default=30) == 30


def test_round_half_up_rounds_halves_away_from_even():
    assert round_half_up(2.5) == 3
    assert round_half_up(74.5) == 75
    assert round_half_up(12.25, 1) == pytest.approx(12.3)
    assert isinstance(round_half_up(4.4), int)


def test_std_dev_population():
    assert std_dev([]) == 0
    assert std_dev([42]) == 0
    assert std_dev([40, 60]) == pytest.approx(10)


def test_duration_minutes_defaults_and_clamps():
    start = datetime.datetime(2025, 1, 1, 10, 0, tzinfo=datetime.timezone.utc)
    assert duration_minutes(start, None) == 0
    assert duration_minutes(start, start + datetime.timedelta(minutes=12)) == pytest.approx(12)
    assert duration_minutes(start, start - datetime.timedelta(minutes=5)) == 0
