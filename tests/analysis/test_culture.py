"""Tests for cultural pattern mining and the cultural map."""
from __future__ import annotations

import pytest

from src.analysis.culture import (
    build_cultural_map,
    culture_score,
    cultural_trend,
    detect_cultural_patterns,
    extract_cultural_risks,
    extract_cultural_strengths,
    risk_severity,
)
from src.analysis.themes import ThemeInsight


@pytest.fixture()
def culture_data(make_response, make_session):
    sessions = [
        make_session("s1", group="Engineering"),
        make_session("s2", group="Sales"),
        make_session("s3"),
    ]
    responses = [
        make_response("I feel burnout creeping in", session_id="s1", score=10),
        make_response("Totally exhausted every Friday", session_id="s2", score=20),
        make_response("Overwhelmed with tickets", session_id="s3", score=None),
        make_response("My team is very helpful", session_id="s1", score=90),
    ]
    return responses, sessions


def test_risk_severity_is_monotonic():
    assert risk_severity(3) == "medium"
    assert risk_severity(4) == "medium"
    assert risk_severity(5) == "high"
    assert risk_severity(10) == "critical"
    assert risk_severity(2) == "low"

    order = {"low": 0, "medium": 1, "high": 2, "critical": 3}
    ranks = [order[risk_severity(n)] for n in range(0, 30)]
    assert ranks == sorted(ranks)


def test_detect_patterns_orders_risks_first(culture_data):
    responses, sessions = culture_data

    patterns = detect_cultural_patterns(responses, sessions)

    assert patterns[0].category == "risk"
    burnout = patterns[0]
    assert burnout.pattern_name == "Burnout Culture"
    assert burnout.id == "risk-burnout-culture"
    assert burnout.frequency == 3
    # unscored response is ignored; (10 + 20) / 2 - 50
    assert burnout.sentiment_impact == -35
    assert burnout.confidence == 85
    assert burnout.affected_groups == ["Engineering", "Sales", "Unknown"]

    strength = next(p for p in patterns if p.pattern_name == "Supportive Environment")
    assert strength.category == "strength"
    assert strength.sentiment_impact == 40
    assert strength.confidence == 40


def test_risk_needs_three_matches(make_response, make_session):
    responses = [
        make_response("burnout", score=10),
        make_response("exhausted", score=10),
    ]

    patterns = detect_cultural_patterns(responses, [make_session()])

    assert not [p for p in patterns if p.category == "risk"]


def test_strengths_and_risks_split(culture_data):
    responses, sessions = culture_data
    patterns = detect_cultural_patterns(responses, sessions)

    strengths = extract_cultural_strengths(patterns)
    risks = extract_cultural_risks(patterns)

    assert [s.strength_name for s in strengths] == ["Supportive Environment"]
    assert strengths[0].impact == "high"
    assert strengths[0].protective_factor is True
    assert [r.risk_name for r in risks] == ["Burnout Culture"]
    assert risks[0].severity == "medium"
    assert len(risks[0].recommended_actions) == 3


def test_culture_score_and_trend():
    # risk term max(0, risks * -10) never lowers the score
    assert culture_score(50, 2, 4) == pytest.approx(60)
    assert culture_score(100, 20, 0) == 100
    assert cultural_trend(70) == "improving"
    assert cultural_trend(40) == "declining"
    assert cultural_trend(55) == "stable"


def test_build_cultural_map(culture_data):
    responses, sessions = culture_data
    themes = [ThemeInsight(theme_id="t1", theme_name="Workload", response_count=4, avg_sentiment=30)]

    cultural_map = build_cultural_map(responses, sessions, themes)

    assert cultural_map.overall_culture_score == 45
    assert cultural_map.cultural_evolution.trend == "declining"
    assert cultural_map.cultural_evolution.change_rate == -20
    assert cultural_map.cultural_evolution.indicators == [
        "More risks than strengths",
        "Low sentiment",
    ]
    groups = {p.group_name: p for p in cultural_map.group_profiles}
    assert set(groups) == {"Engineering", "Sales", "Unknown"}
    assert groups["Engineering"].overall_sentiment == 50
    assert cultural_map.to_dict()["patterns"][0]["category"] == "risk"


def test_build_cultural_map_empty():
    cultural_map = build_cultural_map([], [])

    assert cultural_map.patterns == []
    assert cultural_map.group_profiles == []
    assert cultural_map.cultural_evolution.trend == "stable"
