"""Tests for theme, sub-theme and quote extraction."""
from __future__ import annotations

import pytest

from src.analysis.actions import analyze_root_causes
from src.analysis.themes import (
    extract_quotes,
    extract_sub_themes,
    extract_theme_insights,
    sub_theme_display_name,
)

SCORES = [90, 85, 20, 15, 50, 60, 30, 40, 70, 55]


def _work_life_responses(make_response):
    responses = []
    for idx, score in enumerate(SCORES):
        if score <= 30:
            text = f"I am stressed because overtime keeps piling up ({idx})"
        else:
            text = f"Balance is mostly fine for me at the moment ({idx})"
        responses.append(
            make_response(text, session_id=f"s{idx}", score=score, theme_id="wlb")
        )
    return responses


def test_balanced_work_life_scenario(make_response, make_session):
    responses = _work_life_responses(make_response)
    sessions = [make_session(f"s{i}") for i in range(len(SCORES))]

    themes = extract_theme_insights(
        responses, sessions, theme_names={"wlb": "Work-Life Balance"}
    )

    assert len(themes) == 1
    theme = themes[0]
    assert theme.theme_name == "Work-Life Balance"
    assert theme.response_count == 10
    assert theme.avg_sentiment == pytest.approx(51.5)

    causes = analyze_root_causes(themes, responses, sessions)
    assert causes
    assert any(c.cause == "stressed" for c in causes)


def test_avg_sentiment_uses_only_matching_theme(make_response):
    responses = [
        make_response("a", score=80, theme_id="t1"),
        make_response("b", score=0.4, theme_id="t1"),
        make_response("c", score=10, theme_id="t2"),
    ]

    themes = {t.theme_id: t for t in extract_theme_insights(responses, [])}

    assert themes["t1"].avg_sentiment == pytest.approx(60)
    assert themes["t2"].avg_sentiment == pytest.approx(10)


def test_empty_inputs_yield_no_themes():
    assert extract_theme_insights([], [], None) == []


def test_theme_filter_and_first_encounter_order(make_response):
    responses = [
        make_response("x", theme_id="b"),
        make_response("y", theme_id="a"),
        make_response("z", theme_id="b"),
        make_response("no theme here"),
    ]

    assert [t.theme_id for t in extract_theme_insights(responses, [])] == ["b", "a"]
    only_a = extract_theme_insights(responses, [], "a")
    assert [t.theme_id for t in only_a] == ["a"]


def test_theme_name_falls_back_to_response_then_id(make_response):
    responses = [
        make_response("x", theme_id="t1", theme_name="Career Growth"),
        make_response("y", theme_id="t2"),
    ]

    names = [t.theme_name for t in extract_theme_insights(responses, [])]
    assert names == ["Career Growth", "t2"]


def test_unscored_theme_defaults_to_neutral(make_response):
    theme = extract_theme_insights([make_response("x", theme_id="t1")], [])[0]
    assert theme.avg_sentiment == 50


def test_quotes_capped_and_follow_up_effectiveness(make_response):
    responses = [
        make_response(
            f"This is a long enough response number {i}",
            theme_id="t1",
            ai_follow_up="Tell me more?" if i % 2 == 0 else None,
        )
        for i in range(12)
    ]

    theme = extract_theme_insights(responses, [])[0]

    assert len(theme.quotes) == 10
    assert theme.follow_up_effectiveness == pytest.approx(0.5)


def test_drivers_capped_at_five(make_response):
    text = "great excellent amazing wonderful supportive helpful appreciate"
    responses = [make_response(text, score=90, theme_id="t1")]

    theme = extract_theme_insights(responses, [])[0]
    assert len(theme.sentiment_drivers) == 5


def test_extract_quotes_requires_more_than_twenty_chars(make_response, make_session):
    responses = [
        make_response("short", session_id="s1"),
        make_response("  exactly twenty chars  ", session_id="s1"),
        make_response("this one is definitely quotable", session_id="s1"),
    ]
    quotes = extract_quotes(responses, [make_session("s1", group="Engineering")])

    assert [q.text for q in quotes] == ["this one is definitely quotable"]
    assert quotes[0].group == "Engineering"


def test_sub_themes_overlap_and_cap_quotes(make_response):
    responses = [
        make_response("My manager never offers support", score=20, theme_id="t1"),
        make_response("Team support is solid", score=80, theme_id="t1"),
        make_response("support " * 40, score=50, theme_id="t1"),
        make_response("overtime again", score=30, theme_id="other"),
    ]

    sub_themes = {s.name: s for s in extract_sub_themes(responses, "t1")}

    # "support" is a keyword of both team-collaboration and leadership
    assert sub_themes["Team Collaboration"].frequency == 3
    assert sub_themes["Leadership"].frequency == 3
    assert len(sub_themes["Leadership"].representative_quotes) == 2
    assert sub_themes["Leadership"].avg_sentiment == pytest.approx(50)
    assert "Work Life Balance" not in sub_themes


def test_sub_theme_display_name():
    assert sub_theme_display_name("work-life-balance") == "Work Life Balance"
    assert sub_theme_display_name("company_culture") == "Company Culture"
