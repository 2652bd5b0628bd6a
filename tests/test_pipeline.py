"""End-to-end tests for the analytics pipeline."""
from __future__ import annotations

import datetime
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.analysis.normalize import normalize_sentiment
from src.pipeline import PipelineResult, run_pipeline
from src.records import SentimentLabel, SessionStatus


@pytest.fixture()
def dataset(make_response, make_session):
    start = datetime.datetime(2025, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)
    sessions = [
        make_session(
            f"s{i}",
            group="Engineering" if i % 2 else "Sales",
            started_at=start,
            ended_at=start + datetime.timedelta(minutes=20),
            initial_mood=40,
            final_mood=60,
        )
        for i in range(4)
    ]
    texts = [
        ("I am stressed, overtime every weekend is draining", 0.2, "wlb"),
        ("Too many meetings and the overtime never stops", 25, "wlb"),
        ("I love my team, everyone is supportive and helpful", 0.9, "team"),
        ("Burnout is real, exhausted after every release", 15, "wlb"),
    ]
    responses = []
    for session in sessions:
        for text, score, theme in texts:
            responses.append(
                make_response(
                    text,
                    session_id=session.id,
                    score=score,
                    theme_id=theme,
                    sentiment_label=SentimentLabel.NEGATIVE
                    if normalize_sentiment(score) < 50
                    else SentimentLabel.POSITIVE,
                    ai_follow_up="Can you say more?",
                )
            )
    return responses, sessions


NAMES = {"wlb": "Work-Life Balance", "team": "Team Collaboration"}


def test_empty_inputs_give_empty_result(make_session):
    result = run_pipeline([], [make_session()])

    assert isinstance(result, PipelineResult)
    assert result.is_empty
    assert result.themes == []
    assert result.quality_metrics is None
    assert result.nlp_analysis is None
    assert result.cultural_map is None


def test_full_run(dataset):
    responses, sessions = dataset

    result = run_pipeline(responses, sessions, NAMES)

    themes = {t.theme_id: t for t in result.themes}
    assert themes["wlb"].theme_name == "Work-Life Balance"
    assert themes["wlb"].avg_sentiment == pytest.approx(20)
    assert themes["team"].avg_sentiment == pytest.approx(90)

    assert result.root_causes
    assert all(c.theme_id == "wlb" for c in result.root_causes)
    assert [i.id for i in result.interventions] == ["wlb-wl-2"]
    assert all(p.predicted_sentiment <= 100 for p in result.impact_predictions)
    assert {w.id for w in result.quick_wins} == {"wlb-wl-2"}

    assert result.quality_metrics.total_sessions == 4
    assert len(result.session_quality) == 4
    assert result.nlp_analysis.topics
    assert result.cultural_map.cultural_risks[0].risk_name == "Burnout Culture"
    assert result.narrative.top_concerns[0].startswith("Work-Life Balance")


def test_same_result_with_executor(dataset):
    responses, sessions = dataset

    sequential = run_pipeline(responses, sessions, NAMES)
    with ThreadPoolExecutor(max_workers=3) as executor:
        parallel = run_pipeline(responses, sessions, NAMES, executor)

    assert parallel.to_dict() == sequential.to_dict()


def test_pipeline_does_not_mutate_inputs(dataset):
    responses, sessions = dataset
    before = [(r.id, r.content, r.sentiment_score) for r in responses]

    run_pipeline(responses, sessions)

    assert [(r.id, r.content, r.sentiment_score) for r in responses] == before
    assert all(s.status is SessionStatus.COMPLETED for s in sessions)
