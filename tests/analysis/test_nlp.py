"""Tests for topic clustering, emotions, semantic patterns and emerging topics."""
from __future__ import annotations

import datetime

import pytest

from src.analysis.nlp import (
    detect_emotion,
    extract_topic_clusters,
    find_semantic_patterns,
    identify_emerging_topics,
    perform_nlp_analysis,
)

NOW = datetime.datetime(2025, 6, 30, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture()
def meeting_responses(make_response):
    return [
        make_response("Every meeting runs long and nobody takes notes", score=20),
        make_response("The meeting schedule is packed again", score=0.4),
        make_response("One more meeting before lunch", score=None),
        make_response("My salary has not changed in years", score=30),
    ]


def test_topic_clusters_by_frequency(meeting_responses):
    clusters = extract_topic_clusters(meeting_responses)

    top = clusters[0]
    assert top.label == "Meeting Overload"
    assert top.id == "meeting-overload"
    assert top.frequency == 3
    assert top.avg_sentiment == 30
    assert top.confidence == 88
    # quotes must be strictly between 30 and 200 characters
    assert top.representative_quotes == [
        "Every meeting runs long and nobody takes notes",
        "The meeting schedule is packed again",
    ]
    assert "Compensation Concerns" in {c.label for c in clusters}


def test_detect_emotion_keyword_score(make_response):
    emotion = detect_emotion(make_response("I am so frustrated and fed up"))

    assert emotion.emotion == "frustrated"
    assert emotion.confidence == 33
    assert emotion.intensity == 58
    assert "annoyed" in emotion.keywords


def test_detect_emotion_tie_keeps_first_declared(make_response):
    # "positive" is one of four keywords for both confident and optimistic
    assert detect_emotion(make_response("Feeling positive")).emotion == "confident"


def test_detect_emotion_falls_back_to_sentiment(make_response):
    satisfied = detect_emotion(make_response("nothing special", score=0.8))
    frustrated = detect_emotion(make_response("nothing special", score=25))
    neutral = detect_emotion(make_response("nothing special"))

    assert (satisfied.emotion, satisfied.confidence, satisfied.intensity) == (
        "satisfied",
        50,
        90,
    )
    assert frustrated.emotion == "frustrated"
    assert neutral.emotion == "concerned"


def test_semantic_patterns_match_variants(make_response):
    responses = [
        make_response("I'm burned out", score=20),
        make_response("Completely drained lately", score=0.3),
    ]

    patterns = {p.pattern: p for p in find_semantic_patterns(responses)}

    assert patterns["burnout"].frequency == 2
    assert patterns["burnout"].sentiment_impact == -25
    assert patterns["burnout"].contexts == ["I'm burned out", "Completely drained lately"]


def test_emerging_topics_against_history(make_response):
    old = NOW - datetime.timedelta(days=30)
    responses = [
        make_response(f"salary review {i}", created_at=old) for i in range(5)
    ] + [make_response(f"meeting number {i}", created_at=NOW) for i in range(3)]

    emerging = identify_emerging_topics(responses)

    assert [t.label for t in emerging] == ["Meeting Overload"]
    assert emerging[0].confidence == 100


def test_emerging_topics_need_three_recent_mentions(make_response):
    responses = [
        make_response("meeting again", created_at=NOW),
        make_response("another meeting", created_at=NOW),
    ]
    assert identify_emerging_topics(responses, now=NOW) == []


def test_emerging_topics_explicit_reference_time(make_response):
    responses = [make_response(f"meeting {i}", created_at=NOW) for i in range(3)]

    later = NOW + datetime.timedelta(days=60)
    assert identify_emerging_topics(responses, now=later) == []


def test_perform_nlp_analysis_empty():
    analysis = perform_nlp_analysis([])

    assert analysis.quality_score == 0
    assert analysis.topics == []
    assert analysis.emerging_topics == []


def test_perform_nlp_analysis_bounds(meeting_responses):
    analysis = perform_nlp_analysis(meeting_responses, now=NOW)

    assert len(analysis.emotions) == len(meeting_responses)
    assert 0 <= analysis.quality_score <= 100
    assert analysis.to_dict()["topics"][0]["label"] == "Meeting Overload"
