"""Tests for record parsing."""
from __future__ import annotations

import datetime

import pytest

from src.exceptions import InvalidRecordError
from src.records import (
    SentimentLabel,
    SessionStatus,
    parse_response,
    parse_session,
    parse_timestamp,
)


def test_parse_timestamp_handles_z_and_naive():
    utc = datetime.timezone.utc
    assert parse_timestamp("2025-03-01T10:00:00Z") == datetime.datetime(2025, 3, 1, 10, tzinfo=utc)
    assert parse_timestamp("2025-03-01").tzinfo is utc


def test_parse_response_accepts_database_aliases():
    response = parse_response(
        {
            "id": "r1",
            "content": "Too many meetings",
            "ai_response": "What would help?",
            "sentiment": "negative",
            "sentiment_score": 0.2,
            "theme_id": "t1",
            "created_at": "2025-03-01T10:00:00Z",
            "conversation_session_id": "s1",
        }
    )

    assert response.session_id == "s1"
    assert response.ai_follow_up == "What would help?"
    assert response.sentiment_label is SentimentLabel.NEGATIVE
    assert response.normalized_sentiment == pytest.approx(20)
    assert response.has_follow_up


def test_parse_response_without_score():
    response = parse_response(
        {"id": "r1", "session_id": "s1", "created_at": "2025-03-01T10:00:00Z"}
    )

    assert response.content == ""
    assert response.normalized_sentiment is None
    assert not response.has_follow_up


@pytest.mark.parametrize(
    "payload",
    [
        {"session_id": "s1", "created_at": "2025-03-01"},
        {"id": "r1", "created_at": "2025-03-01"},
        {"id": "r1", "session_id": "s1", "created_at": "yesterday"},
        {"id": "r1", "session_id": "s1", "created_at": "2025-03-01", "sentiment": "meh"},
        {"id": "r1", "session_id": "s1", "created_at": "2025-03-01", "sentiment_score": "high"},
    ],
)
def test_parse_response_rejects_bad_records(payload):
    with pytest.raises(InvalidRecordError) as exc_info:
        parse_response(payload)
    assert exc_info.value.kind == "response"
    assert isinstance(exc_info.value, ValueError)


def test_parse_session_aliases_and_defaults():
    session = parse_session(
        {
            "id": "s1",
            "survey_id": "survey-1",
            "started_at": "2025-03-01T09:00:00Z",
            "ended_at": "2025-03-01T09:20:00Z",
            "status": "completed",
            "employee_id": "emp-7",
            "department": "Engineering",
            "initial_mood": 40,
        }
    )

    assert session.status is SessionStatus.COMPLETED
    assert session.employee_ref == "emp-7"
    assert session.group == "Engineering"
    assert session.final_mood is None
    assert session.anonymization_level == "anonymous"


def test_parse_session_rejects_unknown_status():
    with pytest.raises(InvalidRecordError, match="Invalid session record"):
        parse_session(
            {"id": "s1", "survey_id": "x", "started_at": "2025-03-01", "status": "paused"}
        )
