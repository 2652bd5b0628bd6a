"""Shared record factories for the test-suite."""
from __future__ import annotations

import datetime
import itertools

import pytest

from src.records import Response, Session, SessionStatus

BASE_TIME = datetime.datetime(2025, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture()
def make_response():
    counter = itertools.count(1)

    def _make(content="", *, session_id="s1", score=None, theme_id=None, **kwargs):
        idx = next(counter)
        kwargs.setdefault("id", f"r{idx}")
        kwargs.setdefault("created_at", BASE_TIME + datetime.timedelta(minutes=idx))
        return Response(
            content=content,
            session_id=session_id,
            sentiment_score=score,
            theme_id=theme_id,
            **kwargs,
        )

    return _make


@pytest.fixture()
def make_session():
    def _make(session_id="s1", *, survey_id="survey-1", **kwargs):
        kwargs.setdefault("started_at", BASE_TIME)
        kwargs.setdefault("status", SessionStatus.COMPLETED)
        return Session(id=session_id, survey_id=survey_id, **kwargs)

    return _make
