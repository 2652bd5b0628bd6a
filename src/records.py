"""Input records consumed by the insight pipeline.

A *response* is one employee answer inside an AI-guided conversation; a
*session* is the conversation itself.  Both are immutable for the pipeline:
they are produced by the record store (or the loaders below) and only ever
read by the analysis modules.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from src.analysis.normalize import normalize_sentiment
from src.exceptions import InvalidRecordError


class SentimentLabel(str, Enum):
    """Enumeration of supported sentiment classes."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class SessionStatus(str, Enum):
    """Lifecycle state of a conversation session."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class Response:
    """A single employee response within a conversation session."""

    id: str
    content: str
    session_id: str
    created_at: datetime.datetime
    ai_follow_up: Optional[str] = None
    sentiment_label: Optional[SentimentLabel] = None
    # raw score, 0–1 or 0–100 depending on where the record came from
    sentiment_score: Optional[float] = None
    theme_id: Optional[str] = None
    theme_name: Optional[str] = None

    @property
    def normalized_sentiment(self) -> Optional[float]:
        """Return the score on the 0–100 scale, or *None* if unscored."""
        if self.sentiment_score is None:
            return None
        return normalize_sentiment(self.sentiment_score)

    @property
    def has_follow_up(self) -> bool:
        return self.ai_follow_up is not None


@dataclass(frozen=True)
class Session:
    """A conversation session (one employee, one survey run)."""

    id: str
    survey_id: str
    started_at: datetime.datetime
    status: SessionStatus = SessionStatus.ACTIVE
    employee_ref: Optional[str] = None
    initial_mood: Optional[float] = None
    final_mood: Optional[float] = None
    ended_at: Optional[datetime.datetime] = None
    anonymization_level: str = "anonymous"
    group: Optional[str] = None


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime.datetime:
    """Parse an ISO-8601 string (or pass a datetime through) as aware UTC."""

    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def _optional_float(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be numeric")
    return float(value)


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or value == "":
        raise ValueError(f"missing {key}")
    return str(value)


def parse_response(payload: Mapping[str, Any]) -> Response:
    """Build a :class:`Response` from a plain mapping.

    Accepts the column names used by the feedback database as aliases
    (``ai_response`` for ``ai_follow_up``, ``sentiment`` for
    ``sentiment_label`` and ``conversation_session_id`` for ``session_id``).

    Raises
    ------
    InvalidRecordError
        If a required field is missing or a field has the wrong type.
    """

    try:
        session_id = payload.get("session_id") or payload.get(
            "conversation_session_id"
        )
        if not session_id:
            raise ValueError("missing session_id")

        label_raw = payload.get("sentiment_label", payload.get("sentiment"))
        label = SentimentLabel(label_raw) if label_raw is not None else None

        follow_up = payload.get("ai_follow_up", payload.get("ai_response"))

        return Response(
            id=_required_str(payload, "id"),
            content=str(payload.get("content") or ""),
            session_id=str(session_id),
            created_at=parse_timestamp(payload.get("created_at")),
            ai_follow_up=follow_up if follow_up else None,
            sentiment_label=label,
            sentiment_score=_optional_float(payload, "sentiment_score"),
            theme_id=payload.get("theme_id"),
            theme_name=payload.get("theme_name"),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError("response", str(exc)) from exc


def parse_session(payload: Mapping[str, Any]) -> Session:
    """Build a :class:`Session` from a plain mapping.

    ``employee_id`` and ``department`` are accepted as aliases for
    ``employee_ref`` and ``group``.
    """

    try:
        ended_raw = payload.get("ended_at")
        return Session(
            id=_required_str(payload, "id"),
            survey_id=_required_str(payload, "survey_id"),
            started_at=parse_timestamp(payload.get("started_at")),
            status=SessionStatus(payload.get("status", "active")),
            employee_ref=payload.get("employee_ref", payload.get("employee_id")),
            initial_mood=_optional_float(payload, "initial_mood"),
            final_mood=_optional_float(payload, "final_mood"),
            ended_at=parse_timestamp(ended_raw) if ended_raw else None,
            anonymization_level=str(payload.get("anonymization_level") or "anonymous"),
            group=payload.get("group", payload.get("department")),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError("session", str(exc)) from exc