"""Sentiment normalization and small numeric primitives.

Responses are stored with sentiment on either a 0–1 scale (live analysis) or
a 0–100 scale (seeded/demo data).  ``normalize_sentiment`` is the single rule
every analysis module uses to read a score; nothing else in the codebase
should multiply or divide a raw ``sentiment_score``.
"""
from __future__ import annotations

import datetime
import math
from typing import TYPE_CHECKING, Iterable, List, Optional

from src import constants

if TYPE_CHECKING:  # pragma: no cover
    from src.records import Response


def normalize_sentiment(raw: Optional[float]) -> float:
    """Return *raw* on the canonical 0–100 scale.

    ``None`` maps to neutral (50); values ``<= 1`` are treated as the 0–1
    scale and multiplied by 100; anything else passes through.  The result is
    clamped to [0, 100].
    """

    if raw is None:
        return constants.NEUTRAL_SENTIMENT
    value = float(raw)
    if value <= constants.UNIT_SCALE_CEILING:
        value *= 100
    return clamp(value, constants.SENTIMENT_MIN, constants.SENTIMENT_MAX)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a dashboard does (0.5 always rounds up), not banker's rounding."""

    factor = 10**ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if ndigits == 0 else rounded


def scored_sentiments(responses: Iterable["Response"]) -> List[float]:
    """Normalized scores of *responses* that carry a score."""
    return [
        r.normalized_sentiment for r in responses if r.normalized_sentiment is not None
    ]


def mean_sentiment(
    responses: Iterable["Response"],
    default: float = constants.NEUTRAL_SENTIMENT,
) -> float:
    """Mean normalized sentiment of the scored *responses*, or *default*."""

    scores = scored_sentiments(responses)
    if not scores:
        return default
    return sum(scores) / len(scores)


def std_dev(values: List[float]) -> float:
    """Population standard deviation; 0 for fewer than two samples."""

    if len(values) < 2:
        return 0.0
    avg = sum(values) / len(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


def duration_minutes(
    started_at: Optional[datetime.datetime],
    ended_at: Optional[datetime.datetime],
) -> float:
    """Minutes between two timestamps; the default (0) if either is missing."""

    if started_at is None or ended_at is None:
        return constants.DEFAULT_DURATION_MINUTES
    minutes = (ended_at - started_at).total_seconds() / 60
    return max(0.0, minutes)


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test of *text* against *keywords*."""

    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def matching_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    lowered = text.lower()
    return [keyword for keyword in keywords if keyword.lower() in lowered]


def slugify(label: str) -> str:
    """``"Meeting Overload"`` → ``"meeting-overload"``."""
    return "-".join(label.lower().split())
