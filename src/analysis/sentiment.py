"""Sentiment-driver detection.

A *driver* is a phrase whose presence in responses goes together with
sentiment away from neutral.  ``identify_sentiment_drivers`` scans the
positive and negative phrase lists from :mod:`src.analysis.lexicon` and
reports each phrase's signed deviation from 50.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src import constants
from src.analysis import lexicon
from src.analysis.normalize import normalize_sentiment
from src.records import Response

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SentimentDriver:
    """A phrase and how far sentiment around it sits from neutral."""

    phrase: str
    frequency: int
    sentiment_impact: float  # signed, mean sentiment − 50
    context: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class _DriverTally:
    count: int = 0
    sentiment_sum: float = 0.0
    contexts: List[str] = field(default_factory=list)


def identify_sentiment_drivers(
    responses: Iterable[Response],
    *,
    phrases: Optional[Sequence[str]] = None,
    limit: int = constants.MAX_SENTIMENT_DRIVERS,
) -> List[SentimentDriver]:
    """Return the phrases that most move sentiment, strongest first.

    Parameters
    ----------
    responses
        Responses to scan; phrase matching is a case-insensitive substring test
        against ``content``.
    phrases
        Phrase list to scan (default: positive then negative driver phrases).
    limit
        Maximum number of drivers returned (default 10).

    Ties in ``|sentiment_impact|`` keep the phrase declaration order.
    """

    if phrases is None:
        phrases = [*lexicon.POSITIVE_DRIVER_PHRASES, *lexicon.NEGATIVE_DRIVER_PHRASES]

    tallies: Dict[str, _DriverTally] = {phrase: _DriverTally() for phrase in phrases}

    for response in responses:
        content = response.content.lower()
        score = normalize_sentiment(response.sentiment_score)
        for phrase in phrases:
            if phrase.lower() not in content:
                continue
            tally = tallies[phrase]
            tally.count += 1
            tally.sentiment_sum += score
            if len(response.content) < constants.DRIVER_CONTEXT_MAX_LENGTH:
                tally.contexts.append(response.content)

    drivers = [
        SentimentDriver(
            phrase=phrase,
            frequency=tally.count,
            sentiment_impact=tally.sentiment_sum / tally.count
            - constants.NEUTRAL_SENTIMENT,
            context=tally.contexts[: constants.MAX_DRIVER_CONTEXTS],
        )
        for phrase, tally in tallies.items()
        if tally.count > 0
    ]
    # sorted() is stable, so equal impacts keep declaration order
    drivers = sorted(drivers, key=lambda d: abs(d.sentiment_impact), reverse=True)
    logger.debug("Detected %d sentiment drivers", len(drivers))
    return drivers[:limit]
