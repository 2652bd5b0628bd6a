"""Theme and sub-theme extraction from conversation responses."""
from __future__ import annotations

import datetime
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from src import constants
from src.analysis import lexicon
from src.analysis.normalize import contains_any, mean_sentiment
from src.analysis.sentiment import SentimentDriver, identify_sentiment_drivers
from src.records import Response, SentimentLabel, Session

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Quote:
    """A quotable response together with where it came from."""

    id: str
    text: str
    session_id: str
    created_at: datetime.datetime
    sentiment: Optional[SentimentLabel] = None
    sentiment_score: Optional[float] = None
    theme_id: Optional[str] = None
    theme_name: Optional[str] = None
    group: Optional[str] = None


@dataclass(slots=True)
class SubTheme:
    name: str
    frequency: int
    avg_sentiment: float
    representative_quotes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ThemeInsight:
    """Aggregated view of every response filed under one theme."""

    theme_id: str
    theme_name: str
    response_count: int
    avg_sentiment: float  # 0–100
    quotes: List[Quote] = field(default_factory=list)
    sub_themes: List[SubTheme] = field(default_factory=list)
    sentiment_drivers: List[SentimentDriver] = field(default_factory=list)
    follow_up_effectiveness: float = 0.0  # 0–1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def is_quotable(response: Response) -> bool:
    return len(response.content.strip()) > constants.QUOTE_MIN_LENGTH


def extract_quotes(
    responses: Sequence[Response], sessions: Sequence[Session]
) -> List[Quote]:
    """Return quotable responses (more than 20 characters) in encounter order."""

    groups = {s.id: s.group for s in sessions}
    return [
        Quote(
            id=r.id,
            text=r.content,
            session_id=r.session_id,
            created_at=r.created_at,
            sentiment=r.sentiment_label,
            sentiment_score=r.sentiment_score,
            theme_id=r.theme_id,
            theme_name=r.theme_name,
            group=groups.get(r.session_id),
        )
        for r in responses
        if is_quotable(r)
    ]


def sub_theme_display_name(key: str) -> str:
    """``"work-life-balance"`` → ``"Work Life Balance"``."""
    return " ".join(part.capitalize() for part in key.replace("_", "-").split("-") if part)


def extract_sub_themes(
    responses: Sequence[Response],
    theme_id: str,
    *,
    keyword_table: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[SubTheme]:
    """Group a theme's responses into keyword-matched sub-themes.

    A response joins every sub-theme whose keywords it contains, so the
    groups overlap.
    """

    table = keyword_table if keyword_table is not None else lexicon.SUB_THEME_KEYWORDS
    matches: Dict[str, List[Response]] = {}

    for response in responses:
        if response.theme_id != theme_id:
            continue
        for key, keywords in table.items():
            if contains_any(response.content, keywords):
                matches.setdefault(key, []).append(response)

    sub_themes = []
    for key, matched in matches.items():
        quotes = [
            r.content
            for r in matched
            if len(r.content) < constants.SUB_THEME_QUOTE_MAX_LENGTH
        ]
        sub_themes.append(
            SubTheme(
                name=sub_theme_display_name(key),
                frequency=len(matched),
                avg_sentiment=mean_sentiment(matched),
                representative_quotes=quotes[: constants.MAX_SUB_THEME_QUOTES],
            )
        )
    return sub_themes


def _resolve_theme_name(
    theme_id: str,
    theme_responses: Sequence[Response],
    theme_names: Optional[Mapping[str, str]],
) -> str:
    if theme_names and theme_id in theme_names:
        return theme_names[theme_id]
    for response in theme_responses:
        if response.theme_name:
            return response.theme_name
    return theme_id


def extract_theme_insights(
    responses: Sequence[Response],
    sessions: Sequence[Session],
    theme_id: Optional[str] = None,
    *,
    theme_names: Optional[Mapping[str, str]] = None,
) -> List[ThemeInsight]:
    """Build one :class:`ThemeInsight` per theme present in *responses*.

    Parameters
    ----------
    responses
        All responses for the survey.  Responses without a ``theme_id`` are
        ignored.
    sessions
        Sessions the responses belong to (used to attach groups to quotes).
    theme_id
        Restrict the output to this single theme.
    theme_names
        Optional ``theme_id → display name`` mapping.

    Themes appear in the order their first response is encountered; a theme
    with no responses is never emitted.
    """

    by_theme: Dict[str, List[Response]] = {}
    for response in responses:
        if response.theme_id is None:
            continue
        if theme_id is not None and response.theme_id != theme_id:
            continue
        by_theme.setdefault(response.theme_id, []).append(response)

    quotes = extract_quotes(responses, sessions)
    insights: List[ThemeInsight] = []

    for tid, theme_responses in by_theme.items():
        name = _resolve_theme_name(tid, theme_responses, theme_names)
        theme_quotes = [q for q in quotes if q.theme_id == tid]
        for quote in theme_quotes:
            quote.theme_name = name
        follow_ups = sum(1 for r in theme_responses if r.has_follow_up)

        insights.append(
            ThemeInsight(
                theme_id=tid,
                theme_name=name,
                response_count=len(theme_responses),
                avg_sentiment=mean_sentiment(theme_responses),
                quotes=theme_quotes[: constants.MAX_THEME_QUOTES],
                sub_themes=extract_sub_themes(theme_responses, tid),
                sentiment_drivers=identify_sentiment_drivers(theme_responses)[
                    : constants.MAX_THEME_DRIVERS
                ],
                follow_up_effectiveness=follow_ups / len(theme_responses),
            )
        )

    logger.debug(
        "Extracted %d theme insights from %d responses", len(insights), len(responses)
    )
    return insights
