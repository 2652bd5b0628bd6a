"""Human-readable overview and key findings built from the analysis output."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from src import constants
from src.analysis.normalize import normalize_sentiment
from src.analysis.themes import ThemeInsight
from src.records import Response, SentimentLabel, Session

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NarrativeSummary:
    overview: str
    key_insights: List[str] = field(default_factory=list)
    top_concerns: List[str] = field(default_factory=list)
    positive_aspects: List[str] = field(default_factory=list)
    recommended_actions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _satisfaction_word(avg: float) -> str:
    if avg >= constants.POSITIVE_THEME_SENTIMENT:
        return "strong"
    if avg >= constants.CONCERN_THEME_SENTIMENT:
        return "moderate"
    return "low"


def generate_narrative_summary(
    responses: Sequence[Response],
    sessions: Sequence[Session],
    themes: Sequence[ThemeInsight],
) -> NarrativeSummary:
    """Compose the overview paragraph and bullet lists for a survey.

    Every response counts towards the overall average; a missing score reads
    as neutral.  Empty inputs produce zero averages rather than errors.
    """

    total_responses = len(responses)
    total_sessions = len(sessions)
    positive = sum(1 for r in responses if r.sentiment_label == SentimentLabel.POSITIVE)
    negative = sum(1 for r in responses if r.sentiment_label == SentimentLabel.NEGATIVE)

    avg_sentiment = (
        sum(normalize_sentiment(r.sentiment_score) for r in responses) / total_responses
        if total_responses
        else 0.0
    )

    concerns = sorted(
        (t for t in themes if t.avg_sentiment < constants.CONCERN_THEME_SENTIMENT),
        key=lambda t: t.avg_sentiment,
    )[:3]
    highlights = sorted(
        (t for t in themes if t.avg_sentiment > constants.POSITIVE_THEME_SENTIMENT),
        key=lambda t: t.avg_sentiment,
        reverse=True,
    )[:3]

    if positive > negative:
        balance = "Positive feedback outweighs concerns"
    else:
        balance = "Concerns outweigh positive feedback"
    overview = (
        f"Based on {total_sessions} employee conversations with {total_responses} "
        f"total responses, employees show {_satisfaction_word(avg_sentiment)} overall "
        f"satisfaction ({avg_sentiment:.1f}/100). {balance} "
        f"({positive} positive vs {negative} negative responses)."
    )

    depth = total_responses / total_sessions if total_sessions else 0.0
    strong_follow_ups = sum(
        1
        for t in themes
        if t.follow_up_effectiveness > constants.STRONG_FOLLOW_UP_RATIO
    )
    if concerns:
        top = concerns[0]
        headline = f"Top concern: {top.theme_name} ({top.avg_sentiment:.1f}/100)"
    else:
        headline = "No major concerns identified"
    key_insights = [
        headline,
        f"Average conversation depth: {depth:.1f} exchanges per session",
        f"{strong_follow_ups} themes showed strong follow-up question effectiveness",
    ]

    mean_follow_up = (
        sum(t.follow_up_effectiveness for t in themes) / len(themes) if themes else 0.0
    )
    recommended_actions = [
        f"Address {concerns[0].theme_name} concerns through targeted initiatives"
        if concerns
        else "Maintain current positive trends",
        "Leverage insights from "
        f"{highlights[0].theme_name if highlights else 'successful areas'} "
        "to improve other areas",
        "Continue conversational approach - "
        + (
            "effective"
            if mean_follow_up > constants.STRONG_FOLLOW_UP_RATIO
            else "could be improved"
        )
        + " follow-up questions",
    ]

    summary = NarrativeSummary(
        overview=overview,
        key_insights=key_insights,
        top_concerns=[
            f"{t.theme_name}: {t.response_count} mentions, "
            f"{len(t.sentiment_drivers)} key concerns identified"
            for t in concerns
        ],
        positive_aspects=[
            f"{t.theme_name}: {t.response_count} positive mentions" for t in highlights
        ],
        recommended_actions=recommended_actions,
    )
    logger.debug(
        "Narrative built: %d concerns, %d positive themes", len(concerns), len(highlights)
    )
    return summary
