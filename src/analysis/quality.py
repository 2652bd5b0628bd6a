"""Conversation quality and analytics-confidence scoring.

Analytics are only as trustworthy as the conversations behind them.  Each
session gets depth, engagement and content scores that roll up into an
``overall_quality_score`` and a ``confidence_score``; the aggregate view and
``generate_quality_insights`` turn those into findings for HR.

All component scores are clamped to [0, 100] before they are combined.
Reported scores are rounded half-up to integers; the confidence level is
derived from the unrounded score.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from src import constants
from src.analysis.normalize import (
    clamp,
    duration_minutes,
    round_half_up,
    scored_sentiments,
    std_dev,
)
from src.records import Response, Session, SessionStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QualityMetrics:
    """Quality metrics for one conversation session."""

    session_id: str
    survey_id: str

    total_exchanges: int
    duration_minutes: float
    completion_status: str

    average_response_length: float
    longest_response_length: int
    shortest_response_length: int
    follow_up_count: int
    themes_explored: int

    response_rate: float
    elaboration_score: float
    openness_score: float

    has_initial_mood: bool
    has_final_mood: bool
    mood_improvement: float
    sentiment_consistency: float

    follow_up_effectiveness: float
    ai_question_quality: float

    meaningful_responses: int
    generic_responses: int
    content_richness: float

    overall_quality_score: float
    confidence_score: float
    confidence_level: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ConfidenceFactors:
    high_depth_sessions: int = 0
    high_engagement_sessions: int = 0
    completed_sessions: int = 0
    mood_tracked_sessions: int = 0


@dataclass(slots=True)
class AggregateQualityMetrics:
    total_sessions: int = 0
    completed_sessions: int = 0
    average_quality_score: float = 0
    average_confidence_score: float = 0

    high_confidence_count: int = 0
    medium_confidence_count: int = 0
    low_confidence_count: int = 0

    excellent_quality: int = 0
    good_quality: int = 0
    fair_quality: int = 0
    poor_quality: int = 0

    average_exchanges: float = 0
    average_duration: float = 0
    average_themes_explored: float = 0
    average_follow_up_effectiveness: float = 0

    confidence_factors: ConfidenceFactors = field(default_factory=ConfidenceFactors)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class QualityInsight:
    type: str  # strength | concern | recommendation
    title: str
    description: str
    impact: str  # high | medium | low
    affected_sessions: int
    recommendation: Optional[str] = None


def confidence_level_for(score: float) -> str:
    """Map a confidence score to ``high`` (≥75), ``medium`` (≥50) or ``low``."""

    if score >= constants.CONFIDENCE_HIGH:
        return "high"
    if score >= constants.CONFIDENCE_MEDIUM:
        return "medium"
    return "low"


def quality_band(score: float) -> str:
    if score >= constants.QUALITY_EXCELLENT:
        return "excellent"
    if score >= constants.QUALITY_GOOD:
        return "good"
    if score >= constants.QUALITY_FAIR:
        return "fair"
    return "poor"


def _follow_up_effectiveness(ordered: Sequence[Response]) -> float:
    """Compare answers given right after an AI follow-up with the others.

    A response counts as "after a follow-up" when the previous response in
    the session carries one.
    """

    after, baseline = [], []
    for idx, response in enumerate(ordered):
        if idx > 0 and ordered[idx - 1].has_follow_up:
            after.append(len(response.content))
        else:
            baseline.append(len(response.content))

    avg_after = sum(after) / len(after) if after else 0.0
    avg_baseline = sum(baseline) / len(baseline) if baseline else 0.0

    if avg_baseline > 0:
        return min(100.0, avg_after / avg_baseline * 100)
    if avg_after > constants.FOLLOW_UP_FALLBACK_LENGTH:
        return constants.FOLLOW_UP_FALLBACK_HIGH
    return constants.FOLLOW_UP_FALLBACK_LOW


def calculate_session_quality(
    session: Session, responses: Sequence[Response]
) -> QualityMetrics:
    """Score one session using the responses that belong to it.

    *responses* may contain other sessions' responses; they are filtered out.
    Order is taken from the input (the record store returns responses
    oldest first).
    """

    own = [r for r in responses if r.session_id == session.id]
    total = len(own)

    minutes = duration_minutes(session.started_at, session.ended_at)

    lengths = [len(r.content) for r in own if len(r.content) > 0]
    avg_length = sum(lengths) / len(lengths) if lengths else 0.0
    longest = max(lengths, default=0)
    shortest = min(lengths, default=0)

    follow_up_count = sum(1 for r in own if r.has_follow_up)
    themes_explored = len({r.theme_id for r in own if r.theme_id})

    expected = themes_explored * 2 + 2
    response_rate = clamp(total / expected * 100)

    elaboration = clamp(avg_length / constants.ELABORATION_FULL_LENGTH * 100)

    sentiments = scored_sentiments(own)
    spread = std_dev(sentiments)
    openness = clamp(spread * 2 + elaboration * 0.5)

    has_initial = session.initial_mood is not None
    has_final = session.final_mood is not None
    mood_improvement = (
        session.final_mood - session.initial_mood if has_initial and has_final else 0
    )
    consistency = (
        clamp(100 - spread * 10) if len(sentiments) > 1 else constants.NEUTRAL_SENTIMENT
    )

    follow_up = clamp(_follow_up_effectiveness(own))

    meaningful = sum(
        1 for r in own if len(r.content) >= constants.MEANINGFUL_RESPONSE_LENGTH
    )
    generic = total - meaningful
    richness = clamp(meaningful / total * 100) if total else 0.0

    depth_points = min(20.0, themes_explored / constants.DEPTH_FULL_THEMES * 20)
    mood_points = constants.MOOD_TRACKING_BONUS if has_initial and has_final else 0.0
    overall = min(
        100.0,
        depth_points
        + response_rate / 100 * 20
        + elaboration / 100 * 20
        + follow_up / 100 * 15
        + richness / 100 * 15
        + mood_points,
    )

    depth_confidence = (
        20.0 if themes_explored >= constants.HIGH_DEPTH_THEMES else themes_explored * 6.67
    )
    engagement_confidence = min(
        20.0, total / constants.ENGAGEMENT_FULL_EXCHANGES * 20
    )
    completion_confidence = 20.0 if session.status == SessionStatus.COMPLETED else 0.0
    confidence = min(
        100.0,
        overall * 0.4 + completion_confidence + depth_confidence + engagement_confidence,
    )

    return QualityMetrics(
        session_id=session.id,
        survey_id=session.survey_id,
        total_exchanges=total,
        duration_minutes=round_half_up(minutes),
        completion_status=SessionStatus(session.status).value,
        average_response_length=round_half_up(avg_length),
        longest_response_length=longest,
        shortest_response_length=shortest,
        follow_up_count=follow_up_count,
        themes_explored=themes_explored,
        response_rate=round_half_up(response_rate),
        elaboration_score=round_half_up(elaboration),
        openness_score=round_half_up(openness),
        has_initial_mood=has_initial,
        has_final_mood=has_final,
        mood_improvement=mood_improvement,
        sentiment_consistency=round_half_up(consistency),
        follow_up_effectiveness=round_half_up(follow_up),
        ai_question_quality=round_half_up(follow_up),
        meaningful_responses=meaningful,
        generic_responses=generic,
        content_richness=round_half_up(richness),
        overall_quality_score=round_half_up(overall),
        confidence_score=round_half_up(confidence),
        confidence_level=confidence_level_for(confidence),
    )


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_quality(metrics: Sequence[QualityMetrics]) -> AggregateQualityMetrics:
    """Roll per-session metrics up into :class:`AggregateQualityMetrics`."""

    if not metrics:
        return AggregateQualityMetrics()

    completed = sum(1 for m in metrics if m.completion_status == "completed")
    levels = [m.confidence_level for m in metrics]
    bands = [quality_band(m.overall_quality_score) for m in metrics]

    return AggregateQualityMetrics(
        total_sessions=len(metrics),
        completed_sessions=completed,
        average_quality_score=round_half_up(
            _mean([m.overall_quality_score for m in metrics])
        ),
        average_confidence_score=round_half_up(
            _mean([m.confidence_score for m in metrics])
        ),
        high_confidence_count=levels.count("high"),
        medium_confidence_count=levels.count("medium"),
        low_confidence_count=levels.count("low"),
        excellent_quality=bands.count("excellent"),
        good_quality=bands.count("good"),
        fair_quality=bands.count("fair"),
        poor_quality=bands.count("poor"),
        average_exchanges=round_half_up(_mean([m.total_exchanges for m in metrics]), 1),
        average_duration=round_half_up(_mean([m.duration_minutes for m in metrics]), 1),
        average_themes_explored=round_half_up(
            _mean([m.themes_explored for m in metrics]), 1
        ),
        average_follow_up_effectiveness=round_half_up(
            _mean([m.follow_up_effectiveness for m in metrics])
        ),
        confidence_factors=ConfidenceFactors(
            high_depth_sessions=sum(
                1 for m in metrics if m.themes_explored >= constants.HIGH_DEPTH_THEMES
            ),
            high_engagement_sessions=sum(
                1
                for m in metrics
                if m.total_exchanges >= constants.HIGH_ENGAGEMENT_EXCHANGES
            ),
            completed_sessions=completed,
            mood_tracked_sessions=sum(
                1 for m in metrics if m.has_initial_mood and m.has_final_mood
            ),
        ),
    )


def calculate_aggregate_quality(
    sessions: Sequence[Session], responses: Sequence[Response]
) -> AggregateQualityMetrics:
    """Score every session and aggregate; zero sessions give an all-zero result."""

    metrics = [calculate_session_quality(s, responses) for s in sessions]
    aggregate = summarize_quality(metrics)
    logger.debug(
        "Aggregate quality over %d sessions: quality=%s confidence=%s",
        aggregate.total_sessions,
        aggregate.average_quality_score,
        aggregate.average_confidence_score,
    )
    return aggregate


def generate_quality_insights(
    aggregate: AggregateQualityMetrics,
    session_metrics: Sequence[QualityMetrics] = (),
) -> List[QualityInsight]:
    """Turn aggregate quality numbers into strengths and concerns.

    The thresholds are fixed product rules (see :mod:`src.constants`).
    *session_metrics* is not read; all rules use the aggregate.
    """

    total = aggregate.total_sessions
    if total == 0:
        return []

    insights: List[QualityInsight] = []

    low_share = aggregate.low_confidence_count / total * 100
    if low_share > constants.LOW_CONFIDENCE_SHARE_CONCERN:
        insights.append(
            QualityInsight(
                type="concern",
                title="Low Confidence in Analytics",
                description=(
                    f"{round_half_up(low_share)}% of conversations have low confidence "
                    "scores. Analytics may not be reliable."
                ),
                impact="high",
                affected_sessions=aggregate.low_confidence_count,
                recommendation=(
                    "Focus on improving conversation quality: encourage longer "
                    "responses, ensure completion, explore more themes."
                ),
            )
        )
    elif aggregate.average_confidence_score >= constants.AVG_CONFIDENCE_STRENGTH:
        insights.append(
            QualityInsight(
                type="strength",
                title="High Confidence Analytics",
                description=(
                    f"Average confidence score of {aggregate.average_confidence_score}/100 "
                    "indicates reliable analytics."
                ),
                impact="high",
                affected_sessions=total,
            )
        )

    completion_rate = aggregate.completed_sessions / total * 100
    if completion_rate < constants.COMPLETION_RATE_CONCERN:
        insights.append(
            QualityInsight(
                type="concern",
                title="Low Completion Rate",
                description=(
                    f"Only {round_half_up(completion_rate)}% of conversations were "
                    "completed. This reduces data quality."
                ),
                impact="medium",
                affected_sessions=total - aggregate.completed_sessions,
                recommendation=(
                    "Consider shorter conversations, better engagement strategies, "
                    "or reminder systems."
                ),
            )
        )

    if aggregate.average_themes_explored < constants.THEMES_EXPLORED_CONCERN:
        insights.append(
            QualityInsight(
                type="concern",
                title="Shallow Conversations",
                description=(
                    f"Average of {aggregate.average_themes_explored:.1f} themes explored "
                    "per conversation. Deeper exploration provides better insights."
                ),
                impact="medium",
                affected_sessions=total,
                recommendation="Improve AI follow-up questions to explore more themes naturally.",
            )
        )

    follow_up = aggregate.average_follow_up_effectiveness
    if follow_up < constants.FOLLOW_UP_CONCERN:
        insights.append(
            QualityInsight(
                type="concern",
                title="Follow-up Questions Need Improvement",
                description=(
                    f"Follow-up effectiveness of {follow_up}% suggests questions "
                    "aren't uncovering deeper insights."
                ),
                impact="medium",
                affected_sessions=total,
                recommendation=(
                    "Review and improve AI follow-up question prompts to encourage "
                    "elaboration."
                ),
            )
        )
    elif follow_up >= constants.FOLLOW_UP_STRENGTH:
        insights.append(
            QualityInsight(
                type="strength",
                title="Excellent Follow-up Effectiveness",
                description=(
                    f"Follow-up questions are highly effective ({follow_up}%), "
                    "uncovering deep insights."
                ),
                impact="medium",
                affected_sessions=total,
            )
        )

    poor_share = aggregate.poor_quality / total * 100
    if poor_share > constants.POOR_QUALITY_SHARE_CONCERN:
        insights.append(
            QualityInsight(
                type="concern",
                title="Many Low-Quality Conversations",
                description=(
                    f"{round_half_up(poor_share)}% of conversations have poor quality scores."
                ),
                impact="high",
                affected_sessions=aggregate.poor_quality,
                recommendation=(
                    "Focus on improving conversation engagement, response length, "
                    "and completion rates."
                ),
            )
        )

    return insights
