"""Keyword-based topic clustering, emotion detection and semantic patterns.

Everything here is lexicon driven (see :mod:`src.analysis.lexicon`); there is
no model inference, so results are reproducible from the inputs alone.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from src import constants
from src.analysis import lexicon
from src.analysis.normalize import (
    contains_any,
    matching_keywords,
    mean_sentiment,
    normalize_sentiment,
    round_half_up,
    slugify,
)
from src.records import Response

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TopicCluster:
    id: str
    label: str
    keywords: List[str]
    frequency: int
    avg_sentiment: float
    representative_quotes: List[str] = field(default_factory=list)
    related_clusters: List[str] = field(default_factory=list)
    confidence: float = 0.0  # 0–100


@dataclass(slots=True)
class EmotionAnalysis:
    response_id: str
    emotion: str
    confidence: float
    intensity: float  # 0–100
    keywords: List[str] = field(default_factory=list)


@dataclass(slots=True)
class SemanticPattern:
    pattern: str
    semantic_variants: List[str]
    frequency: int
    sentiment_impact: float
    contexts: List[str] = field(default_factory=list)


@dataclass(slots=True)
class NLPAnalysis:
    topics: List[TopicCluster] = field(default_factory=list)
    emotions: List[EmotionAnalysis] = field(default_factory=list)
    semantic_patterns: List[SemanticPattern] = field(default_factory=list)
    emerging_topics: List[TopicCluster] = field(default_factory=list)
    quality_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------


def _topic_confidence(frequency: int, total: int) -> float:
    volume = 30 if frequency >= 3 else frequency * 10
    return min(100.0, (frequency / total) * 50 + volume + 20)


def extract_topic_clusters(
    responses: Sequence[Response],
    *,
    topic_table: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[TopicCluster]:
    """Cluster responses under every topic whose keywords they mention.

    Clusters overlap (a response may sit in several) and are returned by
    descending frequency.
    """

    table = topic_table if topic_table is not None else lexicon.TOPIC_KEYWORDS
    members: Dict[str, List[Response]] = {}

    for response in responses:
        for label, keywords in table.items():
            if contains_any(response.content, keywords):
                members.setdefault(label, []).append(response)

    clusters = []
    for label, matched in members.items():
        quotes = [
            r.content
            for r in matched
            if constants.TOPIC_QUOTE_MIN_LENGTH
            < len(r.content)
            < constants.TOPIC_QUOTE_MAX_LENGTH
        ]
        clusters.append(
            TopicCluster(
                id=slugify(label),
                label=label,
                keywords=list(table[label]),
                frequency=len(matched),
                avg_sentiment=round_half_up(mean_sentiment(matched)),
                representative_quotes=quotes[: constants.MAX_TOPIC_QUOTES],
                confidence=round_half_up(
                    _topic_confidence(len(matched), len(responses))
                ),
            )
        )

    clusters.sort(key=lambda c: c.frequency, reverse=True)
    return clusters


# ---------------------------------------------------------------------------
# Emotions
# ---------------------------------------------------------------------------


def _fallback_emotion(sentiment: float) -> str:
    if sentiment >= constants.EMOTION_SATISFIED_FLOOR:
        return "satisfied"
    if sentiment <= constants.EMOTION_FRUSTRATED_CEILING:
        return "frustrated"
    return "concerned"


def detect_emotion(response: Response) -> EmotionAnalysis:
    """Classify the dominant emotion of *response*.

    Each emotion scores ``matched keywords / keywords in its set``; with no
    keyword hit the emotion is inferred from sentiment at a 0.5 score.
    """

    sentiment = normalize_sentiment(response.sentiment_score)

    best_emotion: Optional[str] = None
    best_score = 0.0
    for emotion, keywords in lexicon.EMOTION_KEYWORDS.items():
        hits = matching_keywords(response.content, keywords)
        if not hits:
            continue
        score = len(hits) / len(keywords)
        # strict comparison: the first declared emotion wins ties
        if score > best_score:
            best_emotion, best_score = emotion, score

    if best_emotion is None:
        best_emotion = _fallback_emotion(sentiment)
        best_score = constants.EMOTION_FALLBACK_SCORE

    intensity = min(100.0, best_score * 100 + sentiment * 0.5)
    return EmotionAnalysis(
        response_id=response.id,
        emotion=best_emotion,
        confidence=round_half_up(best_score * 100),
        intensity=round_half_up(intensity),
        keywords=list(lexicon.EMOTION_KEYWORDS.get(best_emotion, [])),
    )


# ---------------------------------------------------------------------------
# Semantic patterns
# ---------------------------------------------------------------------------


def find_semantic_patterns(
    responses: Sequence[Response],
    *,
    variant_table: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[SemanticPattern]:
    """Group responses under canonical phrases via their known variants."""

    table = variant_table if variant_table is not None else lexicon.SEMANTIC_VARIANTS
    members: Dict[str, List[Response]] = {}

    for response in responses:
        for canonical, variants in table.items():
            if contains_any(response.content, [canonical, *variants]):
                members.setdefault(canonical, []).append(response)

    patterns = []
    for canonical, matched in members.items():
        contexts = [
            r.content
            for r in matched
            if len(r.content) < constants.DRIVER_CONTEXT_MAX_LENGTH
        ]
        patterns.append(
            SemanticPattern(
                pattern=canonical,
                semantic_variants=list(table[canonical]),
                frequency=len(matched),
                sentiment_impact=round_half_up(
                    mean_sentiment(matched) - constants.NEUTRAL_SENTIMENT
                ),
                contexts=contexts[: constants.MAX_SEMANTIC_CONTEXTS],
            )
        )

    patterns.sort(key=lambda p: p.frequency, reverse=True)
    return patterns


# ---------------------------------------------------------------------------
# Emerging topics
# ---------------------------------------------------------------------------


def identify_emerging_topics(
    responses: Sequence[Response],
    recent_days: int = constants.EMERGING_WINDOW_DAYS,
    *,
    now: Optional[datetime.datetime] = None,
) -> List[TopicCluster]:
    """Topics mentioned disproportionately often in the last *recent_days*.

    *now* defaults to the newest ``created_at`` among *responses* so the
    result depends only on the input.  A topic is emerging when its recent
    share exceeds 1.5× its all-time share with at least 3 recent mentions, or
    when it has at least 3 recent mentions and no all-time cluster.
    """

    if not responses:
        return []

    reference = now or max(r.created_at for r in responses)
    cutoff = reference - datetime.timedelta(days=recent_days)
    recent = [r for r in responses if r.created_at >= cutoff]

    all_topics = {t.id: t for t in extract_topic_clusters(responses)}
    recent_topics = extract_topic_clusters(recent)

    emerging: List[TopicCluster] = []
    for topic in recent_topics:
        historical = all_topics.get(topic.id)
        if historical is None:
            if topic.frequency >= constants.EMERGING_MIN_FREQUENCY:
                emerging.append(topic)
            continue

        recent_ratio = topic.frequency / max(len(recent), 1)
        overall_ratio = historical.frequency / max(len(responses), 1)
        if (
            recent_ratio > overall_ratio * constants.EMERGING_RATIO
            and topic.frequency >= constants.EMERGING_MIN_FREQUENCY
        ):
            topic.confidence = min(
                100, topic.confidence + constants.EMERGING_CONFIDENCE_BOOST
            )
            emerging.append(topic)

    emerging.sort(key=lambda t: t.frequency, reverse=True)
    logger.debug(
        "Emerging topics: %d of %d recent (window=%d days)",
        len(emerging),
        len(recent_topics),
        recent_days,
    )
    return emerging


# ---------------------------------------------------------------------------
# Combined analysis
# ---------------------------------------------------------------------------


def _nlp_quality_score(
    topics: List[TopicCluster],
    emotions: List[EmotionAnalysis],
    patterns: List[SemanticPattern],
    response_count: int,
) -> float:
    if response_count == 0:
        return 0
    confident = sum(
        1 for e in emotions if e.confidence > constants.CONFIDENT_EMOTION_THRESHOLD
    )
    score = (
        (len(topics) / 10) * 30
        + (response_count / 50) * 30
        + (len(patterns) / 5) * 20
        + (confident / response_count) * 20
    )
    return round_half_up(min(100.0, score))


def perform_nlp_analysis(
    responses: Sequence[Response],
    *,
    recent_days: int = constants.EMERGING_WINDOW_DAYS,
    now: Optional[datetime.datetime] = None,
) -> NLPAnalysis:
    """Run topic, emotion, semantic-pattern and emerging-topic analysis."""

    topics = extract_topic_clusters(responses)
    emotions = [detect_emotion(r) for r in responses]
    patterns = find_semantic_patterns(responses)
    emerging = identify_emerging_topics(responses, recent_days, now=now)

    analysis = NLPAnalysis(
        topics=topics[: constants.MAX_NLP_TOPICS],
        emotions=emotions,
        semantic_patterns=patterns[: constants.MAX_NLP_PATTERNS],
        emerging_topics=emerging[: constants.MAX_EMERGING_TOPICS],
        quality_score=_nlp_quality_score(topics, emotions, patterns, len(responses)),
    )
    logger.debug(
        "NLP analysis: %d topics, %d patterns, quality=%s",
        len(topics),
        len(patterns),
        analysis.quality_score,
    )
    return analysis
