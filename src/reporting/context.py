"""Context dataclass for rendering insight reports.

This module defines `ReportContext`, a typed container that holds all
values expected by the Jinja2 template located in
`src/reporting/templates/report.md.j2`.  Building the context is where
report-level limits are applied; the template only lays values out.
"""
from __future__ import annotations

import logging
import os
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime as _dt
from datetime import timezone as _tz
from typing import Any, Dict, List, Optional

from src.analysis.summary import generate_summary
from src.pipeline import PipelineResult
from src.records import Response
from src.reporting import config

__all__ = [
    "Stats",
    "ThemeSection",
    "ReportContext",
    "build_report_context",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Stats:
    """Participation and quality figures displayed in the report header."""

    responses: int
    sessions: int
    completed_sessions: int = 0
    average_quality: float = 0
    average_confidence: float = 0
    culture_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` representation suitable for Jinja."""
        return asdict(self)


@dataclass(slots=True)
class ThemeSection:
    name: str
    response_count: int
    avg_sentiment: float
    quotes: List[str] = field(default_factory=list)
    drivers: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ReportContext:
    """Container with all fields used by the report template."""

    # Header & meta
    title: str
    date: str  # ISO-8601 date string (UTC)

    # Participation & sentiment
    stats: Stats
    emoji_bar: str
    sentiment_counts: Dict[str, int]

    # Analysis outputs
    overview: str = ""
    key_insights: List[str] = field(default_factory=list)
    themes: List[ThemeSection] = field(default_factory=list)
    concerns: List[str] = field(default_factory=list)
    positives: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    quick_wins: List[str] = field(default_factory=list)
    emerging_topics: List[str] = field(default_factory=list)
    cultural_risks: List[str] = field(default_factory=list)
    quality_notes: List[str] = field(default_factory=list)

    # Textual summary paragraph
    summary: str = ""

    # Misc / versioning
    version: str = "1"

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        return asdict(self)

    __call__ = to_dict


# ---------------------------------------------------------------------------
# Local helper functions
# ---------------------------------------------------------------------------
def sentiment_counts(responses: List[Response]) -> Dict[str, int]:
    """Count responses per sentiment label; unlabelled responses are skipped."""

    counts = Counter(r.sentiment_label.value for r in responses if r.sentiment_label)
    return {label: counts.get(label, 0) for label in ("positive", "neutral", "negative")}


def _emoji_bar(counts: Dict[str, int], max_emoji: int = 20) -> str:
    """Return a string bar of emojis based on *counts*.

    Positive → 😊, Neutral → 😐, Negative → 🙁.  Limit total length to
    *max_emoji*.
    """

    pos = counts.get("positive", 0)
    neu = counts.get("neutral", 0)
    neg = counts.get("negative", 0)
    total = pos + neu + neg or 1

    scale = max_emoji / total
    pos_e = "😊" * max(1 if pos else 0, round(pos * scale))
    neu_e = "😐" * max(1 if neu else 0, round(neu * scale))
    neg_e = "🙁" * max(1 if neg else 0, round(neg * scale))
    return pos_e + neu_e + neg_e


def _theme_sections(result: PipelineResult) -> List[ThemeSection]:
    ranked = sorted(result.themes, key=lambda t: t.response_count, reverse=True)
    return [
        ThemeSection(
            name=t.theme_name,
            response_count=t.response_count,
            avg_sentiment=round(t.avg_sentiment, 1),
            quotes=[q.text for q in t.quotes[: config.MAX_QUOTES]],
            drivers=[
                f"{d.phrase} ({d.sentiment_impact:+.0f})"
                for d in t.sentiment_drivers[: config.MAX_BULLETS_EACH]
            ],
        )
        for t in ranked[: config.MAX_THEMES]
    ]


# ---------------------------------------------------------------------------
# Conversion helper
# ---------------------------------------------------------------------------
def build_report_context(
    result: PipelineResult,
    *,
    title: str = "Employee Conversation Insights",
    ai_summary: Optional[bool] = None,
) -> ReportContext:
    """Convert a :class:`PipelineResult` into :class:`ReportContext`.

    The function is *pure* apart from the optional OpenAI call, whose
    failure is logged and leaves ``summary`` empty so rendering always
    succeeds.
    """

    limit = config.MAX_BULLETS_EACH
    counts = sentiment_counts(result.responses)
    quality = result.quality_metrics
    culture = result.cultural_map
    narrative = result.narrative

    stats = Stats(
        responses=len(result.responses),
        sessions=len(result.sessions),
        completed_sessions=quality.completed_sessions if quality else 0,
        average_quality=quality.average_quality_score if quality else 0,
        average_confidence=quality.average_confidence_score if quality else 0,
        culture_score=culture.overall_culture_score if culture else None,
    )

    summary = ""
    wants_summary = config.AI_SUMMARY if ai_summary is None else ai_summary
    if wants_summary and narrative is not None:
        try:
            summary = generate_summary(narrative, result.themes)
        except Exception as exc:  # noqa: BLE001 – summary optional
            logger.warning("AI summary unavailable: %s", exc)
            summary = ""

    nlp = result.nlp_analysis
    return ReportContext(
        title=title,
        date=_dt.now(tz=_tz.utc).strftime("%Y-%m-%d"),
        stats=stats,
        emoji_bar=_emoji_bar(counts, config.MAX_EMOJI_BAR),
        sentiment_counts=counts,
        overview=narrative.overview if narrative else "",
        key_insights=list(narrative.key_insights) if narrative else [],
        themes=_theme_sections(result),
        concerns=list(narrative.top_concerns[:limit]) if narrative else [],
        positives=list(narrative.positive_aspects[:limit]) if narrative else [],
        actions=[
            f"[{i.priority}] {i.title} ({i.timeline}, {i.effort_level} effort)"
            for i in result.interventions[:limit]
        ],
        quick_wins=[
            f"{w.title} – {w.implementation_time}" for w in result.quick_wins[:limit]
        ],
        emerging_topics=[
            f"{t.label} ({t.frequency} recent mentions)"
            for t in (nlp.emerging_topics[:limit] if nlp else [])
        ],
        cultural_risks=[
            f"{r.risk_name} ({r.severity}, {r.frequency} mentions)"
            for r in (culture.cultural_risks[:limit] if culture else [])
        ],
        quality_notes=[
            f"{q.title}: {q.description}" for q in result.quality_insights[:limit]
        ],
        summary=summary,
        version=os.getenv("REPORT_VERSION", "0.1"),
    )
