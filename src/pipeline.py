"""Run every analytics stage over one snapshot of responses and sessions.

Theme extraction feeds the actionable-intelligence stages, so those run in
order.  Quality scoring, NLP analysis and cultural mapping only read the
input snapshot; when an :class:`~concurrent.futures.Executor` is supplied they
are submitted to it and run concurrently with the theme stages.
"""
from __future__ import annotations

import datetime
import logging
from concurrent.futures import Executor, Future
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

from src import constants
from src.analysis.actions import (
    ImpactPrediction,
    InterventionRecommendation,
    QuickWin,
    RootCause,
    analyze_root_causes,
    generate_interventions,
    identify_quick_wins,
    predict_impact,
)
from src.analysis.culture import CulturalMap, build_cultural_map
from src.analysis.narrative import NarrativeSummary, generate_narrative_summary
from src.analysis.nlp import NLPAnalysis, perform_nlp_analysis
from src.analysis.patterns import PatternInsight, find_cross_conversation_patterns
from src.analysis.quality import (
    AggregateQualityMetrics,
    QualityInsight,
    QualityMetrics,
    calculate_session_quality,
    generate_quality_insights,
    summarize_quality,
)
from src.analysis.themes import Quote, ThemeInsight, extract_quotes, extract_theme_insights
from src.records import Response, Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class PipelineResult:
    """Every artifact produced by one pipeline run."""

    responses: List[Response] = field(default_factory=list)
    sessions: List[Session] = field(default_factory=list)
    quotes: List[Quote] = field(default_factory=list)
    themes: List[ThemeInsight] = field(default_factory=list)
    patterns: List[PatternInsight] = field(default_factory=list)
    narrative: Optional[NarrativeSummary] = None
    root_causes: List[RootCause] = field(default_factory=list)
    interventions: List[InterventionRecommendation] = field(default_factory=list)
    quick_wins: List[QuickWin] = field(default_factory=list)
    impact_predictions: List[ImpactPrediction] = field(default_factory=list)
    quality_metrics: Optional[AggregateQualityMetrics] = None
    session_quality: List[QualityMetrics] = field(default_factory=list)
    quality_insights: List[QualityInsight] = field(default_factory=list)
    nlp_analysis: Optional[NLPAnalysis] = None
    cultural_map: Optional[CulturalMap] = None

    @property
    def is_empty(self) -> bool:
        return not self.responses or not self.sessions

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _quality_stage(
    sessions: Sequence[Session], responses: Sequence[Response]
) -> tuple[AggregateQualityMetrics, List[QualityMetrics], List[QualityInsight]]:
    per_session = [calculate_session_quality(s, responses) for s in sessions]
    aggregate = summarize_quality(per_session)
    return aggregate, per_session, generate_quality_insights(aggregate, per_session)


def _submit(
    executor: Optional[Executor], fn: Callable[..., T], *args: Any, **kwargs: Any
) -> "Future[T]":
    """Run *fn* on *executor*, or inline wrapped in a completed future."""

    if executor is not None:
        return executor.submit(fn, *args, **kwargs)
    future: "Future[T]" = Future()
    try:
        future.set_result(fn(*args, **kwargs))
    except Exception as exc:  # re-raised by future.result()
        future.set_exception(exc)
    return future


def run_pipeline(
    responses: Sequence[Response],
    sessions: Sequence[Session],
    theme_names: Optional[Mapping[str, str]] = None,
    executor: Optional[Executor] = None,
    *,
    recent_days: int = constants.EMERGING_WINDOW_DAYS,
    now: Optional[datetime.datetime] = None,
) -> PipelineResult:
    """Analyse *responses* and *sessions* and bundle the results.

    Parameters
    ----------
    responses, sessions
        Input snapshot; neither is mutated.
    theme_names
        Optional ``theme_id → display name`` mapping.
    executor
        When given, quality, NLP and cultural stages are submitted to it.
    recent_days, now
        Emerging-topic window and reference time.

    An empty *responses* or *sessions* collection yields an empty result.
    """

    responses = list(responses)
    sessions = list(sessions)
    if not responses or not sessions:
        logger.info(
            "Nothing to analyse (responses=%d sessions=%d)", len(responses), len(sessions)
        )
        return PipelineResult(responses=responses, sessions=sessions)

    logger.debug(
        "Running pipeline on %d responses from %d sessions", len(responses), len(sessions)
    )

    quality_future = _submit(executor, _quality_stage, sessions, responses)
    nlp_future = _submit(
        executor, perform_nlp_analysis, responses, recent_days=recent_days, now=now
    )

    themes = extract_theme_insights(responses, sessions, theme_names=theme_names)
    culture_future = _submit(executor, build_cultural_map, responses, sessions, themes)

    quotes = extract_quotes(responses, sessions)
    patterns = find_cross_conversation_patterns(responses, sessions)
    narrative = generate_narrative_summary(responses, sessions, themes)
    root_causes = analyze_root_causes(themes, responses, sessions)
    interventions = generate_interventions(root_causes, themes, patterns)
    quick_wins = identify_quick_wins(interventions, themes)
    predictions = predict_impact(interventions, themes)

    aggregate, per_session, quality_insights = quality_future.result()

    result = PipelineResult(
        responses=responses,
        sessions=sessions,
        quotes=quotes,
        themes=themes,
        patterns=patterns,
        narrative=narrative,
        root_causes=root_causes,
        interventions=interventions,
        quick_wins=quick_wins,
        impact_predictions=predictions,
        quality_metrics=aggregate,
        session_quality=per_session,
        quality_insights=quality_insights,
        nlp_analysis=nlp_future.result(),
        cultural_map=culture_future.result(),
    )
    logger.info(
        "Pipeline finished: %d themes, %d root causes, %d interventions, %d quick wins",
        len(themes),
        len(root_causes),
        len(interventions),
        len(quick_wins),
    )
    return result
