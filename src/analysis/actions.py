"""Actionable intelligence: root causes, interventions, quick wins, impact.

Consumes :class:`~src.analysis.themes.ThemeInsight` output (including its
sentiment drivers) and turns low-sentiment themes into recommended actions.
Intervention wording, impact, effort and timeline come from the rule table
in :mod:`src.analysis.lexicon`; only priority is computed here.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from src import constants
from src.analysis import lexicon
from src.analysis.lexicon import InterventionRule, InterventionTemplate
from src.analysis.normalize import round_half_up
from src.analysis.patterns import PatternInsight
from src.analysis.themes import ThemeInsight
from src.records import Response, Session

logger = logging.getLogger(__name__)

_PRIORITY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}
_IMPACT_ORDER = {"high": 2, "medium": 1}


@dataclass(slots=True)
class RootCause:
    id: str
    theme_id: str
    theme_name: str
    cause: str
    evidence: List[str]
    frequency: int
    impact_score: float  # 0–100
    affected_employees: int
    representative_quotes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class InterventionRecommendation:
    id: str
    title: str
    description: str
    rationale: str
    root_causes: List[str]
    estimated_impact: float  # expected sentiment improvement, in points
    effort_level: str  # low | medium | high
    timeline: str
    priority: str  # critical | high | medium | low
    quick_win: bool
    related_themes: List[str]
    action_steps: List[str] = field(default_factory=list)
    success_metrics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class QuickWin:
    id: str
    title: str
    description: str
    effort: str  # low | very_low
    impact: str  # high | medium
    implementation_time: str
    affected_theme: str
    evidence: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ImpactPrediction:
    theme_id: str
    theme_name: str
    current_sentiment: float
    predicted_sentiment: float
    improvement: float
    confidence: float
    interventions: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Root causes
# ---------------------------------------------------------------------------


def analyze_root_causes(
    themes: Sequence[ThemeInsight],
    responses: Sequence[Response],
    sessions: Sequence[Session] = (),
) -> List[RootCause]:
    """Explain why themes below 60 sentiment score low.

    Every negative sentiment driver of such a theme becomes a cause, as does
    every sub-theme averaging below 50.  Sorted by ``impact_score``.
    """

    causes: List[RootCause] = []

    for theme in themes:
        if theme.avg_sentiment >= constants.CONCERNING_THEME_SENTIMENT:
            continue

        theme_responses = [r for r in responses if r.theme_id == theme.theme_id]
        negative = [d for d in theme.sentiment_drivers if d.sentiment_impact < 0]

        for index, driver in enumerate(negative):
            phrase = driver.phrase.lower()
            affected = {
                r.session_id for r in theme_responses if phrase in r.content.lower()
            }
            quotes = [q.text for q in theme.quotes if phrase in q.text.lower()][:3]
            causes.append(
                RootCause(
                    id=f"{theme.theme_id}-{index}",
                    theme_id=theme.theme_id,
                    theme_name=theme.theme_name,
                    cause=driver.phrase,
                    evidence=[*driver.context[:3], *quotes][:5],
                    frequency=driver.frequency,
                    impact_score=min(
                        100, abs(driver.sentiment_impact) * 20 + driver.frequency * 5
                    ),
                    affected_employees=len(affected),
                    representative_quotes=quotes,
                )
            )

        low_sub_themes = [
            st
            for st in theme.sub_themes
            if st.avg_sentiment < constants.LOW_SUB_THEME_SENTIMENT
        ]
        for index, sub_theme in enumerate(low_sub_themes):
            causes.append(
                RootCause(
                    id=f"{theme.theme_id}-sub-{index}",
                    theme_id=theme.theme_id,
                    theme_name=theme.theme_name,
                    cause=sub_theme.name,
                    evidence=list(sub_theme.representative_quotes),
                    frequency=sub_theme.frequency,
                    impact_score=(50 - sub_theme.avg_sentiment) * 2,
                    affected_employees=sub_theme.frequency,
                    representative_quotes=list(sub_theme.representative_quotes),
                )
            )

    causes.sort(key=lambda c: c.impact_score, reverse=True)
    logger.debug("Identified %d root causes", len(causes))
    return causes


# ---------------------------------------------------------------------------
# Interventions
# ---------------------------------------------------------------------------


def intervention_priority(avg_sentiment: float, affected: int) -> str:
    """Priority from theme sentiment and the number of affected employees."""

    if avg_sentiment < 40 and affected > 10:
        return "critical"
    if avg_sentiment < 50 and affected > 5:
        return "high"
    if avg_sentiment < 60:
        return "medium"
    return "low"


def _mentions(cause: RootCause, keywords: Sequence[str]) -> bool:
    text = cause.cause.lower()
    return any(keyword in text for keyword in keywords)


def _instantiate(
    template: InterventionTemplate,
    theme: ThemeInsight,
    priority: str,
    root_causes: List[str],
    *,
    frequency: int = 0,
    estimated_impact: Optional[float] = None,
) -> InterventionRecommendation:
    fields = {
        "theme_name": theme.theme_name,
        "response_count": theme.response_count,
        "frequency": frequency,
    }
    return InterventionRecommendation(
        id=f"{theme.theme_id}-{template.key}",
        title=template.title.format(**fields),
        description=template.description.format(**fields),
        rationale=template.rationale.format(**fields),
        root_causes=root_causes,
        estimated_impact=(
            template.estimated_impact if estimated_impact is None else estimated_impact
        ),
        effort_level=template.effort_level,
        timeline=template.timeline,
        priority=priority,
        quick_win=template.quick_win,
        related_themes=[theme.theme_name],
        action_steps=[step.format(**fields) for step in template.action_steps],
        success_metrics=[metric.format(**fields) for metric in template.success_metrics],
    )


def _theme_interventions(
    theme: ThemeInsight,
    causes: List[RootCause],
    priority: str,
    rules: Mapping[str, InterventionRule],
) -> List[InterventionRecommendation]:
    name = theme.theme_name.lower()
    out: List[InterventionRecommendation] = []

    for rule in rules.values():
        if not any(keyword in name for keyword in rule.theme_keywords):
            continue
        for template in rule.templates:
            if template.trigger_keywords is not None:
                trigger = next(
                    (c for c in causes if _mentions(c, template.trigger_keywords)), None
                )
                if trigger is None:
                    continue
                out.append(
                    _instantiate(
                        template,
                        theme,
                        priority,
                        [trigger.cause],
                        frequency=trigger.frequency,
                    )
                )
            elif template.cause_keywords is not None:
                selected = [c.cause for c in causes if _mentions(c, template.cause_keywords)]
                out.append(_instantiate(template, theme, priority, selected))
            else:
                out.append(_instantiate(template, theme, priority, [c.cause for c in causes]))

    if not out:
        generic = lexicon.GENERIC_INTERVENTION
        out.append(
            _instantiate(
                generic,
                theme,
                priority,
                [c.cause for c in causes],
                estimated_impact=max(
                    generic.estimated_impact, 20 - theme.avg_sentiment / 5
                ),
            )
        )
    return out


def generate_interventions(
    root_causes: Sequence[RootCause],
    themes: Sequence[ThemeInsight],
    patterns: Sequence[PatternInsight] = (),
    *,
    rules: Optional[Mapping[str, InterventionRule]] = None,
) -> List[InterventionRecommendation]:
    """Recommend interventions for every theme that has root causes.

    *patterns* is passed through and only logged; the default rules key on
    theme names and root causes.
    """

    rules = rules if rules is not None else lexicon.INTERVENTION_RULES
    themes_by_id = {t.theme_id: t for t in themes}

    causes_by_theme: Dict[str, List[RootCause]] = {}
    for cause in root_causes:
        causes_by_theme.setdefault(cause.theme_id, []).append(cause)

    interventions: List[InterventionRecommendation] = []
    for theme_id, causes in causes_by_theme.items():
        theme = themes_by_id.get(theme_id)
        if theme is None:
            logger.warning("Root causes reference unknown theme %s; skipping", theme_id)
            continue
        affected = sum(c.affected_employees for c in causes)
        priority = intervention_priority(theme.avg_sentiment, affected)
        interventions.extend(_theme_interventions(theme, causes, priority, rules))

    interventions.sort(
        key=lambda i: (_PRIORITY_ORDER[i.priority], i.estimated_impact), reverse=True
    )
    logger.debug(
        "Generated %d interventions (%d patterns supplied)",
        len(interventions),
        len(patterns),
    )
    return interventions


# ---------------------------------------------------------------------------
# Quick wins & impact
# ---------------------------------------------------------------------------


def identify_quick_wins(
    interventions: Sequence[InterventionRecommendation],
    themes: Sequence[ThemeInsight],
) -> List[QuickWin]:
    """Low-effort interventions plus the meeting-driver quick win.

    Only two sources are possible: interventions flagged ``quick_win`` with
    ``effort_level == "low"``, and frequent strongly-negative drivers that
    mention meetings.
    """

    wins = [
        QuickWin(
            id=i.id,
            title=i.title,
            description=i.description,
            effort="low",
            impact="high"
            if i.estimated_impact >= constants.QUICK_WIN_HIGH_IMPACT
            else "medium",
            implementation_time=i.timeline,
            affected_theme=i.related_themes[0] if i.related_themes else "",
            evidence=list(i.root_causes),
        )
        for i in interventions
        if i.quick_win and i.effort_level == "low"
    ]

    frequent_negative = [
        d
        for t in themes
        for d in t.sentiment_drivers
        if d.frequency >= constants.MEETING_DRIVER_MIN_FREQUENCY
        and d.sentiment_impact < constants.MEETING_DRIVER_MAX_IMPACT
    ][: constants.MAX_MEETING_DRIVERS]

    meeting = lexicon.MEETING_QUICK_WIN
    for index, driver in enumerate(frequent_negative):
        if meeting["keyword"] not in driver.phrase.lower():
            continue
        wins.append(
            QuickWin(
                id=f"quick-win-meetings-{index}",
                title=meeting["title"],
                description=meeting["description"],
                effort=meeting["effort"],
                impact=meeting["impact"],
                implementation_time=meeting["implementation_time"],
                affected_theme=meeting["affected_theme"],
                evidence=[driver.phrase, *driver.context[:2]],
            )
        )

    wins.sort(key=lambda w: _IMPACT_ORDER[w.impact], reverse=True)
    return wins


def predict_impact(
    interventions: Sequence[InterventionRecommendation],
    themes: Sequence[ThemeInsight],
) -> List[ImpactPrediction]:
    """Predict post-intervention sentiment per theme.

    Impacts add up without diminishing returns; only the 100 ceiling caps
    the prediction.
    """

    by_theme: Dict[str, List[InterventionRecommendation]] = {}
    for intervention in interventions:
        for theme_name in intervention.related_themes:
            by_theme.setdefault(theme_name, []).append(intervention)

    themes_by_name = {t.theme_name: t for t in themes}
    predictions = []
    for theme_name, planned in by_theme.items():
        theme = themes_by_name.get(theme_name)
        if theme is None:
            continue
        total_impact = sum(i.estimated_impact for i in planned)
        predicted = min(100.0, theme.avg_sentiment + total_impact)
        confidence = min(
            100.0, 50 + (100 - theme.avg_sentiment) * 0.5 + len(planned) * 10
        )
        predictions.append(
            ImpactPrediction(
                theme_id=theme.theme_id,
                theme_name=theme_name,
                current_sentiment=theme.avg_sentiment,
                predicted_sentiment=predicted,
                improvement=predicted - theme.avg_sentiment,
                confidence=round_half_up(confidence),
                interventions=[i.title for i in planned],
            )
        )

    predictions.sort(key=lambda p: p.improvement, reverse=True)
    return predictions
