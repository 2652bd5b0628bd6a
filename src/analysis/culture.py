"""Workplace-culture pattern mining.

Responses are scanned against the strength, weakness and risk indicator
tables.  Risks need at least three matching responses before they are
reported.  Patterns are then split into strengths and risks, profiled per
group (department) and combined into a single :class:`CulturalMap`.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from src import constants
from src.analysis import lexicon
from src.analysis.normalize import (
    clamp,
    contains_any,
    mean_sentiment,
    round_half_up,
    slugify,
)
from src.analysis.themes import ThemeInsight
from src.records import Response, Session

logger = logging.getLogger(__name__)

_CATEGORY_PRIORITY = {"risk": 3, "weakness": 2, "strength": 1, "neutral": 0}
_SEVERITY_PRIORITY = {"critical": 4, "high": 3, "medium": 2, "low": 1}


@dataclass(slots=True)
class CulturalPattern:
    id: str
    pattern_name: str
    description: str
    category: str  # strength | weakness | neutral | risk
    evidence: List[str]
    frequency: int
    affected_groups: List[str]
    sentiment_impact: float  # -100..100
    confidence: float  # 0–100
    implications: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CulturalStrength:
    id: str
    strength_name: str
    description: str
    evidence: List[str]
    frequency: int
    impact: str  # high | medium | low
    protective_factor: bool


@dataclass(slots=True)
class CulturalRisk:
    id: str
    risk_name: str
    description: str
    evidence: List[str]
    frequency: int
    severity: str  # critical | high | medium | low
    affected_groups: List[str]
    recommended_actions: List[str] = field(default_factory=list)


@dataclass(slots=True)
class GroupComparison:
    sentiment_diff: float
    strengths_diff: float
    risks_diff: float


@dataclass(slots=True)
class GroupCultureProfile:
    group_name: str
    overall_sentiment: float
    cultural_strengths: List[CulturalStrength]
    cultural_risks: List[CulturalRisk]
    unique_patterns: List[CulturalPattern]
    comparison_to_average: GroupComparison


@dataclass(slots=True)
class CulturalEvolution:
    trend: str  # improving | declining | stable
    change_rate: float
    indicators: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CulturalMap:
    overall_culture_score: float
    cultural_strengths: List[CulturalStrength]
    cultural_risks: List[CulturalRisk]
    patterns: List[CulturalPattern]
    group_profiles: List[GroupCultureProfile]
    cultural_evolution: CulturalEvolution

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def risk_severity(frequency: int) -> str:
    """Severity of a risk seen in *frequency* responses (3/5/10 thresholds)."""

    if frequency >= constants.RISK_CRITICAL:
        return "critical"
    if frequency >= constants.RISK_HIGH:
        return "high"
    if frequency >= constants.RISK_MEDIUM:
        return "medium"
    return "low"


def _group_responses(
    responses: Sequence[Response], sessions: Sequence[Session]
) -> Dict[str, List[Response]]:
    """Map each group name to the responses of its sessions."""

    by_session: Dict[str, List[Response]] = {}
    for response in responses:
        by_session.setdefault(response.session_id, []).append(response)

    groups: Dict[str, List[Response]] = {}
    for session in sessions:
        group = session.group or constants.UNKNOWN_GROUP
        groups.setdefault(group, []).extend(by_session.get(session.id, []))
    return groups


_CATEGORY_TEXT = {
    "strength": (
        "Employees express {name} as a positive aspect of the workplace.",
        [
            "This cultural strength supports employee satisfaction",
            "Consider leveraging this strength in other areas",
        ],
    ),
    "weakness": (
        "Employees identify {name} as a cultural weakness.",
        [
            "This cultural weakness negatively impacts employee satisfaction",
            "Addressing this could significantly improve workplace culture",
        ],
    ),
    "risk": (
        "Cultural risk identified: {name} may be affecting workplace health.",
        [
            "This cultural risk requires immediate attention",
            "May lead to increased turnover and decreased engagement",
        ],
    ),
}


def _scan_category(
    category: str,
    table: Mapping[str, Sequence[str]],
    responses: Sequence[Response],
    groups: Mapping[str, List[Response]],
) -> List[CulturalPattern]:
    is_risk = category == "risk"
    min_matches = constants.RISK_MIN_MATCHES if is_risk else 1
    default_sentiment = (
        constants.RISK_DEFAULT_SENTIMENT if is_risk else constants.NEUTRAL_SENTIMENT
    )
    description, implications = _CATEGORY_TEXT[category]

    patterns = []
    for name, keywords in table.items():
        matched = [r for r in responses if contains_any(r.content, keywords)]
        if len(matched) < min_matches:
            continue

        matched_ids = {r.id for r in matched}
        affected = [
            group
            for group, members in groups.items()
            if any(r.id in matched_ids for r in members)
        ]
        frequency = len(matched)
        confidence = (
            min(100, frequency * 15 + 40) if is_risk else min(100, frequency * 10 + 30)
        )
        patterns.append(
            CulturalPattern(
                id=f"{category}-{slugify(name)}",
                pattern_name=name,
                description=description.format(name=name.lower()),
                category=category,
                evidence=[
                    r.content
                    for r in matched
                    if len(r.content) < constants.EVIDENCE_MAX_LENGTH
                ][: constants.MAX_PATTERN_EVIDENCE],
                frequency=frequency,
                affected_groups=affected,
                sentiment_impact=round_half_up(
                    mean_sentiment(matched, default=default_sentiment)
                    - constants.NEUTRAL_SENTIMENT
                ),
                confidence=confidence,
                implications=list(implications),
            )
        )
    return patterns


def detect_cultural_patterns(
    responses: Sequence[Response], sessions: Sequence[Session]
) -> List[CulturalPattern]:
    """Detect strengths, weaknesses and risks; risks first, then by frequency."""

    groups = _group_responses(responses, sessions)
    patterns = [
        *_scan_category("strength", lexicon.CULTURAL_STRENGTHS, responses, groups),
        *_scan_category("weakness", lexicon.CULTURAL_WEAKNESSES, responses, groups),
        *_scan_category("risk", lexicon.CULTURAL_RISKS, responses, groups),
    ]
    patterns.sort(
        key=lambda p: (_CATEGORY_PRIORITY[p.category], p.frequency), reverse=True
    )
    return patterns


def extract_cultural_strengths(
    patterns: Sequence[CulturalPattern],
) -> List[CulturalStrength]:
    strengths = []
    for pattern in patterns:
        if pattern.category != "strength":
            continue
        impact = pattern.sentiment_impact
        strengths.append(
            CulturalStrength(
                id=pattern.id,
                strength_name=pattern.pattern_name,
                description=pattern.description,
                evidence=pattern.evidence,
                frequency=pattern.frequency,
                impact="high" if impact > 20 else "medium" if impact > 10 else "low",
                protective_factor=impact > 15,
            )
        )
    strengths.sort(key=lambda s: s.frequency, reverse=True)
    return strengths


def extract_cultural_risks(patterns: Sequence[CulturalPattern]) -> List[CulturalRisk]:
    risks = [
        CulturalRisk(
            id=pattern.id,
            risk_name=pattern.pattern_name,
            description=pattern.description,
            evidence=pattern.evidence,
            frequency=pattern.frequency,
            severity=risk_severity(pattern.frequency),
            affected_groups=pattern.affected_groups,
            recommended_actions=[
                f"Address {pattern.pattern_name.lower()} through targeted interventions",
                "Monitor affected groups closely",
                "Implement prevention measures",
            ],
        )
        for pattern in patterns
        if pattern.category == "risk"
    ]
    risks.sort(key=lambda r: _SEVERITY_PRIORITY[r.severity], reverse=True)
    return risks


def build_group_profiles(
    responses: Sequence[Response],
    sessions: Sequence[Session],
    patterns: Sequence[CulturalPattern],
) -> List[GroupCultureProfile]:
    """Profile each group's culture against the organisation average."""

    groups = _group_responses(responses, sessions)
    if not groups:
        return []

    overall = mean_sentiment(responses)
    avg_strengths = len(extract_cultural_strengths(patterns)) / len(groups)
    avg_risks = len(extract_cultural_risks(patterns)) / len(groups)

    profiles = []
    for group, members in groups.items():
        group_sentiment = mean_sentiment(members)
        group_patterns = [p for p in patterns if group in p.affected_groups]
        strengths = extract_cultural_strengths(group_patterns)
        risks = extract_cultural_risks(group_patterns)
        profiles.append(
            GroupCultureProfile(
                group_name=group,
                overall_sentiment=round_half_up(group_sentiment),
                cultural_strengths=strengths,
                cultural_risks=risks,
                unique_patterns=[
                    p for p in group_patterns if len(p.affected_groups) == 1
                ],
                comparison_to_average=GroupComparison(
                    sentiment_diff=round_half_up(group_sentiment - overall),
                    strengths_diff=len(strengths) - avg_strengths,
                    risks_diff=len(risks) - avg_risks,
                ),
            )
        )
    return profiles


def culture_score(avg_sentiment: float, strengths: int, risks: int) -> float:
    """Overall 0–100 culture score.

    The risk term is ``max(0, risks * -10)`` as defined by the product
    scoring model, which contributes nothing for any non-negative risk count.
    """

    strength_points = min(50, strengths * 5)
    risk_penalty = max(0, risks * -10)
    return clamp(
        avg_sentiment / 100 * 50 + strength_points + risk_penalty + constants.CULTURE_BASE_SCORE
    )


def cultural_trend(avg_sentiment: float) -> str:
    if avg_sentiment >= constants.IMPROVING_SENTIMENT:
        return "improving"
    if avg_sentiment <= constants.DECLINING_SENTIMENT:
        return "declining"
    return "stable"


def build_cultural_map(
    responses: Sequence[Response],
    sessions: Sequence[Session],
    themes: Optional[Sequence[ThemeInsight]] = None,
) -> CulturalMap:
    """Combine patterns, strengths, risks and group profiles into one map."""

    themes = themes or []
    patterns = detect_cultural_patterns(responses, sessions)
    strengths = extract_cultural_strengths(patterns)
    risks = extract_cultural_risks(patterns)
    profiles = build_group_profiles(responses, sessions, patterns)

    avg_sentiment = (
        sum(t.avg_sentiment for t in themes) / len(themes)
        if themes
        else constants.NEUTRAL_SENTIMENT
    )
    trend = cultural_trend(avg_sentiment)

    if avg_sentiment >= constants.IMPROVING_SENTIMENT:
        sentiment_indicator = "Strong positive sentiment"
    elif avg_sentiment <= constants.DECLINING_SENTIMENT:
        sentiment_indicator = "Low sentiment"
    else:
        sentiment_indicator = "Mixed sentiment"

    cultural_map = CulturalMap(
        overall_culture_score=round_half_up(
            culture_score(avg_sentiment, len(strengths), len(risks))
        ),
        cultural_strengths=strengths[: constants.MAX_CULTURE_STRENGTHS],
        cultural_risks=risks[: constants.MAX_CULTURE_RISKS],
        patterns=patterns[: constants.MAX_CULTURE_PATTERNS],
        group_profiles=profiles,
        cultural_evolution=CulturalEvolution(
            trend=trend,
            change_rate=round_half_up(avg_sentiment - constants.NEUTRAL_SENTIMENT),
            indicators=[
                "More strengths than risks"
                if len(strengths) > len(risks)
                else "More risks than strengths",
                sentiment_indicator,
            ],
        ),
    )
    logger.debug(
        "Cultural map: score=%s strengths=%d risks=%d groups=%d",
        cultural_map.overall_culture_score,
        len(strengths),
        len(risks),
        len(profiles),
    )
    return cultural_map
