"""Static keyword tables and intervention rules used by the analysis modules.

These tables are the pipeline's configuration: editing an entry changes what
gets detected without touching any scoring logic.  Dictionaries preserve
declaration order, and several outputs (driver tie-breaking, pattern order)
depend on it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------

SUB_THEME_KEYWORDS: Dict[str, List[str]] = {
    "work-life-balance": [
        "work life balance", "work-life", "hours", "overtime", "weekend",
        "evening", "after hours", "time off", "vacation", "burnout",
        "exhausted", "tired", "overwhelmed",
    ],
    "career-growth": [
        "career", "growth", "development", "promotion", "advancement",
        "opportunity", "learning", "skills", "training", "mentor",
        "stuck", "stagnant", "dead end",
    ],
    "team-collaboration": [
        "team", "collaboration", "working together", "communication",
        "cooperation", "silo", "isolation", "support", "help",
    ],
    "leadership": [
        "manager", "leadership", "boss", "supervisor", "director",
        "decision", "guidance", "direction", "support", "trust",
    ],
    "compensation": [
        "salary", "pay", "compensation", "benefits", "raise",
        "bonus", "equity", "money", "paid", "underpaid",
    ],
    "company-culture": [
        "culture", "values", "environment", "atmosphere", "feel",
        "welcoming", "inclusive", "toxic", "positive", "negative",
    ],
    "work-environment": [
        "office", "workspace", "facilities", "equipment", "tools",
        "remote", "hybrid", "space", "noise", "distraction",
    ],
    "communication": [
        "communication", "transparency", "information", "updates",
        "announcements", "meetings", "email", "messaging", "clarity",
    ],
}

# ---------------------------------------------------------------------------
# Sentiment drivers
# ---------------------------------------------------------------------------

POSITIVE_DRIVER_PHRASES: List[str] = [
    "love", "great", "excellent", "amazing", "wonderful", "supportive",
    "helpful", "appreciate", "enjoy", "happy", "satisfied", "valued",
]

NEGATIVE_DRIVER_PHRASES: List[str] = [
    "frustrated", "disappointed", "concerned", "worried", "stressed",
    "overwhelmed", "burnout", "exhausted", "unfair", "unsatisfied",
    "problem", "issue", "difficult", "challenging", "struggle",
]

# ---------------------------------------------------------------------------
# NLP layer
# ---------------------------------------------------------------------------

TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "Meeting Overload": ["meeting", "too many meetings", "meeting fatigue", "calendar", "sync"],
    "Remote Work Challenges": ["remote", "wfh", "work from home", "isolation", "distraction"],
    "Communication Gaps": ["communication", "unclear", "transparency", "updates", "information"],
    "Career Stagnation": ["stuck", "stagnant", "no growth", "dead end", "advancement"],
    "Work-Life Imbalance": ["work-life", "balance", "overtime", "burnout", "exhausted"],
    "Lack of Recognition": ["recognition", "appreciated", "valued", "acknowledged", "credit"],
    "Team Collaboration Issues": ["silo", "collaboration", "teamwork", "isolated", "together"],
    "Management Style": ["manager", "leadership", "boss", "management", "supervisor"],
    "Resource Constraints": ["resources", "tools", "budget", "understaffed", "equipment"],
    "Process Inefficiencies": ["process", "inefficient", "red tape", "bureaucracy", "slow"],
    "Compensation Concerns": ["salary", "pay", "compensation", "underpaid", "money"],
    "Company Culture": ["culture", "values", "environment", "atmosphere", "feeling"],
    "Training & Development": ["training", "development", "learning", "skills", "education"],
    "Workload Management": ["workload", "too much", "overwhelmed", "balance", "manage"],
    "Feedback & Reviews": ["feedback", "review", "evaluation", "performance", "assessment"],
}

EMOTION_KEYWORDS: Dict[str, List[str]] = {
    "hopeful": ["hope", "looking forward", "excited about", "optimistic", "bright future", "potential"],
    "frustrated": ["frustrated", "annoyed", "irritated", "fed up", "tired of", "sick of"],
    "grateful": ["grateful", "thankful", "appreciate", "appreciative", "blessed", "lucky"],
    "anxious": ["worried", "anxious", "concerned", "nervous", "uneasy", "stress"],
    "satisfied": ["satisfied", "happy", "pleased", "content", "fulfilled"],
    "disappointed": ["disappointed", "let down", "dissatisfied", "unhappy"],
    "excited": ["excited", "thrilled", "enthusiastic", "energized"],
    "concerned": ["concerned", "worried", "troubled", "bothered"],
    "confident": ["confident", "sure", "certain", "positive"],
    "uncertain": ["uncertain", "unsure", "doubtful", "confused"],
    "optimistic": ["optimistic", "positive", "hopeful", "upbeat"],
    "pessimistic": ["pessimistic", "negative", "doubtful", "down"],
    "appreciative": ["appreciate", "thankful", "grateful", "value"],
    "burned_out": ["burnout", "exhausted", "drained", "overwhelmed", "burnt out"],
    "motivated": ["motivated", "inspired", "energized", "driven"],
    "demotivated": ["demotivated", "uninspired", "disengaged", "disinterested"],
}

SEMANTIC_VARIANTS: Dict[str, List[str]] = {
    "too many meetings": ["meeting overload", "meeting fatigue", "too many calls", "calendar full"],
    "work-life balance": ["work life balance", "work-life", "balance", "personal time"],
    "career growth": ["career development", "advancement", "growth", "progression", "opportunity"],
    "burnout": ["burned out", "exhausted", "overwhelmed", "drained", "tired"],
    "communication": ["transparency", "updates", "information", "clarity", "messaging"],
    "recognition": ["appreciation", "acknowledgment", "credit", "valued", "recognized"],
    "team collaboration": ["working together", "teamwork", "cooperation", "collaboration"],
    "remote work": ["work from home", "wfh", "remote", "hybrid", "distributed"],
}

# Leading words skipped when mining two-word phrases across conversations
PHRASE_STOP_WORDS: Tuple[str, ...] = ("the", "and", "but", "for", "with")

# ---------------------------------------------------------------------------
# Culture
# ---------------------------------------------------------------------------

CULTURAL_STRENGTHS: Dict[str, List[str]] = {
    "Supportive Environment": ["support", "helpful", "caring", "team support", "backed"],
    "Open Communication": ["transparent", "open", "honest", "clear communication", "forthright"],
    "Work-Life Balance": ["balance", "flexible", "respects time", "reasonable hours"],
    "Recognition & Appreciation": ["appreciated", "recognized", "valued", "acknowledged"],
    "Growth Opportunities": ["growth", "development", "learning", "advancement", "opportunity"],
    "Collaborative Culture": ["collaborative", "teamwork", "working together", "cooperative"],
    "Innovation Encouraged": ["innovative", "creative", "new ideas", "experimentation"],
    "Trust & Autonomy": ["trust", "autonomy", "independence", "empowered", "freedom"],
}

CULTURAL_WEAKNESSES: Dict[str, List[str]] = {
    "Lack of Communication": ["unclear", "no communication", "in the dark", "lack of info"],
    "Micromanagement": ["micromanaged", "controlled", "no autonomy", "monitored"],
    "Poor Work-Life Balance": ["always on", "no balance", "work-life", "overtime"],
    "Lack of Recognition": ["not appreciated", "unrecognized", "no credit", "taken for granted"],
    "Limited Growth": ["no growth", "stuck", "stagnant", "dead end", "no advancement"],
    "Silos & Isolation": ["silo", "isolated", "disconnected", "separate"],
    "Resistance to Change": ["resistant", "stuck in ways", "no innovation", "rigid"],
    "Lack of Trust": ["distrust", "not trusted", "micromanaged", "controlled"],
}

CULTURAL_RISKS: Dict[str, List[str]] = {
    "Burnout Culture": ["burnout", "exhausted", "overwhelmed", "drained", "too much"],
    "Toxic Environment": ["toxic", "hostile", "negative", "unhealthy", "bad atmosphere"],
    "High Turnover Risk": ["leaving", "considering leaving", "better elsewhere", "retention"],
    "Low Engagement": ["disengaged", "unmotivated", "not invested", "don't care"],
    "Communication Breakdown": ["communication", "miscommunication", "confusion", "unclear"],
    "Leadership Issues": ["leadership", "management", "boss", "supervisor", "direction"],
}

# ---------------------------------------------------------------------------
# Interventions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InterventionTemplate:
    """One recommendation a rule can emit for a theme.

    ``trigger_keywords`` makes the template conditional: it only fires when a
    root cause mentions one of them, and that cause becomes its only root
    cause.  Otherwise ``cause_keywords`` filters which causes are attached
    (``None`` attaches all of them).

    ``rationale`` may reference ``{frequency}`` (trigger cause),
    ``{theme_name}`` and ``{response_count}``.
    """

    key: str
    title: str
    description: str
    rationale: str
    estimated_impact: float
    effort_level: str
    timeline: str
    quick_win: bool
    action_steps: Tuple[str, ...]
    success_metrics: Tuple[str, ...]
    trigger_keywords: Optional[Tuple[str, ...]] = None
    cause_keywords: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class InterventionRule:
    """Templates applied to themes whose name contains any ``theme_keywords``."""

    theme_keywords: Tuple[str, ...]
    templates: Tuple[InterventionTemplate, ...] = field(default_factory=tuple)


INTERVENTION_RULES: Dict[str, InterventionRule] = {
    "work-life-balance": InterventionRule(
        theme_keywords=("work-life", "balance"),
        templates=(
            InterventionTemplate(
                key="wl-1",
                title="Implement Flexible Work Hours Policy",
                description="Create a flexible work hours policy to address work-life balance concerns.",
                rationale=(
                    "{frequency} employees mentioned work overload. Flexible hours can "
                    "help employees manage their time better."
                ),
                estimated_impact=15,
                effort_level="medium",
                timeline="3-4 weeks",
                quick_win=False,
                trigger_keywords=("overload", "hours", "overtime"),
                action_steps=(
                    "Draft flexible work hours policy document",
                    "Review with legal and HR teams",
                    "Announce policy to all employees",
                    "Set up tracking system for flexible hours",
                    "Schedule check-in after 1 month",
                ),
                success_metrics=(
                    "Reduction in work-life balance mentions",
                    "Increase in positive sentiment for work-life theme",
                    "Employee satisfaction survey improvement",
                ),
            ),
            InterventionTemplate(
                key="wl-2",
                title="Establish 'No After-Hours Communication' Policy",
                description="Set clear boundaries for after-hours communication to reduce employee stress.",
                rationale=(
                    "Multiple employees mentioned after-hours emails and messages "
                    "affecting their work-life balance."
                ),
                estimated_impact=12,
                effort_level="low",
                timeline="1-2 weeks",
                quick_win=True,
                cause_keywords=("after hours", "evening", "weekend"),
                action_steps=(
                    "Draft communication policy",
                    "Get leadership buy-in",
                    "Communicate policy via email and team meetings",
                    "Set expectation with managers",
                ),
                success_metrics=(
                    "Reduction in after-hours communication",
                    "Employee feedback on improved boundaries",
                ),
            ),
        ),
    ),
    "career-growth": InterventionRule(
        theme_keywords=("career", "growth", "development"),
        templates=(
            InterventionTemplate(
                key="cg-1",
                title="Launch Career Development Program",
                description="Create structured career development paths and mentorship programs.",
                rationale=(
                    "{frequency} employees feel stuck in their careers. A development "
                    "program can provide clear paths forward."
                ),
                estimated_impact=20,
                effort_level="high",
                timeline="6-8 weeks",
                quick_win=False,
                trigger_keywords=("stuck", "stagnant", "dead end"),
                action_steps=(
                    "Define career paths for each role",
                    "Create mentorship matching program",
                    "Develop training curriculum",
                    "Launch pilot program",
                    "Gather feedback and iterate",
                ),
                success_metrics=(
                    "Number of employees in mentorship program",
                    "Sentiment improvement in career growth theme",
                    "Internal promotion rate increase",
                ),
            ),
            InterventionTemplate(
                key="cg-2",
                title="Implement Quarterly Career Check-ins",
                description="Schedule regular one-on-ones focused on career goals and development.",
                rationale="Regular check-ins can help identify career concerns early and provide support.",
                estimated_impact=10,
                effort_level="low",
                timeline="2 weeks",
                quick_win=True,
                action_steps=(
                    "Create career check-in template",
                    "Train managers on conducting check-ins",
                    "Schedule first round of check-ins",
                    "Follow up on action items",
                ),
                success_metrics=(
                    "Completion rate of career check-ins",
                    "Employee satisfaction with check-ins",
                ),
            ),
        ),
    ),
    "communication": InterventionRule(
        theme_keywords=("communication", "transparency"),
        templates=(
            InterventionTemplate(
                key="comm-1",
                title="Improve Communication Transparency",
                description="Establish regular communication channels and transparent update processes.",
                rationale=(
                    "Employees mentioned lack of transparency in decision-making and "
                    "communication gaps."
                ),
                estimated_impact=15,
                effort_level="medium",
                timeline="3-4 weeks",
                quick_win=False,
                action_steps=(
                    "Create monthly all-hands meeting schedule",
                    "Establish internal communication channels",
                    "Implement decision-making transparency guidelines",
                    "Train leadership on transparent communication",
                ),
                success_metrics=(
                    "Employee attendance at all-hands meetings",
                    "Sentiment improvement in communication theme",
                ),
            ),
        ),
    ),
    "team-collaboration": InterventionRule(
        theme_keywords=("team", "collaboration"),
        templates=(
            InterventionTemplate(
                key="tc-1",
                title="Break Down Team Silos",
                description="Create cross-functional projects and regular team-building activities.",
                rationale="{frequency} employees mentioned silos affecting collaboration.",
                estimated_impact=18,
                effort_level="medium",
                timeline="4-6 weeks",
                quick_win=False,
                trigger_keywords=("silo", "isolation"),
                action_steps=(
                    "Identify key cross-functional opportunities",
                    "Create cross-team project teams",
                    "Schedule regular team-building events",
                    "Set up shared communication channels",
                ),
                success_metrics=(
                    "Number of cross-functional projects",
                    "Sentiment improvement in collaboration theme",
                ),
            ),
        ),
    ),
}

# Applied when no rule template fires for a theme; its impact is computed
# from the theme sentiment, so ``estimated_impact`` here is the floor.
GENERIC_INTERVENTION = InterventionTemplate(
    key="generic-1",
    title="Address {theme_name} Concerns",
    description="Take action to improve employee sentiment in {theme_name}.",
    rationale="{response_count} employees have expressed concerns about {theme_name}.",
    estimated_impact=5,
    effort_level="medium",
    timeline="4-6 weeks",
    quick_win=False,
    action_steps=(
        "Conduct focus group with affected employees",
        "Identify specific pain points",
        "Develop action plan",
        "Implement changes",
        "Monitor and adjust",
    ),
    success_metrics=(
        "Sentiment improvement in {theme_name}",
        "Reduction in negative mentions",
    ),
)

MEETING_QUICK_WIN = {
    "keyword": "meeting",
    "title": "Implement Meeting-Free Fridays",
    "description": "Designate Fridays as meeting-free days to reduce meeting overload.",
    "effort": "very_low",
    "impact": "high",
    "implementation_time": "1 week",
    "affected_theme": "Work-Life Balance",
}
