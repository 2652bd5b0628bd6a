"""Fallback values and product thresholds shared by the insight pipeline.

Every number here is visible to HR users somewhere (a score, a band, an
insight trigger), so the analysis modules import them from this one place
instead of repeating literals.
"""
from __future__ import annotations

# Sentiment scale
NEUTRAL_SENTIMENT: float = 50.0
RISK_DEFAULT_SENTIMENT: float = 30.0
SENTIMENT_MIN: float = 0.0
SENTIMENT_MAX: float = 100.0
# Raw scores at or below this value are on the 0–1 scale
UNIT_SCALE_CEILING: float = 1.0

# Quote / context lengths (characters)
QUOTE_MIN_LENGTH: int = 20
SUB_THEME_QUOTE_MAX_LENGTH: int = 200
DRIVER_CONTEXT_MAX_LENGTH: int = 150
EVIDENCE_MAX_LENGTH: int = 200
TOPIC_QUOTE_MIN_LENGTH: int = 30
TOPIC_QUOTE_MAX_LENGTH: int = 200
MEANINGFUL_RESPONSE_LENGTH: int = 50
ELABORATION_FULL_LENGTH: float = 200.0

# Result caps
MAX_THEME_QUOTES: int = 10
MAX_THEME_DRIVERS: int = 5
MAX_SENTIMENT_DRIVERS: int = 10
MAX_SUB_THEME_QUOTES: int = 3
MAX_DRIVER_CONTEXTS: int = 3
MAX_TOPIC_QUOTES: int = 5
MAX_SEMANTIC_CONTEXTS: int = 5
MAX_PATTERN_EVIDENCE: int = 5
MAX_CROSS_PATTERNS: int = 10
MIN_PATTERN_SESSIONS: int = 3

# Conversation quality
DEFAULT_DURATION_MINUTES: float = 0.0
DEPTH_FULL_THEMES: int = 5
ENGAGEMENT_FULL_EXCHANGES: int = 10
HIGH_DEPTH_THEMES: int = 3
HIGH_ENGAGEMENT_EXCHANGES: int = 8
FOLLOW_UP_FALLBACK_LENGTH: float = 50.0
FOLLOW_UP_FALLBACK_HIGH: float = 75.0
FOLLOW_UP_FALLBACK_LOW: float = 50.0
MOOD_TRACKING_BONUS: float = 10.0

CONFIDENCE_HIGH: float = 75.0
CONFIDENCE_MEDIUM: float = 50.0

QUALITY_EXCELLENT: float = 80.0
QUALITY_GOOD: float = 60.0
QUALITY_FAIR: float = 40.0

# Quality insight triggers
LOW_CONFIDENCE_SHARE_CONCERN: float = 30.0
AVG_CONFIDENCE_STRENGTH: float = 75.0
COMPLETION_RATE_CONCERN: float = 70.0
THEMES_EXPLORED_CONCERN: float = 2.0
FOLLOW_UP_CONCERN: float = 60.0
FOLLOW_UP_STRENGTH: float = 80.0
POOR_QUALITY_SHARE_CONCERN: float = 20.0

# NLP
EMOTION_FALLBACK_SCORE: float = 0.5
EMOTION_SATISFIED_FLOOR: float = 70.0
EMOTION_FRUSTRATED_CEILING: float = 30.0
CONFIDENT_EMOTION_THRESHOLD: float = 60.0
EMERGING_WINDOW_DAYS: int = 14
EMERGING_RATIO: float = 1.5
EMERGING_MIN_FREQUENCY: int = 3
EMERGING_CONFIDENCE_BOOST: float = 20.0
MAX_NLP_TOPICS: int = 15
MAX_NLP_PATTERNS: int = 10
MAX_EMERGING_TOPICS: int = 5

# Culture
RISK_MIN_MATCHES: int = 3
RISK_CRITICAL: int = 10
RISK_HIGH: int = 5
RISK_MEDIUM: int = 3
CULTURE_BASE_SCORE: float = 25.0
IMPROVING_SENTIMENT: float = 70.0
DECLINING_SENTIMENT: float = 40.0
UNKNOWN_GROUP: str = "Unknown"
MAX_CULTURE_PATTERNS: int = 20
MAX_CULTURE_STRENGTHS: int = 10
MAX_CULTURE_RISKS: int = 10

# Actionable intelligence
CONCERNING_THEME_SENTIMENT: float = 60.0
LOW_SUB_THEME_SENTIMENT: float = 50.0
QUICK_WIN_HIGH_IMPACT: float = 15.0
MEETING_DRIVER_MIN_FREQUENCY: int = 3
MEETING_DRIVER_MAX_IMPACT: float = -10.0
MAX_MEETING_DRIVERS: int = 5

# Narrative
CONCERN_THEME_SENTIMENT: float = 50.0
POSITIVE_THEME_SENTIMENT: float = 70.0
STRONG_FOLLOW_UP_RATIO: float = 0.5
