"""Phrases that recur across several separate conversations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set

from src import constants
from src.analysis import lexicon
from src.analysis.themes import Quote, extract_quotes
from src.records import Response, Session

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PatternInsight:
    pattern: str
    frequency: int  # number of sessions mentioning the phrase
    affected_themes: List[str] = field(default_factory=list)
    representative_quotes: List[Quote] = field(default_factory=list)
    correlation_strength: float = 0.0


def find_cross_conversation_patterns(
    responses: Sequence[Response],
    sessions: Sequence[Session],
    *,
    min_sessions: int = constants.MIN_PATTERN_SESSIONS,
    limit: int = constants.MAX_CROSS_PATTERNS,
) -> List[PatternInsight]:
    """Return two-word phrases used in at least *min_sessions* conversations."""

    conversation_ids = {r.session_id for r in responses}
    phrase_sessions: Dict[str, Set[str]] = {}
    phrase_responses: Dict[str, List[Response]] = {}

    for response in responses:
        words = response.content.lower().split()
        for first, second in zip(words, words[1:]):
            phrase = f"{first} {second}"
            if len(phrase) <= 5 or first in lexicon.PHRASE_STOP_WORDS:
                continue
            phrase_sessions.setdefault(phrase, set()).add(response.session_id)
            phrase_responses.setdefault(phrase, []).append(response)

    patterns = []
    for phrase, session_ids in phrase_sessions.items():
        if len(session_ids) < min_sessions:
            continue
        matched = phrase_responses[phrase]
        themes = list(dict.fromkeys(r.theme_id for r in matched if r.theme_id))
        patterns.append(
            PatternInsight(
                pattern=phrase,
                frequency=len(session_ids),
                affected_themes=themes,
                representative_quotes=extract_quotes(matched, sessions)[:3],
                correlation_strength=len(session_ids) / len(conversation_ids),
            )
        )

    patterns.sort(key=lambda p: p.frequency, reverse=True)
    logger.debug("Found %d cross-conversation patterns", len(patterns))
    return patterns[:limit]
