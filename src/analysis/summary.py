"""Optional executive paragraph written by an LLM from the analysis output."""
from __future__ import annotations

import logging
from typing import List, Sequence

from src.analysis.narrative import NarrativeSummary
from src.analysis.themes import ThemeInsight
from src.openai_client import chat_completion

_logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are a helpful assistant writing for an HR leadership audience. "
    "You receive aggregated findings from anonymous employee conversations. "
    "Write a concise executive summary (<=150 words, neutral tone) covering "
    "overall sentiment, the main concerns and what is working well. Do not "
    "invent numbers and do not attribute statements to individuals."
)


def _build_user_prompt(
    narrative: NarrativeSummary, themes: Sequence[ThemeInsight]
) -> str:
    theme_lines = (
        "\n".join(
            f"- {t.theme_name}: {t.response_count} responses, "
            f"sentiment {t.avg_sentiment:.0f}/100"
            for t in themes
        )
        if themes
        else "(no themes)"
    )
    findings = "\n".join(
        f"- {line}"
        for line in [*narrative.key_insights, *narrative.top_concerns, *narrative.positive_aspects]
    )
    return (
        f"Overview:\n{narrative.overview}\n\n"
        f"Themes:\n{theme_lines}\n\n"
        f"Findings:\n{findings}\n\n"
        "Please produce the summary paragraph."
    )


def generate_summary(
    narrative: NarrativeSummary,
    themes: Sequence[ThemeInsight] = (),
    *,
    max_tokens: int = 250,
    temperature: float = 0.4,
    max_length_chars: int = 900,
) -> str:
    """Generate an executive paragraph for *narrative* and *themes*.

    Returns an empty string when there are no themes to talk about.
    Raises RuntimeError after two failed attempts.
    """

    if not themes:
        return ""

    messages: List[dict] = [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": _build_user_prompt(narrative, themes)},
    ]

    attempts = 0
    while attempts < 2:
        attempts += 1
        try:
            resp = chat_completion(
                messages, temperature=temperature, max_tokens=max_tokens
            )
            content: str = resp["choices"][0]["message"]["content"].strip()
            if len(content) > max_length_chars:
                content = content[:max_length_chars].rstrip() + "…"
            return content
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Summary generation attempt %d failed: %s", attempts, exc)
            if attempts >= 2:
                raise RuntimeError("OpenAI summary generation failed") from exc
    return ""
