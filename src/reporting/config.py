"""Configuration constants for the insight report."""
from __future__ import annotations

import os

# Maximum number of emojis displayed in the sentiment bar
MAX_EMOJI_BAR: int = int(os.getenv("REPORT_MAX_EMOJI_BAR", "20"))

# Maximum bullet points shown for each list section
MAX_BULLETS_EACH: int = int(os.getenv("REPORT_MAX_BULLETS_EACH", "5"))

# Maximum number of themes to list in the report
MAX_THEMES: int = int(os.getenv("REPORT_MAX_THEMES", "5"))

# Maximum quotes shown per theme
MAX_QUOTES: int = int(os.getenv("REPORT_MAX_QUOTES", "3"))

# Emerging-topic window in days
EMERGING_DAYS: int = int(os.getenv("REPORT_EMERGING_DAYS", "14"))

# Ask OpenAI for an executive paragraph (off unless explicitly enabled)
AI_SUMMARY: bool = os.getenv("REPORT_AI_SUMMARY", "false").lower() in {
    "1",
    "true",
    "yes",
    "on",
}
