"""Render insight reports using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from src.pipeline import PipelineResult
from src.reporting.context import build_report_context

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Markdown templates don’t need HTML escaping – it breaks apostrophes etc.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_report(
    result: PipelineResult,
    *,
    title: str = "Employee Conversation Insights",
    ai_summary: Optional[bool] = None,
) -> str:
    """Render a markdown report from a :class:`PipelineResult`."""

    context = build_report_context(result, title=title, ai_summary=ai_summary)

    template = _env.get_template("report.md.j2")
    text = template.render(**context.to_dict())
    logger.debug("Report rendered: %d themes, %d chars", len(context.themes), len(text))
    return text
