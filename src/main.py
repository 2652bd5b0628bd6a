"""
Command-line interface for the conversation insights pipeline.

Usage:
    insights report DATA.json                  # markdown report to stdout
    insights report DATA.json --json -o out.json
    insights report DATA.json --survey s1 --since 2025-01-01

DATA.json holds ``{"responses": [...], "sessions": [...], "themes": {...}}``
where ``themes`` maps theme ids to display names.
"""
from __future__ import annotations

import datetime
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import click
from dotenv import load_dotenv

from src.exceptions import InvalidRecordError
from src.record_store import ThreadSafeRecordStore
from src.records import parse_response, parse_session, parse_timestamp

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    level = "DEBUG" if debug else os.environ.get("INSIGHTS_LOG_LEVEL", "INFO")
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=level
    )


def load_dataset(payload: Mapping[str, Any]) -> Tuple[ThreadSafeRecordStore, Dict[str, str]]:
    """Parse a JSON dataset into a record store and a theme-name mapping.

    Raises
    ------
    InvalidRecordError
        If any response or session is malformed.
    ValueError
        If a record id appears twice.
    """

    store = ThreadSafeRecordStore()
    store.load(
        (parse_session(s) for s in payload.get("sessions", [])),
        (parse_response(r) for r in payload.get("responses", [])),
    )

    raw_themes = payload.get("themes") or {}
    if isinstance(raw_themes, list):
        theme_names = {str(t["id"]): str(t["name"]) for t in raw_themes}
    else:
        theme_names = {str(k): str(v) for k, v in raw_themes.items()}
    return store, theme_names


def _parse_date(value: Optional[str], option: str, *, end_of_day: bool = False):
    """Parse a date option; with *end_of_day* a bare date means 23:59:59.999999."""
    if value is None:
        return None
    try:
        parsed = parse_timestamp(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=option) from exc
    if end_of_day and "T" not in value and len(value.strip()) == 10:
        parsed += datetime.timedelta(days=1, microseconds=-1)
    return parsed


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Conversation insights - analytics over employee feedback conversations."""
    load_dotenv()
    setup_logging(debug)


@main.command()
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--survey", "survey_id", default=None, help="Only this survey id")
@click.option("--theme", "theme_id", default=None, help="Only responses for this theme id")
@click.option("--since", default=None, help="ISO date/time lower bound (inclusive)")
@click.option(
    "--until",
    default=None,
    help="ISO date/time upper bound (inclusive; a bare date covers the whole day)",
)
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None
)
@click.option("--json", "as_json", is_flag=True, help="Dump the full analysis as JSON")
@click.option("--workers", default=0, help="Thread pool size for independent stages")
def report(
    data: Path,
    survey_id: Optional[str],
    theme_id: Optional[str],
    since: Optional[str],
    until: Optional[str],
    output: Optional[Path],
    as_json: bool,
    workers: int,
) -> None:
    """Analyse DATA and write a markdown report (or JSON with --json)."""
    from concurrent.futures import ThreadPoolExecutor

    from src.pipeline import run_pipeline
    from src.reporting import config
    from src.reporting.render import render_report

    start = _parse_date(since, "--since")
    end = _parse_date(until, "--until", end_of_day=True)

    try:
        payload = json.loads(data.read_text(encoding="utf-8"))
        store, theme_names = load_dataset(payload)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{data} is not valid JSON: {exc}") from exc
    except (InvalidRecordError, ValueError) as exc:
        # malformed records or duplicate ids
        raise click.ClickException(str(exc)) from exc

    responses = store.fetch_responses(survey_id, theme_id, start, end)
    sessions = store.fetch_sessions(survey_id, start, end)
    logger.info("Loaded %d responses and %d sessions", len(responses), len(sessions))

    if workers > 0:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            result = run_pipeline(
                responses,
                sessions,
                theme_names,
                executor,
                recent_days=config.EMERGING_DAYS,
            )
    else:
        result = run_pipeline(
            responses, sessions, theme_names, recent_days=config.EMERGING_DAYS
        )

    if as_json:
        text = json.dumps(result.to_dict(), indent=2, default=str, ensure_ascii=False)
    else:
        text = render_report(result)

    if output is None:
        click.echo(text)
    else:
        output.write_text(text, encoding="utf-8")
        click.echo(f"Report written to {output}")


if __name__ == "__main__":  # pragma: no cover
    main()
