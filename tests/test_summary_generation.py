"""Tests for generate_summary utility."""
from __future__ import annotations

import pytest

import src.analysis.summary as sm
from src.analysis.narrative import NarrativeSummary
from src.analysis.themes import ThemeInsight

NARRATIVE = NarrativeSummary(
    overview="Based on 3 employee conversations...",
    key_insights=["Top concern: Workload (35.0/100)"],
)
THEMES = [ThemeInsight("t1", "Workload", 3, 35.0)]


@pytest.fixture(autouse=True)
def patch_chat(monkeypatch):
    def _fake_chat(*_, **__):  # type: ignore[override]
        return {"choices": [{"message": {"content": "  Workload is the main concern.  "}}]}

    monkeypatch.setattr(sm, "chat_completion", _fake_chat)
    yield


def test_generate_summary_normal():
    assert sm.generate_summary(NARRATIVE, THEMES) == "Workload is the main concern."


def test_generate_summary_without_themes():
    assert sm.generate_summary(NARRATIVE, []) == ""


def test_prompt_mentions_themes_and_findings(monkeypatch):
    seen = {}

    def _capture(messages, **kwargs):
        seen["prompt"] = messages[1]["content"]
        return {"choices": [{"message": {"content": "ok"}}]}

    monkeypatch.setattr(sm, "chat_completion", _capture)
    sm.generate_summary(NARRATIVE, THEMES)

    assert "Workload: 3 responses, sentiment 35/100" in seen["prompt"]
    assert "Top concern: Workload" in seen["prompt"]


def test_truncation(monkeypatch):
    long_text = "a" * 1000

    def _fake_long(*_, **__):  # type: ignore[override]
        return {"choices": [{"message": {"content": long_text}}]}

    monkeypatch.setattr(sm, "chat_completion", _fake_long)
    truncated = sm.generate_summary(NARRATIVE, THEMES)
    assert truncated.endswith("…")
    assert len(truncated) <= 901  # <= max_length_chars + ellipsis


def test_retries_then_raises(monkeypatch):
    calls = []

    def _boom(*_, **__):
        calls.append(1)
        raise ConnectionError("network down")

    monkeypatch.setattr(sm, "chat_completion", _boom)

    with pytest.raises(RuntimeError):
        sm.generate_summary(NARRATIVE, THEMES)
    assert len(calls) == 2


def test_second_attempt_succeeds(monkeypatch):
    responses = iter([TimeoutError("slow"), "Recovered."])

    def _flaky(*_, **__):
        outcome = next(responses)
        if isinstance(outcome, Exception):
            raise outcome
        return {"choices": [{"message": {"content": outcome}}]}

    monkeypatch.setattr(sm, "chat_completion", _flaky)
    assert sm.generate_summary(NARRATIVE, THEMES) == "Recovered."
