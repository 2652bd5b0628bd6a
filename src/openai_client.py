"""OpenAI client helper used by the optional executive summary.

Credentials and model selection come from the environment:

* ``OPENAI_API_KEY`` (required when a summary is requested)
* ``OPENAI_ORG`` (optional organisation id)
* ``INSIGHTS_OPENAI_MODEL`` (defaults to ``gpt-4.1``)
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gpt-4.1"

_client: Optional[OpenAI] = None


class OpenAIClientError(RuntimeError):
    """Raised when client configuration is invalid (e.g., missing API key)."""


def default_model() -> str:
    return os.getenv("INSIGHTS_OPENAI_MODEL") or _DEFAULT_MODEL


def get_openai_client() -> OpenAI:
    """Return a process-wide configured :class:`openai.OpenAI` client.

    Raises
    ------
    OpenAIClientError
        If ``OPENAI_API_KEY`` is missing or empty.
    """

    global _client
    if _client is not None:
        return _client

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise OpenAIClientError("OPENAI_API_KEY environment variable is not set.")

    _client = OpenAI(api_key=api_key, organization=os.getenv("OPENAI_ORG") or None)
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call re-reads the environment."""

    global _client
    _client = None


def chat_completion(
    messages: List[Dict[str, str]],
    *,
    model: Optional[str] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Run a chat completion and return a plain ``dict``.

    Parameters
    ----------
    messages
        Chat messages in OpenAI format.
    model
        Model id; falls back to :func:`default_model`.
    kwargs
        Additional parameters forwarded to ``chat.completions.create``.

    The result always has the shape
    ``{"choices": [{"message": {"content": ...}}], "model": ...}``.
    """

    client = get_openai_client()
    model = model or default_model()
    logger.debug("Requesting chat completion model=%s messages=%d", model, len(messages))

    completion = client.chat.completions.create(model=model, messages=messages, **kwargs)
    choices = [
        {"message": {"content": choice.message.content or ""}}
        for choice in completion.choices
    ]
    return {"choices": choices, "model": completion.model}
