"""OpenAI client using the Responses API with the hosted web search tool."""

from __future__ import annotations

import logging
import os

from openai import OpenAI

API_KEY_ENV = "OPENAI_API_KEY"
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1")

LOGGER = logging.getLogger(__name__)


def generate_with_search(prompt: str, api_key: str) -> str | None:
    """Run ``prompt`` with web search enabled and return the aggregated output text."""
    client = OpenAI(api_key=api_key)
    LOGGER.debug("Calling OpenAI model=%s with web_search tool", OPENAI_MODEL)
    response = client.responses.create(
        model=OPENAI_MODEL,
        tools=[{"type": "web_search"}],
        input=prompt,
    )
    return response.output_text
