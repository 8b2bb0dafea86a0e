"""Perplexity API client; sonar models ground every answer in a live web search."""

from __future__ import annotations

import logging
import os

import requests

API_KEY_ENV = "PERPLEXITY_API_KEY"
PERPLEXITY_API_URL = "https://api.perplexity.ai/chat/completions"
PERPLEXITY_MODEL = os.getenv("PERPLEXITY_MODEL", "sonar-pro")
PERPLEXITY_TEMPERATURE = float(os.getenv("PERPLEXITY_TEMPERATURE", "0.1"))
REQUEST_TIMEOUT_SECONDS = 60

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a meticulous research assistant. Search the web for the paper you are "
    "asked about and answer only with the JSON object requested, no extra text."
)


def generate_with_search(prompt: str, api_key: str) -> str | None:
    """Send ``prompt`` to Perplexity and return the assistant message text."""
    payload = {
        "model": PERPLEXITY_MODEL,
        "temperature": PERPLEXITY_TEMPERATURE,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    LOGGER.debug("Calling Perplexity model=%s", PERPLEXITY_MODEL)
    response = requests.post(
        PERPLEXITY_API_URL,
        headers=headers,
        json=payload,
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    body = response.json()

    try:
        return body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise RuntimeError(f"Unexpected Perplexity response shape: {body}") from exc
