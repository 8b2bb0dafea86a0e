"""Google Gemini client with Google Search grounding."""

from __future__ import annotations

import logging
import os

from google import genai
from google.genai import types

API_KEY_ENV = "GEMINI_API_KEY"
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.1"))

LOGGER = logging.getLogger(__name__)


def generate_with_search(prompt: str, api_key: str) -> str | None:
    """Run ``prompt`` through Gemini with the Google Search tool enabled.

    Search grounding cannot be combined with ``response_schema`` /
    ``response_mime_type``, so the reply is free text that callers must parse.
    """
    client = genai.Client(api_key=api_key)
    LOGGER.debug("Calling Gemini model=%s with google_search tool", GEMINI_MODEL)
    response = client.models.generate_content(
        model=GEMINI_MODEL,
        contents=prompt,
        config=types.GenerateContentConfig(
            temperature=GEMINI_TEMPERATURE,
            tools=[types.Tool(google_search=types.GoogleSearch())],
        ),
    )
    return response.text
