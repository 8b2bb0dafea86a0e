"""Thin wrapper around the Anthropic Messages API with the web search server tool."""

from __future__ import annotations

import logging
import os

import anthropic

API_KEY_ENV = "ANTHROPIC_API_KEY"
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5")
CLAUDE_MAX_TOKENS = int(os.getenv("CLAUDE_MAX_TOKENS", "2048"))
WEB_SEARCH_MAX_USES = int(os.getenv("CLAUDE_WEB_SEARCH_MAX_USES", "5"))

LOGGER = logging.getLogger(__name__)


def generate_with_search(prompt: str, api_key: str) -> str | None:
    """Call Claude with web search allowed and return the concatenated text blocks.

    A searching reply interleaves ``server_tool_use`` and
    ``web_search_tool_result`` blocks with text; only the text is kept.
    """
    client = anthropic.Anthropic(api_key=api_key)
    LOGGER.debug("Calling Claude model=%s max_tokens=%s", CLAUDE_MODEL, CLAUDE_MAX_TOKENS)
    response = client.messages.create(
        model=CLAUDE_MODEL,
        max_tokens=CLAUDE_MAX_TOKENS,
        messages=[{"role": "user", "content": prompt}],
        tools=[
            {
                "type": "web_search_20250305",
                "name": "web_search",
                "max_uses": WEB_SEARCH_MAX_USES,
            }
        ],
    )
    text = "".join(block.text for block in response.content if block.type == "text")
    return text or None
