"""DBLP publication search crawling helpers."""

from __future__ import annotations

import logging
import os
import uuid
from typing import Any
from urllib.parse import parse_qs, urlparse

import requests

from models import Paper

# Public DBLP publication search API. The human-facing search page
# (https://dblp.org/search?q=...) accepts the same `q` syntax.
DBLP_API_URL = os.getenv("DBLP_API_URL", "https://dblp.org/search/publ/api")
DBLP_RESULT_CAP = int(os.getenv("DBLP_RESULT_CAP", "1000"))
REQUEST_TIMEOUT_SECONDS = 30

LOGGER = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """The search URL does not carry a usable query."""


class UpstreamError(RuntimeError):
    """The DBLP API could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def crawl(search_url: str, start_year: int, end_year: int) -> list[Paper]:
    """Fetch DBLP hits for the query in ``search_url`` published within a year range.

    Args:
        search_url: A DBLP search URL such as ``https://dblp.org/search?q=...``.
        start_year: First year to keep (inclusive).
        end_year: Last year to keep (inclusive).

    Returns:
        Idle, unanalyzed papers in the order DBLP returned them.

    Raises:
        InvalidInputError: ``search_url`` has no ``q`` parameter.
        UpstreamError: The API request failed or returned a non-2xx status.
    """
    query = extract_query(search_url)

    params = {"q": query, "format": "json", "h": DBLP_RESULT_CAP}
    try:
        response = requests.get(DBLP_API_URL, params=params, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise UpstreamError(f"DBLP API request failed: {exc}") from exc

    if not response.ok:
        raise UpstreamError(
            f"DBLP API Error: {response.status_code} {response.reason}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamError("DBLP API returned a non-JSON body", status_code=response.status_code) from exc

    hits = _locate_hits(payload)
    papers: list[Paper] = []
    for hit in hits:
        parsed = _parse_hit(hit)
        if parsed is None:
            continue
        paper, year = parsed
        if _in_range(year, start_year, end_year):
            papers.append(paper)

    LOGGER.info(
        "DBLP crawl: query=%r raw_count=%s start_year=%s end_year=%s returned=%s",
        query,
        len(hits),
        start_year,
        end_year,
        len(papers),
    )
    return papers


def extract_query(search_url: str) -> str:
    """Return the ``q`` parameter of a DBLP search URL."""
    try:
        parsed = urlparse(search_url)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid DBLP URL: {search_url!r}") from exc

    values = parse_qs(parsed.query).get("q")
    if not parsed.scheme or not values or not values[0].strip():
        raise InvalidInputError("Invalid DBLP URL: Could not find search query parameter 'q'.")
    return values[0]


def _locate_hits(payload: Any) -> list[Any]:
    """Return ``result.hits.hit`` or an empty list when the structure is absent."""
    if not isinstance(payload, dict):
        return []
    result = payload.get("result")
    hits = result.get("hits") if isinstance(result, dict) else None
    hit_list = hits.get("hit") if isinstance(hits, dict) else None
    return hit_list if isinstance(hit_list, list) else []


def _parse_hit(hit: Any) -> tuple[Paper, int | None] | None:
    if not isinstance(hit, dict) or not isinstance(hit.get("info"), dict):
        return None

    info = hit["info"]
    year_value = info.get("year")
    year_raw = str(year_value).strip() if isinstance(year_value, (str, int)) else ""
    paper = Paper(
        paper_id=_as_str(hit.get("@id")) or uuid.uuid4().hex,
        title=_as_str(info.get("title")) or "",
        authors=tuple(decode_authors(info.get("authors"))),
        year=year_raw,
        url=_as_str(info.get("url")),
    )
    return paper, _parse_year(year_raw)


def decode_authors(authors_block: Any) -> list[str]:
    """Normalize DBLP's author encodings to an ordered list of display names.

    DBLP serializes ``authors.author`` as a single object when a record has
    one author, as a list when it has several, and omits it entirely for
    records without authors.
    """
    if not isinstance(authors_block, dict):
        return []

    raw = authors_block.get("author")
    if raw is None:
        return []
    entries = raw if isinstance(raw, list) else [raw]

    names: list[str] = []
    for entry in entries:
        name = _as_str(entry.get("text")) if isinstance(entry, dict) else _as_str(entry)
        if name:
            names.append(name)
    return names


def _parse_year(raw: str) -> int | None:
    # Plain ASCII digits only; int() would also take "2_024" or non-ASCII numerals.
    if not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def _in_range(year: int | None, start_year: int, end_year: int) -> bool:
    # Records without a usable year cannot be placed in the window and are dropped.
    if year is None:
        LOGGER.debug("DBLP crawl: dropping record with unparseable year")
        return False
    return start_year <= year <= end_year


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
