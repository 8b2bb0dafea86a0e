"""Per-paper technical metadata extraction with a search-grounded LLM."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import replace
from json import JSONDecodeError
from types import ModuleType
from typing import Any, Callable

import anthropic_client
import gemini_client
import llm_client
import perplexity_client
from models import ANALYSIS_FAILED, ArchitectureType, Paper, PaperStatus

EXTRACTION_PROVIDER = os.getenv("EXTRACTION_PROVIDER", "gemini")

LOGGER = logging.getLogger(__name__)

PROVIDERS: dict[str, ModuleType] = {
    "gemini": gemini_client,
    "perplexity": perplexity_client,
    "openai": llm_client,
    "anthropic": anthropic_client,
}

# JSON key -> Paper field for the free-text attributes.
_TEXT_FIELDS: dict[str, str] = {
    "dataSplit": "data_split",
    "annotationType": "annotation_type",
    "resultsSummary": "results_summary",
    "innovationPoint": "innovation_point",
}

_LIST_FIELDS: dict[str, str] = {
    "datasets": "datasets",
    "metrics": "metrics",
}

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

_PROMPT_TEMPLATE = """Conduct a technical analysis of the paper titled "{title}" (Authors: {authors}).

Search for the paper's abstract, methodology, and experimental results online.
Extract the following attributes:
1. Architecture Type: Is the proposed method based on CNN, Transformer, or a Hybrid of both?
2. Datasets: Which specific datasets were used for training and evaluation?
3. Data Split: How was the data divided for training/testing (e.g., 80/20, 50/50, cross-validation)?
4. Data Annotation: What is the annotation form (e.g., pixel-level mask, bounding box, centroid)?
5. Metrics: Which evaluation metrics were reported (e.g., IoU, nIoU, Pd, Fa, mAP)?
6. Results: Briefly summarize the quantitative performance (e.g., "Achieved 78.5% IoU").
7. Innovation Point: Which part of the network architecture does the main contribution target
   (e.g., feature extraction backbone, neck/fusion module, attention mechanism, detection head)?

OUTPUT FORMAT:
Strictly return a valid JSON object with the following keys:
- "architecture": "CNN", "Transformer", "Hybrid", or "Other"
- "datasets": array of strings
- "dataSplit": string
- "annotationType": string
- "metrics": array of strings
- "resultsSummary": string
- "innovationPoint": string

Do not include any markdown formatting or explanation outside the JSON.
"""


class JSONRecoveryError(ValueError):
    """No JSON object could be recovered from model output."""


def build_prompt(paper: Paper) -> str:
    return _PROMPT_TEMPLATE.format(title=paper.title, authors=", ".join(paper.authors))


class ProviderConfigError(RuntimeError):
    """The extraction provider is unknown or its credential is not configured."""


def resolve_provider(provider: str | None = None) -> tuple[str, ModuleType, str]:
    """Return ``(name, client module, api key)`` for the selected provider.

    Raises:
        ProviderConfigError: Unknown provider name or missing credential.
    """
    name = (provider or EXTRACTION_PROVIDER).strip().lower()
    client = PROVIDERS.get(name)
    if client is None:
        raise ProviderConfigError(f"Unknown extraction provider {name!r}; expected one of {sorted(PROVIDERS)}")

    api_key = os.getenv(client.API_KEY_ENV)
    if not api_key:
        raise ProviderConfigError(f"{client.API_KEY_ENV} environment variable is required")
    return name, client, api_key


def analyze(paper: Paper, provider: str | None = None) -> Paper:
    """Extract technical metadata for one paper and merge it onto the record.

    Extraction failures never propagate: the returned record carries
    ``status=error`` and ``results_summary="Analysis Failed"`` instead.
    Papers already done or failed are returned unchanged. The only error
    raised is ProviderConfigError, before any prompt is built.
    """
    name, client, api_key = resolve_provider(provider)

    if paper.status in (PaperStatus.DONE, PaperStatus.ERROR):
        LOGGER.warning("Skipping paper_id=%s already in status %s", paper.paper_id, paper.status.value)
        return paper

    working = paper.with_status(PaperStatus.ANALYZING) if paper.status is PaperStatus.IDLE else paper

    LOGGER.info("Analyzing paper with %s: %s", name, paper.title)
    try:
        prompt = build_prompt(working)
        text = client.generate_with_search(prompt, api_key)
        if not text:
            raise RuntimeError("No analysis generated")

        extracted = sanitize_extraction(recover_json(text))
        analyzed = merge_extraction(working, extracted)
    except Exception:  # one paper's failure must not abort its batch
        LOGGER.exception("Analysis failed for paper_id=%s", paper.paper_id)
        return replace(working, status=PaperStatus.ERROR, results_summary=ANALYSIS_FAILED)

    LOGGER.info("Analysis succeeded for paper_id=%s architecture=%s", paper.paper_id, analyzed.architecture.value)
    return analyzed


def recover_json(text: str) -> dict[str, Any]:
    """Recover a JSON object from model output that may be wrapped in prose or fences.

    Candidates are tried strictly-to-permissively and the first one that
    decodes to an object wins: the whole text, the interior of the first
    fenced code block, then the span from the first ``{`` to the last ``}``.
    """
    for stage, locate in _RECOVERY_STAGES:
        candidate = locate(text)
        if candidate is None:
            continue
        parsed = _loads_object(candidate)
        if parsed is not None:
            LOGGER.debug("Recovered JSON via %s stage", stage)
            return parsed
    raise JSONRecoveryError("Failed to parse JSON from response")


def _whole_text(text: str) -> str | None:
    return text


def _fenced_block(text: str) -> str | None:
    match = _FENCE_RE.search(text)
    return match.group(1) if match and match.group(1) else None


def _brace_span(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


_RECOVERY_STAGES: tuple[tuple[str, Callable[[str], str | None]], ...] = (
    ("direct", _whole_text),
    ("fenced", _fenced_block),
    ("brace", _brace_span),
)


def _loads_object(candidate: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(candidate)
    except JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def sanitize_extraction(data: dict[str, Any]) -> dict[str, Any]:
    """Force ``datasets`` and ``metrics`` to be lists of strings."""
    sanitized = dict(data)
    for key in _LIST_FIELDS:
        value = data.get(key)
        sanitized[key] = _as_str_list(value) if isinstance(value, list) else []
    return sanitized


def merge_extraction(paper: Paper, data: dict[str, Any]) -> Paper:
    """Overlay sanitized extraction output onto ``paper`` and mark it done."""
    updates: dict[str, Any] = {"is_analyzed": True, "status": PaperStatus.DONE}

    if "architecture" in data:
        updates["architecture"] = parse_architecture(data["architecture"])
    for key, field_name in _LIST_FIELDS.items():
        if key in data:
            updates[field_name] = tuple(data[key])
    for key, field_name in _TEXT_FIELDS.items():
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            updates[field_name] = value.strip()

    return replace(paper, **updates)


def parse_architecture(value: Any) -> ArchitectureType:
    """Map a model-supplied architecture label onto ArchitectureType."""
    if not isinstance(value, str):
        return ArchitectureType.OTHER
    label = value.strip().lower()
    for member in ArchitectureType:
        if member.value.lower() == label:
            return member
    return ArchitectureType.OTHER


def _as_str_list(values: list[Any]) -> list[str]:
    items: list[str] = []
    for value in values:
        if value is None:
            continue
        text = value.strip() if isinstance(value, str) else str(value)
        if text:
            items.append(text)
    return items
