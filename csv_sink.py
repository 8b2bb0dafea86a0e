"""CSV export of crawled and analyzed papers."""

from __future__ import annotations

import csv
import io
import logging
import os
from pathlib import Path
from typing import Iterable

from models import Paper

CSV_OUTPUT_PATH = os.getenv("CSV_OUTPUT_PATH", "papers_analysis.csv")

LOGGER = logging.getLogger(__name__)

CSV_COLUMNS = [
    "Title",
    "Year",
    "Authors",       # comma-joined
    "Architecture",
    "Datasets",      # comma-joined
    "Split",
    "Annotation",
    "Metrics",       # comma-joined
    "Results",
    "Innovation",
]

_LIST_SEPARATOR = ", "


def paper_to_row(paper: Paper) -> list[str]:
    """Flatten a paper into CSV cells, in CSV_COLUMNS order."""
    return [
        paper.title,
        paper.year,
        _LIST_SEPARATOR.join(paper.authors),
        paper.architecture.value,
        _LIST_SEPARATOR.join(paper.datasets),
        paper.data_split,
        paper.annotation_type,
        _LIST_SEPARATOR.join(paper.metrics),
        paper.results_summary,
        paper.innovation_point,
    ]


def export_csv(papers: Iterable[Paper]) -> str:
    """Render papers as CSV text with every cell quoted and quotes doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for paper in papers:
        writer.writerow(paper_to_row(paper))
    return buffer.getvalue()


def write_csv(papers: Iterable[Paper], path: str | Path | None = None) -> Path:
    """Write (overwrite) the CSV export and return the path written."""
    papers = list(papers)
    output = Path(path or CSV_OUTPUT_PATH)
    output.write_text(export_csv(papers), encoding="utf-8")
    LOGGER.info("Wrote %s CSV rows to %s", len(papers), output)
    return output


def read_csv(path: str | Path | None = None) -> list[dict[str, str]]:
    """Read an export back as one dict per row keyed by column name."""
    with Path(path or CSV_OUTPUT_PATH).open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))
