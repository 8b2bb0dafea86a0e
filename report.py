"""Post-run reporting: summary tables over the crawled and analyzed papers.

One output file is produced on every non-dry run:

  papers_report.csv: (section, label, value) table holding the
                      architecture distribution of analyzed papers and the
                      processing status of the whole crawl, so it opens
                      readably in Excel / Numbers / Google Sheets.
"""

from __future__ import annotations

import csv
import logging
import os
from collections import Counter
from pathlib import Path
from typing import Any, Iterable

from models import ArchitectureType, Paper, PaperStatus

LOGGER = logging.getLogger(__name__)

REPORT_PATH = os.getenv("REPORT_PATH", "papers_report.csv")

REPORT_COLUMNS = ["section", "label", "value"]

# Buckets charted in the architecture distribution.
CHARTED_ARCHITECTURES = (
    ArchitectureType.CNN,
    ArchitectureType.TRANSFORMER,
    ArchitectureType.HYBRID,
)


def architecture_distribution(papers: Iterable[Paper]) -> dict[str, int]:
    """Count analyzed papers per charted architecture, omitting empty buckets."""
    counts = Counter(p.architecture for p in papers if p.is_analyzed)
    return {arch.value: counts[arch] for arch in CHARTED_ARCHITECTURES if counts[arch] > 0}


def processing_status(papers: Iterable[Paper]) -> dict[str, Any]:
    papers = list(papers)
    analyzed = sum(1 for p in papers if p.is_analyzed)
    total = len(papers)
    by_status = Counter(p.status for p in papers)
    return {
        "analyzed": analyzed,
        "total": total,
        "percent_analyzed": round(100 * analyzed / max(total, 1), 1),
        "by_status": {status.value: by_status[status] for status in PaperStatus},
    }


def generate_report(papers: Iterable[Paper], path: str | Path | None = None) -> Path:
    """Write the summary table and log the headline numbers."""
    papers = list(papers)
    distribution = architecture_distribution(papers)
    status = processing_status(papers)

    rows: list[dict[str, Any]] = [
        {"section": "architecture", "label": label, "value": count}
        for label, count in distribution.items()
    ]
    rows.append({"section": "progress", "label": "analyzed", "value": status["analyzed"]})
    rows.append({"section": "progress", "label": "total", "value": status["total"]})
    rows.append({"section": "progress", "label": "percent_analyzed", "value": status["percent_analyzed"]})
    rows.extend(
        {"section": "status", "label": label, "value": count}
        for label, count in status["by_status"].items()
    )

    output = Path(path or REPORT_PATH)
    with output.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=REPORT_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)

    LOGGER.info(
        "report: analyzed=%s/%s architectures=%s -> %s",
        status["analyzed"],
        status["total"],
        distribution,
        output,
    )
    return output
