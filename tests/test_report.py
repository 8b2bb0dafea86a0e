from __future__ import annotations

import csv
from pathlib import Path

from models import ArchitectureType, Paper, PaperStatus
from report import architecture_distribution, generate_report, processing_status


def _done(paper_id: str, architecture: ArchitectureType) -> Paper:
    return Paper(
        paper_id=paper_id,
        title=f"Paper {paper_id}",
        architecture=architecture,
        is_analyzed=True,
        status=PaperStatus.DONE,
    )


PAPERS = [
    _done("1", ArchitectureType.CNN),
    _done("2", ArchitectureType.CNN),
    _done("3", ArchitectureType.HYBRID),
    _done("4", ArchitectureType.OTHER),
    Paper(paper_id="5", title="Idle"),
    Paper(paper_id="6", title="Failed", status=PaperStatus.ERROR, results_summary="Analysis Failed"),
]


def test_architecture_distribution_omits_empty_buckets() -> None:
    assert architecture_distribution(PAPERS) == {"CNN": 2, "Hybrid": 1}


def test_architecture_distribution_ignores_unanalyzed() -> None:
    unanalyzed = Paper(paper_id="x", title="x", architecture=ArchitectureType.TRANSFORMER)
    assert architecture_distribution([unanalyzed]) == {}


def test_processing_status_counts() -> None:
    status = processing_status(PAPERS)
    assert status["analyzed"] == 4
    assert status["total"] == 6
    assert status["percent_analyzed"] == 66.7
    assert status["by_status"] == {"idle": 1, "analyzing": 0, "done": 4, "error": 1}


def test_processing_status_empty() -> None:
    status = processing_status([])
    assert status["total"] == 0
    assert status["percent_analyzed"] == 0.0


def test_generate_report_writes_table(tmp_path: Path) -> None:
    output = generate_report(PAPERS, tmp_path / "report.csv")

    with output.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))

    table = {(r["section"], r["label"]): r["value"] for r in rows}
    assert table[("architecture", "CNN")] == "2"
    assert ("architecture", "Transformer") not in table
    assert table[("progress", "analyzed")] == "4"
    assert table[("status", "error")] == "1"
