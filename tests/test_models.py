import pytest

from models import NOT_EXTRACTED, ArchitectureType, Paper, PaperStatus


def test_paper_defaults_are_unanalyzed() -> None:
    paper = Paper(paper_id="p1", title="T")
    assert paper.status is PaperStatus.IDLE
    assert paper.is_analyzed is False
    assert paper.architecture is ArchitectureType.UNKNOWN
    assert paper.authors == () and paper.datasets == () and paper.metrics == ()
    assert paper.data_split == NOT_EXTRACTED
    assert paper.innovation_point == NOT_EXTRACTED


def test_done_requires_analyzed() -> None:
    with pytest.raises(ValueError, match="not analyzed"):
        Paper(paper_id="p1", title="T", status=PaperStatus.DONE)


def test_paper_is_hashable_with_sequence_fields() -> None:
    paper = Paper(paper_id="p1", title="T", authors=("A", "B"), datasets=("NUAA-SIRST",))
    same = Paper(paper_id="p1", title="T", authors=("A", "B"), datasets=("NUAA-SIRST",))

    assert hash(paper) == hash(same)
    assert len({paper, same}) == 1


@pytest.mark.parametrize(
    ("source", "target", "allowed"),
    [
        (PaperStatus.IDLE, PaperStatus.ANALYZING, True),
        (PaperStatus.IDLE, PaperStatus.DONE, False),
        (PaperStatus.IDLE, PaperStatus.ERROR, False),
        (PaperStatus.ANALYZING, PaperStatus.DONE, True),
        (PaperStatus.ANALYZING, PaperStatus.ERROR, True),
        (PaperStatus.ANALYZING, PaperStatus.IDLE, False),
        (PaperStatus.DONE, PaperStatus.IDLE, False),
        (PaperStatus.ERROR, PaperStatus.IDLE, False),
        (PaperStatus.ERROR, PaperStatus.ANALYZING, False),
    ],
)
def test_status_transitions(source: PaperStatus, target: PaperStatus, allowed: bool) -> None:
    assert source.can_transition_to(target) is allowed


def test_with_status_rejects_illegal_transition() -> None:
    analyzing = Paper(paper_id="p1", title="T").with_status(PaperStatus.ANALYZING)
    assert analyzing.status is PaperStatus.ANALYZING

    with pytest.raises(ValueError, match="analyzing -> idle"):
        analyzing.with_status(PaperStatus.IDLE)


def test_with_status_rejects_skipping_analysis() -> None:
    with pytest.raises(ValueError, match="idle -> error"):
        Paper(paper_id="p1", title="T").with_status(PaperStatus.ERROR)
