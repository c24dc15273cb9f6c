"""Tests for the result store."""

from collections.abc import Callable

import pytest

from bibmerge.consolidate import ResultStore
from bibmerge.models import BibRecord, EntryType, SearchResult


@pytest.fixture
def store(
    make_record: Callable[..., BibRecord],
    make_result: Callable[..., SearchResult],
) -> ResultStore:
    """Store with three results, the first from the managed file."""
    return ResultStore(
        [
            make_result(
                make_record(
                    title="Types", author=["John Smith"], journal="CACM", year="2012", doi="d/1"
                ),
                "managed",
                "dblp",
            ),
            make_result(make_record(title="Proofs", author=["Anna Lee"]), "local", score=0.8),
            make_result(
                make_record(entry_type=EntryType.MISC, title="Notes", year="2001"),
                "dblp",
                score=0.5,
            ),
        ]
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    ("selector", "expected"),
    [("*", [0, 1, 2]), ("1", [1]), (" 2 ", [2]), ("0-1", [0, 1]), ("1-1", [1])],
)
def test_select_valid(store: ResultStore, selector: str, expected: list[int]) -> None:
    """Test all, single and range selectors."""
    selected = store.select(selector)

    assert selected == [store.results[i] for i in expected]


@pytest.mark.unit
@pytest.mark.parametrize("selector", ["3", "2-1", "0-3", "a", "-1", "", "1,2"])
def test_select_invalid(store: ResultStore, selector: str) -> None:
    """Test out-of-range and malformed selectors select nothing."""
    assert store.select(selector) is None


@pytest.mark.unit
def test_summary_lines(store: ResultStore) -> None:
    """Test managed and invalid markers."""
    lines = store.summary_lines()

    assert lines[0] == '[0  m ] J. Smith, "Types", CACM, 2012'
    assert lines[1] == '[1   !] A. Lee, "Proofs", ?, ?'
    assert lines[2].startswith("[2    ] ")


@pytest.mark.unit
def test_summary_lines_empty() -> None:
    """Test an empty store reports no match."""
    assert ResultStore().summary_lines() == ["No match"]


@pytest.mark.unit
def test_summary_index_spacing(
    make_record: Callable[..., BibRecord],
    make_result: Callable[..., SearchResult],
) -> None:
    """Test two-digit indices drop the padding space."""
    results = [make_result(make_record(entry_type=None, title=f"T{i}")) for i in range(11)]

    lines = ResultStore(results).summary_lines()

    assert lines[9].startswith("[9    ]")
    assert lines[10].startswith("[10   ]")


@pytest.mark.unit
def test_replace_by_equivalence(
    store: ResultStore,
    make_record: Callable[..., BibRecord],
    make_result: Callable[..., SearchResult],
) -> None:
    """Test selected results are replaced by equivalent new results only."""
    updated = make_result(
        make_record(title="Proofs", author=["Anna Lee"], journal="J"), "local"
    )
    unrelated = make_result(make_record(title="Other", author=["X Y"]), "local")

    assert store.replace("*", [unrelated, updated])

    assert store.results[1] is updated
    assert unrelated not in store.results
    assert len(store) == 3


@pytest.mark.unit
def test_replace_respects_selection(
    store: ResultStore,
    make_record: Callable[..., BibRecord],
    make_result: Callable[..., SearchResult],
) -> None:
    """Test unselected results are never replaced."""
    original = store.results
    updated = make_result(make_record(title="Proofs", author=["Anna Lee"], note="n"), "local")

    assert store.replace("0", [updated])
    assert store.results == original

    assert not store.replace("9", [updated])


@pytest.mark.unit
def test_set_results(store: ResultStore) -> None:
    """Test the result list can be replaced wholesale."""
    store.set_results([])

    assert len(store) == 0


@pytest.mark.unit
def test_show_renders_selected_entries(store: ResultStore) -> None:
    """Test show gives the BibTeX block of each selected result."""
    blocks = store.show("1-2")

    assert blocks is not None
    assert blocks[0] == (
        "@article{LeeProofs,\n         title = {Proofs},\n        author = {Anna Lee}\n}"
    )
    assert blocks[1].startswith("@misc{01Notes,\n")
    assert store.show("7") is None
