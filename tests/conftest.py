"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from bibmerge.models import BibRecord, EntryType, SearchResult  # noqa: E402


@pytest.fixture
def make_record() -> Callable[..., BibRecord]:
    """Factory for test records with minimal boilerplate.

    Keyword arguments other than the named ones become fields; ``author``
    and ``editor`` accept a list of names.
    """

    def _factory(
        entry_type: EntryType | None = EntryType.ARTICLE,
        key: str | None = None,
        **fields: "str | list[str]",
    ) -> BibRecord:
        scalars = {name: value for name, value in fields.items() if isinstance(value, str)}
        persons = {
            name: tuple(value) for name, value in fields.items() if not isinstance(value, str)
        }
        return BibRecord(entry_type=entry_type, key=key, fields=scalars, person_fields=persons)

    return _factory


@pytest.fixture
def make_result() -> Callable[..., SearchResult]:
    """Factory wrapping a record into a search result."""

    def _factory(record: BibRecord, *sources: str, score: float = 1.0) -> SearchResult:
        return SearchResult(record=record, sources=frozenset(sources), score=score)

    return _factory


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding BibTeX and DBLP fixture files."""
    return Path(__file__).parent / "fixtures"
