"""Tests for the concurrent search runner."""

import json
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from bibmerge.audit import AuditLogger
from bibmerge.engine import SearchConfig, run_search
from bibmerge.models import BibRecord, SearchResult


class StaticProvider:
    """Provider returning fixed results."""

    def __init__(self, source: str, records: Sequence[BibRecord], score: float = 1.0) -> None:
        self.source = source
        self.records = list(records)
        self.score = score
        self.terms: list[Sequence[str]] = []

    def search(self, terms: Sequence[str]) -> list[SearchResult]:
        self.terms.append(terms)
        return [
            SearchResult(record=r, sources=frozenset({self.source}), score=self.score)
            for r in self.records
        ]


class FailingProvider:
    """Provider whose search raises."""

    source = "broken"

    def search(self, terms: Sequence[str]) -> list[SearchResult]:
        raise RuntimeError("index corrupted")


class BarrierProvider(StaticProvider):
    """Provider that only returns once all barrier parties are searching."""

    def __init__(self, source: str, barrier: threading.Barrier) -> None:
        super().__init__(source, [])
        self.barrier = barrier

    def search(self, terms: Sequence[str]) -> list[SearchResult]:
        self.barrier.wait(timeout=5)
        return super().search(terms)


@pytest.fixture
def types_records(make_record: Callable[..., BibRecord]) -> tuple[BibRecord, BibRecord]:
    """The same work as held locally and as found on DBLP."""
    local = make_record(key="Smith12", title="Types", author=["J. Smith"], year="2012")
    remote = make_record(title="Types", author=["John Smith"], year="2012", journal="CACM")
    return local, remote


@pytest.mark.unit
def test_results_consolidated_by_priority(types_records: tuple) -> None:
    """Test equivalent results merge and keep the higher-priority record."""
    local, remote = types_records
    providers = [StaticProvider("dblp", [remote], score=0.9), StaticProvider("local", [local], 0.7)]

    outcome = run_search(["types"], providers)

    assert len(outcome.results) == 1
    assert outcome.results[0].record == local
    assert outcome.results[0].sources == frozenset({"local", "dblp"})
    assert outcome.results[0].score == 0.9
    assert outcome.counts_by_source == {"dblp": 1, "local": 1}
    assert providers[0].terms == [["types"]]


@pytest.mark.unit
def test_custom_priority(types_records: tuple) -> None:
    """Test the configured priority decides which record is kept."""
    local, remote = types_records
    providers = [StaticProvider("local", [local]), StaticProvider("dblp", [remote])]

    outcome = run_search(["types"], providers, SearchConfig(source_priority=("dblp", "local")))

    assert outcome.results[0].record == remote


@pytest.mark.unit
def test_failing_provider_contributes_nothing(types_records: tuple) -> None:
    """Test one failing provider does not sink the search."""
    local, _ = types_records

    outcome = run_search(["types"], [FailingProvider(), StaticProvider("local", [local])])

    assert [r.record for r in outcome.results] == [local]
    assert outcome.failed_sources == ["broken"]
    assert "broken" not in outcome.counts_by_source


@pytest.mark.unit
def test_providers_run_concurrently() -> None:
    """Test all providers are searching at the same time."""
    barrier = threading.Barrier(3)
    providers = [BarrierProvider(tag, barrier) for tag in ("managed", "local", "dblp")]

    outcome = run_search(["x"], providers)

    assert outcome.results == []
    assert outcome.counts_by_source == {"managed": 0, "local": 0, "dblp": 0}


@pytest.mark.unit
def test_duplicate_source_tags_rejected() -> None:
    """Test two providers may not share a tag."""
    with pytest.raises(ValueError, match="Duplicate"):
        run_search(["x"], [StaticProvider("local", []), StaticProvider("local", [])])


@pytest.mark.unit
def test_no_providers() -> None:
    """Test an empty provider list gives no results."""
    assert run_search(["x"], []).results == []


@pytest.mark.unit
def test_audit_events(tmp_path: Path, types_records: tuple) -> None:
    """Test the run is traced stage by stage."""
    local, remote = types_records
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="r1", log_path=log_path) as logger:
        run_search(
            ["types"],
            [StaticProvider("local", [local]), StaticProvider("dblp", [remote]), FailingProvider()],
            logger=logger,
        )

    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    names = [e["event"] for e in events]

    assert names[0] == "run_started"
    assert names[-1] == "run_finished"
    assert names.count("source_searched") == 3
    assert "error" in names
    merged = [e for e in events if e["event"] == "records_merged"]
    assert merged[0]["key"] == "Smith12"
    assert merged[0]["data"]["sources"] == ["dblp", "local"]
    finished = events[-1]["data"]
    assert finished["status"] == "success"
    assert finished["records_processed"] == 1
