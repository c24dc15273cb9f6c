"""Consolidation of ranked results from several search sources.

Sources are processed in priority order. A result equivalent to one already
accepted is merged into it: sources are united, the accepted record is kept
(so the higher-priority source decides field content) and the higher score
wins. The final list is ordered by descending score, ties in discovery order.
"""

from collections.abc import Iterable, Mapping, Sequence

from bibmerge.matching import are_equivalent
from bibmerge.models import BibRecord, SearchResult

__all__ = ["consolidate", "source_order", "assign_keys", "dedupe_records"]


def source_order(
    results_by_source: Mapping[str, Sequence[SearchResult]],
    priority: Sequence[str] | None = None,
) -> list[str]:
    """Order in which sources are consolidated.

    Sources named in ``priority`` come first, in that order; the others
    follow in mapping order. Priority entries without results are dropped.
    """
    ordered = [s for s in dict.fromkeys(priority or ()) if s in results_by_source]
    ordered.extend(s for s in results_by_source if s not in ordered)
    return ordered


def consolidate(
    results_by_source: Mapping[str, Sequence[SearchResult]],
    priority: Sequence[str] | None = None,
) -> list[SearchResult]:
    """Merge per-source result lists into one deduplicated list.

    Parameters
    ----------
    results_by_source : Mapping[str, Sequence[SearchResult]]
        Fully materialized, internally ranked results of each source.
    priority : Sequence[str] | None, optional
        Source tags, highest priority first.

    Returns
    -------
    list[SearchResult]
        At most one result per bibliographic work, by descending score.
    """
    accepted: list[SearchResult] = []

    for source in source_order(results_by_source, priority):
        for candidate in results_by_source[source]:
            for i, existing in enumerate(accepted):
                if are_equivalent(existing.record, candidate.record):
                    accepted[i] = existing.merge(candidate)
                    break
            else:
                accepted.append(candidate)

    # sorted() is stable: equal scores keep discovery order
    return sorted(accepted, key=lambda r: -r.score)


def dedupe_records(records: Iterable[BibRecord]) -> list[BibRecord]:
    """Drop records equivalent to an earlier one (first occurrence wins)."""
    kept: list[BibRecord] = []
    for record in records:
        if not any(are_equivalent(k, record) for k in kept):
            kept.append(record)
    return kept


def assign_keys(records: Iterable[BibRecord]) -> list[BibRecord]:
    """Give every unkeyed record its generated citation key."""
    return [r if r.key else r.with_key(r.effective_key()) for r in records]
