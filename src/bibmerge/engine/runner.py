"""Consolidated search across providers.

All providers are queried concurrently, one worker thread each. The runner
waits for every provider to finish, so consolidation always sees fully
materialized result lists, and then merges them by source priority.
"""

import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from bibmerge.audit.logger import AuditLogger
from bibmerge.consolidate.pipeline import consolidate
from bibmerge.engine.config import SearchConfig, SearchOutcome
from bibmerge.models import SearchResult
from bibmerge.providers.base import SearchProvider

__all__ = ["run_search"]

STAGE_SEARCH = "search"
STAGE_CONSOLIDATE = "consolidate"


def _timed_search(
    provider: SearchProvider, terms: Sequence[str]
) -> tuple[list[SearchResult], float]:
    started = time.perf_counter()
    results = list(provider.search(terms))
    return results, time.perf_counter() - started


def run_search(
    terms: Sequence[str],
    providers: Sequence[SearchProvider],
    config: SearchConfig | None = None,
    logger: AuditLogger | None = None,
) -> SearchOutcome:
    """Search every provider and consolidate the results.

    Parameters
    ----------
    terms : Sequence[str]
        Search terms.
    providers : Sequence[SearchProvider]
        Providers to query. Each must have a distinct ``source`` tag.
    config : SearchConfig | None, optional
        Search configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger for tracking. If None, no logging.

    Returns
    -------
    SearchOutcome
        Consolidated results and per-source counts.

    Raises
    ------
    ValueError
        If two providers share a source tag.

    Examples
    --------
        >>> from bibmerge.engine import run_search
        >>> from bibmerge.providers import DblpSearchProvider
        >>> outcome = run_search(["types", "proofs"], [DblpSearchProvider()])
        >>> for result in outcome.results:
        ...     print(result.record.inline_string())
    """
    if config is None:
        config = SearchConfig()

    tags = [p.source for p in providers]
    if len(set(tags)) != len(tags):
        raise ValueError(f"Duplicate provider source tags: {tags}")

    started = time.perf_counter()
    if logger:
        logger.run_started(command=list(terms), parameters=config.to_dict())
        logger.stage_started(STAGE_SEARCH)

    results_by_source: dict[str, list[SearchResult]] = {}
    failed: list[str] = []

    with ThreadPoolExecutor(max_workers=max(len(providers), 1)) as pool:
        futures = [(p.source, pool.submit(_timed_search, p, terms)) for p in providers]
        for source, future in futures:
            try:
                results, duration = future.result()
            except Exception as e:
                # A failing source contributes no results
                failed.append(source)
                if logger:
                    logger.error(
                        exception_class=type(e).__name__,
                        message=f"{source}: {e}",
                        stage=STAGE_SEARCH,
                    )
                    logger.source_searched(source, 0, 0.0, failed=True)
                continue
            results_by_source[source] = results
            if logger:
                logger.source_searched(source, len(results), duration)

    counts = {source: len(results) for source, results in results_by_source.items()}
    if logger:
        logger.stage_finished(STAGE_SEARCH, time.perf_counter() - started, counters=counts)
        logger.stage_started(STAGE_CONSOLIDATE)

    consolidate_started = time.perf_counter()
    consolidated = consolidate(results_by_source, config.source_priority)

    if logger:
        for result in consolidated:
            if len(result.sources) > 1:
                logger.records_merged(result.record.effective_key(), result.sources)
        logger.stage_finished(
            STAGE_CONSOLIDATE,
            time.perf_counter() - consolidate_started,
            counters={"results_in": sum(counts.values()), "results_out": len(consolidated)},
        )
        logger.run_finished(
            status="success",
            duration_seconds=time.perf_counter() - started,
            records_processed=len(consolidated),
        )

    return SearchOutcome(results=consolidated, counts_by_source=counts, failed_sources=failed)
