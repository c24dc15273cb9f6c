"""Public API for reading, merging, searching and writing BibTeX.

This module provides the high-level entry points of bibmerge:
- Parsing BibTeX files into records
- Writing records back with generated keys
- Merging several files into one deduplicated collection
- Running a consolidated search over BibTeX files and DBLP
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from bibmerge.consolidate.pipeline import assign_keys, consolidate
from bibmerge.consolidate.result_store import MANAGED_SOURCE
from bibmerge.models import BibRecord, SearchResult
from bibmerge.parse.bibtex import parse_bibtex_file
from bibmerge.render.bibtex_writer import write_bib_file

if TYPE_CHECKING:
    from bibmerge.audit.logger import AuditLogger
    from bibmerge.engine.config import SearchConfig, SearchOutcome
    from bibmerge.parse.base import ErrorSink
    from bibmerge.providers.base import Fetcher, SearchProvider

__all__ = [
    "parse_file",
    "write_bib",
    "merge_files",
    "build_providers",
    "search",
]


def parse_file(
    path: str | Path,
    *,
    strict: bool = True,
) -> list[BibRecord]:
    """Parse a BibTeX file.

    Parameters
    ----------
    path : str | Path
        Path to file to parse.
    strict : bool, optional
        If True, raise exception on malformed entries. If False, return
        whatever records could be parsed, by default True.

    Returns
    -------
    list[BibRecord]
        Parsed records, in file order.

    Raises
    ------
    ParseError
        If parsing fails and strict=True.
    FileNotFoundError
        If file does not exist.

    Examples
    --------
        >>> from bibmerge import parse_file
        >>> records = parse_file("references.bib")
        >>> for record in records:
        ...     print(record.inline_string())
    """
    return parse_bibtex_file(path, strict=strict).records


def write_bib(records: Sequence[BibRecord], path: str | Path) -> Path:
    """Write records to a BibTeX file, generating keys for unkeyed records.

    Parameters
    ----------
    records : Sequence[BibRecord]
        Records to write, in output order.
    path : str | Path
        Output file (overwritten).

    Returns
    -------
    Path
        Written file.
    """
    output = Path(path)
    write_bib_file(assign_keys(records), output)
    return output


def _source_tags(paths: Sequence[Path], reserved: Sequence[str] = ()) -> list[str]:
    """File stems as source tags, suffixed when a stem is already taken."""
    taken = list(reserved)
    tags: list[str] = []
    for path in paths:
        tag, n = path.stem, 1
        while tag in taken:
            n += 1
            tag = f"{path.stem}-{n}"
        taken.append(tag)
        tags.append(tag)
    return tags


def merge_files(
    paths: Sequence[str | Path],
    output: str | Path | None = None,
    *,
    on_error: ErrorSink | None = None,
) -> list[BibRecord]:
    """Merge several BibTeX files into one deduplicated record list.

    Files are consolidated in argument order, so when two files hold the
    same work the record of the earlier file is kept.

    Parameters
    ----------
    paths : Sequence[str | Path]
        Input files, highest priority first.
    output : str | Path | None, optional
        If given, the merged collection is written there.
    on_error : ErrorSink | None, optional
        Receives messages for malformed entries, which are skipped.

    Returns
    -------
    list[BibRecord]
        Merged records with keys assigned.

    Raises
    ------
    FileNotFoundError
        If an input file does not exist.
    """
    file_paths = [Path(p) for p in paths]
    tags = _source_tags(file_paths)

    results_by_source: dict[str, list[SearchResult]] = {}
    for tag, file_path in zip(tags, file_paths, strict=True):
        parsed = parse_bibtex_file(file_path)
        if on_error is not None:
            for message in parsed.errors:
                on_error(f"{file_path.name}: {message}")
        results_by_source[tag] = [
            SearchResult(record=record, sources=frozenset({tag}), score=1.0)
            for record in parsed.records
        ]

    merged = assign_keys(r.record for r in consolidate(results_by_source, tags))
    if output is not None:
        write_bib_file(merged, Path(output))
    return merged


def build_providers(
    *,
    managed: str | Path | None = None,
    local: Sequence[str | Path] = (),
    remote: bool = True,
    config: SearchConfig | None = None,
    fetch: Fetcher | None = None,
    on_warning: ErrorSink | None = None,
) -> list[SearchProvider]:
    """Create the providers of a consolidated search.

    Parameters
    ----------
    managed : str | Path | None, optional
        Managed BibTeX file, searched under the ``"managed"`` source tag.
    local : Sequence[str | Path], optional
        Further BibTeX files. The first is tagged ``"local"``, the others
        by their file stem.
    remote : bool, optional
        Whether to query DBLP, by default True.
    config : SearchConfig | None, optional
        Timeouts and thresholds. If None, uses defaults.
    fetch : Fetcher | None, optional
        HTTP transport for DBLP, by default ``requests``-based.
    on_warning : ErrorSink | None, optional
        Receives messages for malformed entries and provider failures.

    Returns
    -------
    list[SearchProvider]
        Providers with distinct source tags.
    """
    from bibmerge.engine.config import SearchConfig
    from bibmerge.providers.dblp import DblpSearchProvider
    from bibmerge.providers.http import fetch_text
    from bibmerge.providers.local import LOCAL_SOURCE, BibFileSearchProvider

    if config is None:
        config = SearchConfig()

    def ignore(_: str) -> None:
        return None

    warn = on_warning or ignore
    providers: list[SearchProvider] = []

    if managed is not None:
        providers.append(
            BibFileSearchProvider.from_file(
                managed, warn, source=MANAGED_SOURCE, min_score=config.min_local_score
            )
        )

    local_paths = [Path(p) for p in local]
    tags = [LOCAL_SOURCE] + _source_tags(local_paths[1:], reserved=(MANAGED_SOURCE, LOCAL_SOURCE))
    for tag, path in zip(tags, local_paths, strict=False):
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        providers.append(
            BibFileSearchProvider.from_file(
                path, warn, source=tag, min_score=config.min_local_score
            )
        )

    if remote:
        providers.append(
            DblpSearchProvider(
                fetch or fetch_text,
                base_url=config.dblp_url,
                max_hits=config.dblp_max_hits,
                timeout=config.timeout_seconds,
                on_warning=warn,
            )
        )

    return providers


def search(
    terms: Sequence[str],
    *,
    managed: str | Path | None = None,
    local: Sequence[str | Path] = (),
    remote: bool = True,
    config: SearchConfig | None = None,
    fetch: Fetcher | None = None,
    on_warning: ErrorSink | None = None,
    logger: AuditLogger | None = None,
) -> SearchOutcome:
    """Run a consolidated search.

    See :func:`build_providers` for the parameters selecting the sources.

    Returns
    -------
    SearchOutcome
        Consolidated results, best first.

    Examples
    --------
        >>> from bibmerge import search
        >>> outcome = search(["types", "proofs"], local=["refs.bib"], remote=False)
        >>> print(len(outcome.results))
    """
    from bibmerge.engine.runner import run_search

    providers = build_providers(
        managed=managed,
        local=local,
        remote=remote,
        config=config,
        fetch=fetch,
        on_warning=on_warning,
    )
    return run_search(terms, providers, config=config, logger=logger)
