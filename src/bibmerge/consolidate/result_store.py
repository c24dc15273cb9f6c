"""Store for the most recent consolidated search results."""

import re
from collections.abc import Sequence

from bibmerge.matching import are_equivalent
from bibmerge.models import SearchResult
from bibmerge.render.bibtex_writer import format_record

__all__ = ["ResultStore", "MANAGED_SOURCE"]

MANAGED_SOURCE = "managed"

RANGE_RE = re.compile(r"^(\d+)-(\d+)$")
SINGLE_RE = re.compile(r"^(\d+)$")


class ResultStore:
    """Holds the last result list and resolves index selectors against it.

    Selectors are ``"*"`` (all results), ``"i"`` (one result) or ``"i-j"``
    (inclusive range), using the indices shown by ``summary_lines``.
    """

    def __init__(self, results: Sequence[SearchResult] = ()) -> None:
        self._results: list[SearchResult] = list(results)

    @property
    def results(self) -> tuple[SearchResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def set_results(self, results: Sequence[SearchResult]) -> None:
        """Replace the whole result list."""
        self._results = list(results)

    def select(self, index: str) -> list[SearchResult] | None:
        """Resolve a selector.

        Parameters
        ----------
        index : str
            ``"*"``, ``"i"`` or ``"i-j"``.

        Returns
        -------
        list[SearchResult] | None
            Selected results, or None for an invalid or out-of-range selector.
        """
        index = index.strip()
        if index == "*":
            return list(self._results)

        match = RANGE_RE.match(index)
        if match:
            lower, upper = int(match.group(1)), int(match.group(2))
            if lower <= upper < len(self._results):
                return self._results[lower : upper + 1]
            return None

        match = SINGLE_RE.match(index)
        if match:
            i = int(match.group(1))
            if i < len(self._results):
                return [self._results[i]]
            return None

        return None

    def show(self, index: str) -> list[str] | None:
        """Rendered BibTeX blocks of the selected results.

        Returns
        -------
        list[str] | None
            One block per selected result, or None for an invalid selector.
        """
        selected = self.select(index)
        if selected is None:
            return None
        return [format_record(result.record) for result in selected]

    def replace(self, index: str, new_results: Sequence[SearchResult]) -> bool:
        """Replace selected results by equivalent new results.

        Each selected result is replaced by the first new result whose record
        is equivalent to it; selected results without a counterpart, and new
        results matching no selected result, are left alone.

        Parameters
        ----------
        index : str
            Selector of the results that may be replaced.
        new_results : Sequence[SearchResult]
            Replacement results (e.g. re-fetched or edited records).

        Returns
        -------
        bool
            False when the selector is invalid.
        """
        selected = self.select(index)
        if selected is None:
            return False

        selected_ids = {id(r) for r in selected}
        updated: list[SearchResult] = []
        for current in self._results:
            if id(current) in selected_ids:
                current = next(
                    (new for new in new_results if are_equivalent(current.record, new.record)),
                    current,
                )
            updated.append(current)

        self._results = updated
        return True

    def summary_lines(self) -> list[str]:
        """One display line per result, or a single "No match" line.

        Lines look like ``"[0  m!] J. Smith, "Title", POPL, 2012"`` where
        ``m`` marks records already in the managed collection and ``!``
        marks records missing required fields.
        """
        if not self._results:
            return ["No match"]

        lines = []
        for i, result in enumerate(self._results):
            spacing = " " if i < 10 else ""
            managed = "m" if MANAGED_SOURCE in result.sources else " "
            invalid = "!" if not result.record.is_valid() else " "
            lines.append(f"[{i}{spacing} {managed}{invalid}] {result.record.inline_string()}")
        return lines
