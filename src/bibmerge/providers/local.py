"""Full-text search over a BibTeX collection."""

from collections.abc import Sequence
from pathlib import Path

from rapidfuzz import fuzz, utils

from bibmerge.collection import BibCollection
from bibmerge.models import BibRecord, SearchResult
from bibmerge.normalize.text import to_plain
from bibmerge.parse.base import ErrorSink

__all__ = ["BibFileSearchProvider", "LOCAL_SOURCE"]

LOCAL_SOURCE = "local"

# Fields whose plain text is searched
SEARCHED_FIELDS = ("title", "booktitle", "journal", "school", "year", "doi")


def record_haystack(record: BibRecord) -> str:
    """Plain text of the searchable parts of a record."""
    parts = [*record.authors, *record.editors]
    parts.extend(record.fields[name] for name in SEARCHED_FIELDS if name in record.fields)
    if record.key:
        parts.append(record.key)
    return " ".join(to_plain(p) for p in parts)


class BibFileSearchProvider:
    """Search provider over an in-memory BibTeX collection.

    Each record is scored with rapidfuzz's token-set ratio between the query
    and the record's plain text, so a query whose words all occur in the
    record scores 1.0.

    Parameters
    ----------
    collection : BibCollection
        Records to search.
    source : str, optional
        Source tag attached to results, by default ``"local"``.
    min_score : float, optional
        Results scoring below this are dropped, by default 0.5.
    """

    def __init__(
        self,
        collection: BibCollection,
        source: str = LOCAL_SOURCE,
        min_score: float = 0.5,
    ) -> None:
        self.collection = collection
        self.source = source
        self.min_score = min_score

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        on_error: ErrorSink,
        source: str = LOCAL_SOURCE,
        min_score: float = 0.5,
    ) -> "BibFileSearchProvider":
        """Load a BibTeX file and search it."""
        return cls(BibCollection.load(path, on_error), source=source, min_score=min_score)

    def search(self, terms: Sequence[str]) -> list[SearchResult]:
        query = " ".join(terms).strip()
        if not query:
            return []

        results = []
        for record in self.collection:
            score = fuzz.token_set_ratio(
                query, record_haystack(record), processor=utils.default_process
            ) / 100.0
            if score >= self.min_score:
                results.append(
                    SearchResult(record=record, sources=frozenset({self.source}), score=score)
                )
        return sorted(results, key=lambda r: -r.score)
