"""Search results: a record tagged with the sources that produced it."""

from dataclasses import dataclass, field

from bibmerge.models.records import BibRecord

__all__ = ["SearchResult"]


@dataclass(frozen=True)
class SearchResult:
    """A record found by one or more search sources.

    Attributes
    ----------
    record : BibRecord
        The bibliographic record.
    sources : frozenset[str]
        Source tags that returned this record (e.g. "managed", "dblp").
    score : float
        Relevance in [0, 1].
    """

    record: BibRecord
    sources: frozenset[str] = field(default_factory=frozenset)
    score: float = 0.0

    def __post_init__(self) -> None:
        """Normalize sources and validate score."""
        object.__setattr__(self, "sources", frozenset(self.sources))
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"score must be in [0, 1], got {self.score}")

    def merge(self, other: "SearchResult") -> "SearchResult":
        """Merge an equivalent result into this one.

        This result's record is kept; sources are united and the higher
        score wins.

        Parameters
        ----------
        other : SearchResult
            Result judged equivalent to this one.

        Returns
        -------
        SearchResult
            New merged result.
        """
        return SearchResult(
            record=self.record,
            sources=self.sources | other.sources,
            score=max(self.score, other.score),
        )
