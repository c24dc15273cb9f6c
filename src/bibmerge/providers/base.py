"""Search provider protocol and shared types."""

from collections.abc import Callable, Sequence
from typing import Protocol

from bibmerge.models import SearchResult

__all__ = ["SearchProvider", "Fetcher"]

# (url, timeout_seconds) -> response text; raises ProviderUnavailableError
Fetcher = Callable[[str, float], str]


class SearchProvider(Protocol):
    """A source of ranked search results.

    Implementations report network or host failures through their warning
    sink and return an empty list instead of raising.
    """

    source: str

    def search(self, terms: Sequence[str]) -> list[SearchResult]:
        """Return results for the search terms, best first."""
        ...
