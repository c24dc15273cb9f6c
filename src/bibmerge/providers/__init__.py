"""Search providers: the DBLP API and local BibTeX files."""

from bibmerge.providers.base import Fetcher, SearchProvider
from bibmerge.providers.dblp import DblpSearchProvider, parse_dblp_response
from bibmerge.providers.http import fetch_text
from bibmerge.providers.local import BibFileSearchProvider

__all__ = [
    "Fetcher",
    "SearchProvider",
    "DblpSearchProvider",
    "parse_dblp_response",
    "fetch_text",
    "BibFileSearchProvider",
]
