"""Consolidation of bibliographic records from BibTeX files and DBLP.

This package provides:
- Data models (bibmerge.models): entry types, records, search results
- Normalization (bibmerge.normalize): formatted text, citation keys, venues
- Matching (bibmerge.matching): record equivalence
- Parsing (bibmerge.parse): BibTeX reading
- Rendering (bibmerge.render): BibTeX writing
- Consolidation (bibmerge.consolidate): multi-source result merging
- Providers (bibmerge.providers): DBLP and BibTeX file search
- Engine (bibmerge.engine): concurrent search orchestration
- Audit (bibmerge.audit): JSONL event logging
- CLI (bibmerge.cli): command-line interface
- Public API (bibmerge.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from bibmerge.api import merge_files, parse_file, search, write_bib
from bibmerge.collection import BibCollection
from bibmerge.errors import ParseError
from bibmerge.models import BibRecord, EntryType, SearchResult

__all__ = [
    "__version__",
    "__license__",
    "BibCollection",
    "BibRecord",
    "EntryType",
    "SearchResult",
    "parse_file",
    "write_bib",
    "merge_files",
    "search",
    "ParseError",
]
