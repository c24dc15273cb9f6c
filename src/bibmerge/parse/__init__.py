"""BibTeX parsing.

Main entry points:
- iter_entries: Stream records from BibTeX lines with an error sink
- parse_bibtex: Parse BibTeX text
- parse_bibtex_file: Parse a BibTeX file
"""

from bibmerge.parse.base import ErrorSink, ParseResult
from bibmerge.parse.bibtex import iter_entries, parse_bibtex, parse_bibtex_file

__all__ = [
    "ErrorSink",
    "ParseResult",
    "iter_entries",
    "parse_bibtex",
    "parse_bibtex_file",
]
