"""Normalization of loosely structured venue, title and page strings.

Remote metadata services describe where a paper appeared as a single
string, e.g. ``"POPL 2012:103-111"`` or
``"Commun. ACM (CACM) 55(2):103-111 (2012)"``. The patterns below are tried
in order and the first match wins.
"""

import html
import re
from dataclasses import dataclass

from bibmerge.errors import UnparseableExternalTextError

__all__ = [
    "VenueInfo",
    "parse_conference_venue",
    "parse_journal_venue",
    "is_corr_venue",
    "cleanup_pages",
    "cleanup_journal",
    "cleanup_title",
]

# Conference papers: "<venue> <year>:<pages>", then "<venue> <year>"
CONF_VENUE_PAGES_RE = re.compile(r"^(.*) (\d{4}):([\d\- ]*)$")
CONF_VENUE_RE = re.compile(r"^(.*) (\d{4})$")

# Journal articles, e.g.
#   "Commun. ACM (CACM) 55(2):103-111 (2012)"
#   "Acta Inf. (ACTA) 1:271-281 (1972)"
#   "Logical Methods in Computer Science (LMCS) 4(4) (2008)"
JOUR_VOL_NUM_PAGES_RE = re.compile(r"^(.*) (\d+)\((\d+)\):([\d\- ]*) \((\d{4})\)$")
JOUR_VOL_PAGES_RE = re.compile(r"^(.*) (\d+):([\d\- ]*) \((\d{4})\)$")
JOUR_VOL_NUM_RE = re.compile(r"^(.*) (\d+)\((\d+)\) \((\d{4})\)$")

CORR_RE = re.compile(r".*CoRR.*")
PAGES_RE = re.compile(r"^(\d+)[\s\-]+(\d+)$")
JOURNAL_ABBR_RE = re.compile(r"^(.*) \(([A-Z]+)\)$")
FINAL_DOT_RE = re.compile(r"^(.*)\.\s*$", re.DOTALL)


@dataclass(frozen=True)
class VenueInfo:
    """Fields extracted from a venue string.

    Attributes
    ----------
    venue : str
        Booktitle (conferences) or journal name (articles).
    year : str
        Four-digit year.
    volume : str | None
        Journal volume.
    number : str | None
        Journal issue number.
    pages : str | None
        Normalized page range.
    """

    venue: str
    year: str
    volume: str | None = None
    number: str | None = None
    pages: str | None = None

    def as_fields(self, venue_field: str) -> dict[str, str]:
        """Return the non-empty parts keyed by BibTeX field name."""
        parts = {
            venue_field: self.venue,
            "year": self.year,
            "volume": self.volume,
            "number": self.number,
            "pages": self.pages,
        }
        return {name: value for name, value in parts.items() if value}


def parse_conference_venue(text: str) -> VenueInfo:
    """Parse a conference venue string.

    Parameters
    ----------
    text : str
        E.g. ``"POPL 2012:103-111"`` or ``"POPL 2012"``.

    Returns
    -------
    VenueInfo
        Booktitle, year and optional pages.

    Raises
    ------
    UnparseableExternalTextError
        If no conference pattern matches.
    """
    match = CONF_VENUE_PAGES_RE.match(text)
    if match:
        venue, year, pages = match.groups()
        return VenueInfo(venue=venue.strip(), year=year, pages=cleanup_pages(pages))

    match = CONF_VENUE_RE.match(text)
    if match:
        venue, year = match.groups()
        return VenueInfo(venue=venue.strip(), year=year)

    raise UnparseableExternalTextError("conference", text)


def parse_journal_venue(text: str) -> VenueInfo:
    """Parse a journal venue string.

    Parameters
    ----------
    text : str
        E.g. ``"Commun. ACM (CACM) 55(2):103-111 (2012)"``.

    Returns
    -------
    VenueInfo
        Journal (abbreviated when possible), volume, number, pages, year.

    Raises
    ------
    UnparseableExternalTextError
        If no journal pattern matches.
    """
    match = JOUR_VOL_NUM_PAGES_RE.match(text)
    if match:
        journal, volume, number, pages, year = match.groups()
        return VenueInfo(
            venue=cleanup_journal(journal),
            year=year,
            volume=volume,
            number=number,
            pages=cleanup_pages(pages),
        )

    match = JOUR_VOL_PAGES_RE.match(text)
    if match:
        journal, volume, pages, year = match.groups()
        return VenueInfo(
            venue=cleanup_journal(journal),
            year=year,
            volume=volume,
            pages=cleanup_pages(pages),
        )

    match = JOUR_VOL_NUM_RE.match(text)
    if match:
        journal, volume, number, year = match.groups()
        return VenueInfo(venue=cleanup_journal(journal), year=year, volume=volume, number=number)

    raise UnparseableExternalTextError("journal", text)


def is_corr_venue(text: str) -> bool:
    """True for arXiv CoRR venues, which are not journal publications."""
    return CORR_RE.match(text) is not None


def cleanup_pages(pages: str) -> str:
    """Normalize ``"103-111"`` / ``"103 - 111"`` to ``"103--111"``.

    Unmatched text is returned trimmed but otherwise unchanged.
    """
    trimmed = pages.strip()
    match = PAGES_RE.match(trimmed)
    if match:
        return f"{match.group(1)}--{match.group(2)}"
    return trimmed


def cleanup_journal(journal: str) -> str:
    """Keep only the abbreviation of ``"<full name> (<ABBR>)"``."""
    trimmed = journal.strip()
    match = JOURNAL_ABBR_RE.match(trimmed)
    if match:
        return match.group(2)
    return trimmed


def cleanup_title(title: str) -> str:
    """Strip one trailing period and unescape HTML entities."""
    trimmed = title.strip()
    match = FINAL_DOT_RE.match(trimmed)
    if match:
        trimmed = match.group(1)
    return html.unescape(trimmed)
