"""Text normalization: formatted text, citation keys, external venue strings."""

from bibmerge.normalize.keys import generate_key
from bibmerge.normalize.text import escape_latex, from_unicode, to_plain
from bibmerge.normalize.venue import (
    VenueInfo,
    cleanup_journal,
    cleanup_pages,
    cleanup_title,
    parse_conference_venue,
    parse_journal_venue,
)

__all__ = [
    "generate_key",
    "escape_latex",
    "from_unicode",
    "to_plain",
    "VenueInfo",
    "cleanup_journal",
    "cleanup_pages",
    "cleanup_title",
    "parse_conference_venue",
    "parse_journal_venue",
]
