"""Citation key generation.

Keys have the shape ``<surnames><yy><TitleWords>``, e.g. ``Smith12TypesProofs``.
They are derived only from persons, year and title, so two records describing
the same work usually generate the same key even when other fields differ.
"""

from typing import TYPE_CHECKING

from ._helpers import YEAR_DIGITS_RE, key_friendly
from .text import to_plain

if TYPE_CHECKING:
    from bibmerge.models.records import BibRecord

__all__ = ["generate_key", "surname_of", "year_suffix", "title_suffix"]

COMMON_WORDS = frozenset({"", "in", "the", "a", "an", "of", "for", "and", "or", "by", "on", "with"})
MAX_SURNAMES = 3
MAX_TITLE_WORDS = 6


def generate_key(record: "BibRecord") -> str:
    """Generate a deterministic citation key for a record.

    Parameters
    ----------
    record : BibRecord
        Record to generate a key for.

    Returns
    -------
    str
        Surnames, two-digit year and capitalized title words, concatenated.
        Any part may be empty.
    """
    persons = record.authors or record.editors
    if len(persons) > MAX_SURNAMES:
        surnames = surname_of(persons[0]) + "ETAL"
    else:
        surnames = "".join(surname_of(p) for p in persons)

    year = year_suffix(record.fields.get("year"))
    return surnames + year + title_suffix(record.fields.get("title"))


def surname_of(person: str) -> str:
    """Last space-delimited token of a name, as ASCII letters and digits."""
    tokens = to_plain(person).split(" ")
    return key_friendly(tokens[-1])


def year_suffix(year: str | None) -> str:
    """Last two digits of a numeric year, zero-padded; empty otherwise."""
    if year is None:
        return ""
    match = YEAR_DIGITS_RE.match(year)
    if not match:
        return ""
    return f"{int(match.group(1)) % 100:02d}"


def title_suffix(title: str | None) -> str:
    """First six significant title words, capitalized and concatenated."""
    if title is None:
        return ""
    words = []
    for bit in to_plain(title).split(" "):
        word = key_friendly(bit).lower()
        if word in COMMON_WORDS:
            continue
        words.append(word.capitalize())
    return "".join(words[:MAX_TITLE_WORDS])
