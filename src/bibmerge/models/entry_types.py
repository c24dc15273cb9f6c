"""Entry types and their field schemas.

The registry is a static table: each BibTeX entry type maps to an ordered
tuple of required-field alternatives and a tuple of optional fields.
Unknown or absent entry types have no requirements.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "EntryType",
    "OneOf",
    "STANDARD_FIELDS",
    "required_fields",
    "optional_fields",
    "relevant_fields",
]


class EntryType(str, Enum):
    """Closed set of BibTeX entry types."""

    ARTICLE = "article"
    BOOK = "book"
    BOOKLET = "booklet"
    INBOOK = "inbook"
    INCOLLECTION = "incollection"
    INPROCEEDINGS = "inproceedings"
    MANUAL = "manual"
    MASTERSTHESIS = "mastersthesis"
    MISC = "misc"
    PHDTHESIS = "phdthesis"
    PROCEEDINGS = "proceedings"
    TECHREPORT = "techreport"
    UNPUBLISHED = "unpublished"

    @classmethod
    def from_name(cls, name: str | None) -> "EntryType | None":
        """Look up an entry type by (case-insensitive) name.

        Parameters
        ----------
        name : str | None
            Entry type name as written after ``@``.

        Returns
        -------
        EntryType | None
            Matching member, or None for absent or unknown names.
        """
        if not name:
            return None
        return _BY_NAME.get(name.strip().lower())

    def __str__(self) -> str:
        return self.value


_BY_NAME: dict[str, EntryType] = {t.value: t for t in EntryType}


@dataclass(frozen=True)
class OneOf:
    """Requirement satisfied when at least one of the named fields is present.

    Attributes
    ----------
    names : tuple[str, ...]
        Alternative field names, in display order.
    """

    names: tuple[str, ...]

    def satisfied_by(self, present: "set[str] | frozenset[str]") -> bool:
        """Check whether any alternative is among the present field names."""
        return any(name in present for name in self.names)

    def __str__(self) -> str:
        return "|".join(self.names)


def _req(*specs: "str | tuple[str, ...]") -> tuple[OneOf, ...]:
    return tuple(OneOf((s,)) if isinstance(s, str) else OneOf(s) for s in specs)


_REQUIRED: dict[EntryType, tuple[OneOf, ...]] = {
    EntryType.ARTICLE: _req("title", "author", "journal", "year"),
    EntryType.BOOK: _req("title", ("author", "editor"), "publisher", "year"),
    EntryType.BOOKLET: _req("title"),
    EntryType.INBOOK: _req(
        "title", ("author", "editor"), ("chapter", "pages"), "publisher", "year"
    ),
    EntryType.INCOLLECTION: _req("title", "author", "booktitle", "year"),
    EntryType.INPROCEEDINGS: _req("title", "author", "booktitle", "year"),
    EntryType.MANUAL: _req("title"),
    EntryType.MASTERSTHESIS: _req("title", "author", "school", "year"),
    EntryType.MISC: (),
    EntryType.PHDTHESIS: _req("title", "author", "school", "year"),
    EntryType.PROCEEDINGS: _req("title", "year"),
    EntryType.TECHREPORT: _req("title", "author", "institution", "year"),
    EntryType.UNPUBLISHED: _req("title", "author", "note"),
}

_OPTIONAL: dict[EntryType, tuple[str, ...]] = {
    EntryType.ARTICLE: ("volume", "number", "pages", "month", "note", "key"),
    EntryType.BOOK: ("volume", "series", "address", "edition", "month", "note", "key", "pages"),
    EntryType.BOOKLET: ("author", "howpublished", "address", "month", "year", "note", "key"),
    EntryType.INBOOK: ("volume", "series", "address", "edition", "month", "note", "key"),
    EntryType.INCOLLECTION: (
        "editor", "volume", "number", "series", "type", "chapter", "pages",
        "address", "edition", "month", "note", "key",
    ),
    EntryType.INPROCEEDINGS: (
        "editor", "volume", "number", "series", "pages", "address", "month",
        "organization", "publisher", "note", "key",
    ),
    EntryType.MANUAL: (
        "author", "organization", "edition", "address", "year", "month", "note", "key",
    ),
    EntryType.MASTERSTHESIS: ("address", "month", "note", "key"),
    EntryType.MISC: ("author", "howpublished", "title", "month", "year", "note", "key"),
    EntryType.PHDTHESIS: ("address", "month", "note", "key"),
    EntryType.PROCEEDINGS: (
        "editor", "volume", "number", "series", "address", "month", "publisher",
        "organization", "note", "key",
    ),
    EntryType.TECHREPORT: ("type", "number", "address", "month", "note", "key"),
    EntryType.UNPUBLISHED: ("month", "year", "key"),
}

STANDARD_FIELDS: frozenset[str] = frozenset(
    {
        "address", "abstract", "annote", "author", "booktitle", "chapter",
        "crossref", "edition", "editor", "eprint", "howpublished",
        "institution", "journal", "key", "month", "note", "number",
        "organization", "pages", "publisher", "school", "series", "title",
        "type", "url", "volume", "year",
    }
)


def required_fields(entry_type: EntryType | None) -> tuple[OneOf, ...]:
    """Return the required-field alternatives for an entry type.

    Parameters
    ----------
    entry_type : EntryType | None
        Entry type, or None when unknown.

    Returns
    -------
    tuple[OneOf, ...]
        Requirements in schema order (empty for unknown types).
    """
    if entry_type is None:
        return ()
    return _REQUIRED.get(entry_type, ())


def optional_fields(entry_type: EntryType | None) -> tuple[str, ...]:
    """Return the optional field names for an entry type."""
    if entry_type is None:
        return ()
    return _OPTIONAL.get(entry_type, ())


def relevant_fields(entry_type: EntryType | None) -> tuple[str, ...]:
    """Return required fields (flattened) followed by optional fields."""
    flattened = tuple(name for req in required_fields(entry_type) for name in req.names)
    return flattened + optional_fields(entry_type)
