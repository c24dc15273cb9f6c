"""Pairwise record equivalence used for deduplication.

Rules are evaluated in priority order and the first one that holds decides.
Strong identifiers (DOI, DBLP id, declared key) come before the generated
key and the weak title heuristic, which additionally needs a matching year,
journal or booktitle.
"""

from collections.abc import Callable

from bibmerge.models.records import BibRecord
from bibmerge.normalize.keys import generate_key

__all__ = ["MATCH_RULES", "match_reason", "are_equivalent"]

TITLE_CORROBORATING_FIELDS = ("year", "journal", "booktitle")


def _same_field(a: BibRecord, b: BibRecord, name: str) -> bool:
    """Both records carry ``name`` and the values are textually equal."""
    value_a = a.get(name)
    value_b = b.get(name)
    return value_a is not None and value_b is not None and value_a == value_b


def _identical(a: BibRecord, b: BibRecord) -> bool:
    return a == b


def _same_doi(a: BibRecord, b: BibRecord) -> bool:
    return _same_field(a, b, "doi")


def _same_dblp(a: BibRecord, b: BibRecord) -> bool:
    return _same_field(a, b, "dblp")


def _same_declared_key(a: BibRecord, b: BibRecord) -> bool:
    return a.key is not None and b.key is not None and a.key == b.key


def _same_generated_key(a: BibRecord, b: BibRecord) -> bool:
    return generate_key(a) == generate_key(b)


def _same_title_and_venue(a: BibRecord, b: BibRecord) -> bool:
    if not _same_field(a, b, "title"):
        return False
    return any(_same_field(a, b, name) for name in TITLE_CORROBORATING_FIELDS)


MATCH_RULES: tuple[tuple[str, Callable[[BibRecord, BibRecord], bool]], ...] = (
    ("identical", _identical),
    ("doi", _same_doi),
    ("dblp", _same_dblp),
    ("key", _same_declared_key),
    ("generated_key", _same_generated_key),
    ("title_venue", _same_title_and_venue),
)


def match_reason(a: BibRecord, b: BibRecord) -> str | None:
    """Name of the first rule under which two records are the same work.

    Parameters
    ----------
    a : BibRecord
        First record.
    b : BibRecord
        Second record.

    Returns
    -------
    str | None
        Rule name ('identical', 'doi', 'dblp', 'key', 'generated_key',
        'title_venue') or None when the records are distinct.
    """
    for name, rule in MATCH_RULES:
        if rule(a, b):
            return name
    return None


def are_equivalent(a: BibRecord, b: BibRecord) -> bool:
    """True when two records describe the same bibliographic work."""
    return match_reason(a, b) is not None
