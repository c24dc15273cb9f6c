"""BibTeX writer for records and collections."""

from collections.abc import Iterable, Sequence
from functools import reduce
from pathlib import Path

from bibmerge.models import BibRecord
from bibmerge.normalize.text import escape_latex

__all__ = [
    "PREFERRED_ORDER",
    "field_order",
    "format_record",
    "format_collection",
    "write_bib_file",
]

PREFERRED_ORDER: tuple[str, ...] = ("title", "author", "editor", "booktitle", "journal", "year")
FIELD_NAME_WIDTH = 12

# Rendering state: (field names emitted so far, field names still to emit)
_OrderState = tuple[tuple[str, ...], frozenset[str]]


def _take(state: _OrderState, subset: Sequence[str]) -> _OrderState:
    ordered, remaining = state
    picked = tuple(name for name in dict.fromkeys(subset) if name in remaining)
    return ordered + picked, remaining - frozenset(picked)


def field_order(record: BibRecord) -> tuple[str, ...]:
    """Order in which a record's fields are written.

    Preferred display fields first, then required fields, optional fields and
    any remaining fields, each group sorted by name. A field appears once.

    Parameters
    ----------
    record : BibRecord
        Record to order.

    Returns
    -------
    tuple[str, ...]
        Every present field name exactly once.
    """
    present = record.all_fields()
    passes: tuple[Sequence[str], ...] = (
        PREFERRED_ORDER,
        sorted(name for req in record.required_fields() for name in req.names),
        sorted(record.optional_fields()),
        sorted(present),
    )
    ordered, _ = reduce(_take, passes, ((), present))
    return ordered


def _format_value(record: BibRecord, name: str) -> str:
    if name in record.person_fields:
        return " and ".join(escape_latex(person) for person in record.person_fields[name])
    return escape_latex(record.fields[name])


def format_record(record: BibRecord, key: str | None = None) -> str:
    """Format a record as a BibTeX entry.

    Parameters
    ----------
    record : BibRecord
        Record to format.
    key : str | None, optional
        Citation key to write; defaults to the record's effective key.

    Returns
    -------
    str
        BibTeX entry, without trailing newline.
    """
    citekey = key if key is not None else record.effective_key()
    field_lines = [
        f"  {name:>{FIELD_NAME_WIDTH}} = {{{_format_value(record, name)}}}"
        for name in field_order(record)
    ]

    header = f"@{record.effective_type().value}{{{citekey}"
    if not field_lines:
        return header + "\n}"
    return header + ",\n" + ",\n".join(field_lines) + "\n}"


def format_collection(records: Iterable[BibRecord]) -> str:
    """Format records as BibTeX entries separated by blank lines."""
    return "\n\n".join(format_record(record) for record in records)


def write_bib_file(records: Iterable[BibRecord], output_path: Path) -> None:
    """Write records to a BibTeX file (UTF-8, trailing newline).

    Parameters
    ----------
    records : Iterable[BibRecord]
        Records to write.
    output_path : Path
        Output file path.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    text = format_collection(records)
    with output_path.open("w", encoding="utf-8") as f:
        f.write(text)
        if text:
            f.write("\n")
