"""BibTeX rendering."""

from bibmerge.render.bibtex_writer import (
    PREFERRED_ORDER,
    field_order,
    format_collection,
    format_record,
    write_bib_file,
)

__all__ = [
    "PREFERRED_ORDER",
    "field_order",
    "format_collection",
    "format_record",
    "write_bib_file",
]
