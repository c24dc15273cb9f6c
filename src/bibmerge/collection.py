"""Managed BibTeX collection: an ordered, duplicate-free list of records."""

from collections.abc import Iterator
from pathlib import Path

from bibmerge.consolidate.pipeline import assign_keys
from bibmerge.matching import are_equivalent
from bibmerge.models import BibRecord
from bibmerge.parse.base import ErrorSink, read_lines
from bibmerge.parse.bibtex import iter_entries
from bibmerge.render.bibtex_writer import write_bib_file

__all__ = ["BibCollection"]


class BibCollection:
    """Records held in memory and read from / written to a BibTeX file.

    Attributes
    ----------
    path : Path | None
        File the collection was loaded from, used as the default save target.
    """

    def __init__(self, records: list[BibRecord] | None = None, path: Path | None = None) -> None:
        self._records: list[BibRecord] = []
        self.path = path
        for record in records or []:
            self.add(record)

    @classmethod
    def load(cls, path: str | Path, on_error: ErrorSink) -> "BibCollection":
        """Load a collection from a BibTeX file.

        A missing file yields an empty collection bound to ``path``.
        Equivalent entries after the first are dropped.

        Parameters
        ----------
        path : str | Path
            BibTeX file.
        on_error : ErrorSink
            Receives messages for malformed entries.

        Returns
        -------
        BibCollection
            Loaded collection.
        """
        file_path = Path(path)
        collection = cls(path=file_path)
        if file_path.exists():
            for record in iter_entries(read_lines(file_path), on_error):
                collection.add(record)
        return collection

    @property
    def records(self) -> tuple[BibRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BibRecord]:
        return iter(self._records)

    def contains(self, record: BibRecord) -> bool:
        """True when an equivalent record is already in the collection."""
        return any(are_equivalent(existing, record) for existing in self._records)

    def add(self, record: BibRecord) -> bool:
        """Append a record unless an equivalent one is present.

        Returns
        -------
        bool
            True when the record was added.
        """
        if self.contains(record):
            return False
        self._records.append(record)
        return True

    def save(self, path: str | Path | None = None) -> Path:
        """Write the collection, assigning generated keys to unkeyed records.

        Raises
        ------
        ValueError
            If no path is given and the collection has none.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No path to save the collection to")
        self._records = assign_keys(self._records)
        write_bib_file(self._records, target)
        return target
