"""Bibliographic record model.

A record holds scalar fields and person fields (``author``, ``editor``) in
two separate mappings. Values are formatted text (LaTeX source) and are
stored verbatim. Records are immutable; the ``with_*``/``without_*``
methods return modified copies.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace

from bibmerge.errors import MalformedRecordError
from bibmerge.models.entry_types import (
    STANDARD_FIELDS,
    EntryType,
    OneOf,
    optional_fields,
    relevant_fields,
    required_fields,
)
from bibmerge.normalize._helpers import PERSON_SEPARATOR, split_persons
from bibmerge.normalize.keys import generate_key
from bibmerge.normalize.text import to_plain

__all__ = ["BibRecord", "PERSON_FIELDS", "EXTRA_FIELDS"]

PERSON_FIELDS: frozenset[str] = frozenset({"author", "editor"})

# Non-standard fields with their own accessors.
EXTRA_FIELDS: frozenset[str] = frozenset({"doi", "dblp", "link"})

# Accessor names that differ from the field name.
_ACCESSOR_NAMES: dict[str, str] = {"key": "key_field"}

_MAX_INLINE_PERSONS = 4


@dataclass(frozen=True)
class BibRecord:
    """A single bibliographic entry.

    Attributes
    ----------
    entry_type : EntryType | None
        Declared entry type, None when unknown.
    key : str | None
        Citation key, None until assigned.
    fields : dict[str, str]
        Scalar fields (name -> formatted text).
    person_fields : dict[str, tuple[str, ...]]
        Person fields (``author``/``editor`` -> ordered names).

    Raises
    ------
    MalformedRecordError
        If a field name appears in both mappings, a person mapping holds a
        non-person field, or a person field has no names.
    """

    entry_type: EntryType | None = None
    key: str | None = None
    fields: dict[str, str] = field(default_factory=dict)
    person_fields: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Copy mappings and check the person/scalar split."""
        object.__setattr__(self, "fields", dict(self.fields))
        object.__setattr__(
            self,
            "person_fields",
            {name: tuple(values) for name, values in self.person_fields.items()},
        )

        clash = set(self.fields) & set(self.person_fields)
        if clash:
            raise MalformedRecordError(
                f"Fields stored both as scalar and person fields: {', '.join(sorted(clash))}"
            )
        for name, values in self.person_fields.items():
            if name not in PERSON_FIELDS:
                raise MalformedRecordError(f"Field '{name}' is not a person field")
            if not values:
                raise MalformedRecordError(f"Person field '{name}' has no names")

    def __hash__(self) -> int:
        return hash(
            (
                self.entry_type,
                self.key,
                tuple(sorted(self.fields.items())),
                tuple(sorted(self.person_fields.items())),
            )
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_entry_map(
        cls,
        entry_type: EntryType | None,
        key: str | None,
        entry_map: Mapping[str, str],
    ) -> "BibRecord":
        """Build a record from a flat field map.

        ``author`` and ``editor`` values are split on ``" and "`` into
        ordered person lists; every other field is kept as a scalar.

        Parameters
        ----------
        entry_type : EntryType | None
            Entry type.
        key : str | None
            Citation key.
        entry_map : Mapping[str, str]
            Field name -> formatted text.

        Returns
        -------
        BibRecord
            New record.

        Raises
        ------
        MalformedRecordError
            If a person field yields no names after splitting.
        """
        scalars: dict[str, str] = {}
        persons: dict[str, tuple[str, ...]] = {}

        for name, value in entry_map.items():
            if name in PERSON_FIELDS:
                names = split_persons(value)
                if not names:
                    raise MalformedRecordError(
                        f"Person field '{name}' has no valid entries: [{value}]"
                    )
                persons[name] = tuple(names)
            else:
                scalars[name] = value

        return cls(entry_type=entry_type, key=key or None, fields=scalars, person_fields=persons)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def authors(self) -> tuple[str, ...]:
        """Ordered author names (empty when absent)."""
        return self.person_fields.get("author", ())

    @property
    def editors(self) -> tuple[str, ...]:
        """Ordered editor names (empty when absent)."""
        return self.person_fields.get("editor", ())

    def all_fields(self) -> frozenset[str]:
        """Names of all present fields, scalar and person."""
        return frozenset(self.fields) | frozenset(self.person_fields)

    def get(self, name: str) -> str | None:
        """Return a field value, joining person names with ``" and "``."""
        if name in self.person_fields:
            return PERSON_SEPARATOR.join(self.person_fields[name])
        return self.fields.get(name)

    def entry_map(self) -> dict[str, str]:
        """Flat field map, the inverse of ``from_entry_map``."""
        flat = dict(self.fields)
        for name, values in self.person_fields.items():
            flat[name] = PERSON_SEPARATOR.join(values)
        return flat

    def effective_type(self) -> EntryType:
        """Declared entry type, or ``misc`` when absent."""
        return self.entry_type or EntryType.MISC

    def effective_key(self) -> str:
        """Declared citation key, or the generated one when absent."""
        return self.key if self.key else generate_key(self)

    def required_fields(self) -> tuple[OneOf, ...]:
        """Required-field alternatives of the entry type."""
        return required_fields(self.entry_type)

    def optional_fields(self) -> tuple[str, ...]:
        """Optional fields of the entry type."""
        return optional_fields(self.entry_type)

    def relevant_fields(self) -> tuple[str, ...]:
        """Required fields flattened, then optional fields."""
        return relevant_fields(self.entry_type)

    def missing_fields(self) -> tuple[OneOf, ...]:
        """Required-field alternatives that no present field satisfies."""
        present = self.all_fields()
        return tuple(req for req in self.required_fields() if not req.satisfied_by(present))

    def is_valid(self) -> bool:
        """True when every required field of the entry type is satisfied."""
        return not self.missing_fields()

    def extra_fields(self) -> frozenset[str]:
        """Present fields outside the standard BibTeX field set."""
        return self.all_fields() - STANDARD_FIELDS

    # ------------------------------------------------------------------
    # Modification (returns new records)
    # ------------------------------------------------------------------

    def with_field(self, name: str, value: "str | Sequence[str]") -> "BibRecord":
        """Return a copy with ``name`` set.

        Person fields accept either a list of names or a single string
        that is split on ``" and "``.

        Raises
        ------
        MalformedRecordError
            If a person field ends up with no names.
        """
        fields = dict(self.fields)
        persons = dict(self.person_fields)

        if name in PERSON_FIELDS:
            names = split_persons(value) if isinstance(value, str) else [n.strip() for n in value]
            names = [n for n in names if n]
            if not names:
                raise MalformedRecordError(f"Person field '{name}' has no valid entries")
            persons[name] = tuple(names)
            fields.pop(name, None)
        else:
            if not isinstance(value, str):
                raise MalformedRecordError(f"Scalar field '{name}' expects a string value")
            fields[name] = value
            persons.pop(name, None)

        return replace(self, fields=fields, person_fields=persons)

    def without_field(self, name: str) -> "BibRecord":
        """Return a copy with ``name`` removed (no-op when absent)."""
        fields = {k: v for k, v in self.fields.items() if k != name}
        persons = {k: v for k, v in self.person_fields.items() if k != name}
        return replace(self, fields=fields, person_fields=persons)

    def with_key(self, key: str | None) -> "BibRecord":
        """Return a copy with the citation key set."""
        return replace(self, key=key or None)

    def with_entry_type(self, entry_type: EntryType | None) -> "BibRecord":
        """Return a copy with the entry type set."""
        return replace(self, entry_type=entry_type)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def inline_string(self) -> str:
        """One-line summary: persons, quoted title, venue, year.

        Returns
        -------
        str
            E.g. ``'J. Smith, A. Doe, "A Title", POPL, 2012'``.
        """
        persons, are_editors = (self.authors, False) if self.authors else (self.editors, True)

        if len(persons) > _MAX_INLINE_PERSONS:
            person_str = _shorten_name(to_plain(persons[0])) + " et al."
        else:
            person_str = ", ".join(_shorten_name(to_plain(p)) for p in persons)
        if are_editors and persons:
            person_str += " ed."

        title = to_plain(self.fields["title"]) if "title" in self.fields else "?"
        where = "?"
        for venue_field in ("booktitle", "journal", "school", "howpublished"):
            if venue_field in self.fields:
                where = to_plain(self.fields[venue_field])
                break
        year = to_plain(self.fields["year"]) if "year" in self.fields else "?"

        return f'{person_str}, "{title}", {where}, {year}'

    def display_lines(self) -> list[str]:
        """Field-by-field view grouped into required, optional and extra fields.

        Missing required fields are marked with ``!`` and an empty value.
        Values are shown as plain Unicode.

        Returns
        -------
        list[str]
            Lines without trailing newlines.
        """
        entry_type = self.entry_type.value if self.entry_type else ""
        lines = [f"  Entry type : {entry_type}", f"  Entry key  : {self.effective_key()}"]

        def field_line(name: str, marker: str = " ") -> str:
            value = self.get(name)
            return f"   {marker}{name:>12} = {to_plain(value) if value else ''}"

        lines += ["", "  Required fields:"]
        present = self.all_fields()
        for req in self.required_fields():
            marker = " " if req.satisfied_by(present) else "!"
            lines.extend(field_line(name, marker) for name in req.names)

        lines += ["", "  Optional fields:"]
        lines.extend(field_line(name) for name in self.optional_fields())

        extra = sorted(self.extra_fields())
        if extra:
            lines += ["", "  Extra fields:"]
            lines.extend(field_line(name) for name in extra)
        return lines


def _shorten_name(name: str) -> str:
    parts = name.split()
    if len(parts) > 1:
        return " ".join(p[0] + "." for p in parts[:-1]) + " " + parts[-1]
    return name


def _scalar_accessor(name: str) -> property:
    def getter(self: BibRecord) -> str | None:
        return self.fields.get(name)

    getter.__doc__ = f"Value of the ``{name}`` field, if present."
    return property(getter)


for _field_name in sorted((STANDARD_FIELDS | EXTRA_FIELDS) - PERSON_FIELDS):
    setattr(BibRecord, _ACCESSOR_NAMES.get(_field_name, _field_name), _scalar_accessor(_field_name))
