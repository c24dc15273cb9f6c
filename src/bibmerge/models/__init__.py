"""Shared data types for bibmerge.

- Entry types and field schemas → bibmerge.models.entry_types
- Records → bibmerge.models.records
- Search results → bibmerge.models.results
"""

from bibmerge.models.entry_types import (
    STANDARD_FIELDS,
    EntryType,
    OneOf,
    optional_fields,
    relevant_fields,
    required_fields,
)
from bibmerge.models.records import EXTRA_FIELDS, PERSON_FIELDS, BibRecord
from bibmerge.models.results import SearchResult

__all__ = [
    # Field schemas
    "EntryType",
    "OneOf",
    "STANDARD_FIELDS",
    "required_fields",
    "optional_fields",
    "relevant_fields",
    # Records
    "BibRecord",
    "PERSON_FIELDS",
    "EXTRA_FIELDS",
    "SearchResult",
]
