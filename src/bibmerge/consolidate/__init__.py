"""Multi-source result consolidation."""

from bibmerge.consolidate.pipeline import assign_keys, consolidate, dedupe_records, source_order
from bibmerge.consolidate.result_store import MANAGED_SOURCE, ResultStore

__all__ = [
    "MANAGED_SOURCE",
    "ResultStore",
    "assign_keys",
    "consolidate",
    "dedupe_records",
    "source_order",
]
