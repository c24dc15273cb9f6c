"""Record equivalence for deduplication."""

from bibmerge.matching.similarity import MATCH_RULES, are_equivalent, match_reason

__all__ = ["MATCH_RULES", "are_equivalent", "match_reason"]
