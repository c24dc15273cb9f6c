"""Search orchestration: configuration, concurrent provider queries, consolidation."""

from bibmerge.engine.config import SearchConfig, SearchOutcome
from bibmerge.engine.runner import run_search

__all__ = [
    "SearchConfig",
    "SearchOutcome",
    "run_search",
]
