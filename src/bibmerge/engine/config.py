"""Search configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from bibmerge.models import SearchResult
from bibmerge.providers.dblp import DEFAULT_DBLP_URL


@dataclass
class SearchConfig:
    """Configuration for a consolidated search.

    Attributes
    ----------
    source_priority : tuple[str, ...]
        Source tags, highest priority first. Sources not listed are
        consolidated after these, in the order they were queried.
    timeout_seconds : float
        Network timeout for remote providers (default: 3.0).
    dblp_url : str
        DBLP publication search endpoint.
    dblp_max_hits : int
        Number of hits requested from DBLP (default: 10).
    min_local_score : float
        Minimum score for results from BibTeX files (default: 0.5).
    log_path : Path | None
        JSONL audit log file. If None, no audit log is written.
    """

    source_priority: tuple[str, ...] = ("managed", "local", "dblp")
    timeout_seconds: float = 3.0
    dblp_url: str = DEFAULT_DBLP_URL
    dblp_max_hits: int = 10
    min_local_score: float = 0.5
    log_path: Path | None = None

    def __post_init__(self) -> None:
        """Normalize types and validate."""
        self.source_priority = tuple(self.source_priority)

        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

        if self.dblp_max_hits < 1:
            raise ValueError(f"dblp_max_hits must be >= 1, got {self.dblp_max_hits}")

        if not 0.0 <= self.min_local_score <= 1.0:
            raise ValueError(f"min_local_score must be in [0, 1], got {self.min_local_score}")

        if not self.dblp_url:
            raise ValueError("dblp_url must not be empty")

        if self.log_path is not None:
            self.log_path = Path(self.log_path)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["source_priority"] = list(self.source_priority)
        data["log_path"] = str(self.log_path) if self.log_path is not None else None
        return data


@dataclass
class SearchOutcome:
    """Results of a consolidated search.

    Attributes
    ----------
    results : list[SearchResult]
        Consolidated results, best first.
    counts_by_source : dict[str, int]
        Number of raw results each source returned.
    failed_sources : list[str]
        Sources whose search raised; they contributed no results.
    """

    results: list[SearchResult]
    counts_by_source: dict[str, int] = field(default_factory=dict)
    failed_sources: list[str] = field(default_factory=list)
