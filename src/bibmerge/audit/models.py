"""Audit event model."""

from dataclasses import dataclass
from typing import Any

__all__ = ["LogEvent", "LEVELS"]

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


@dataclass
class LogEvent:
    """Structured log event.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Unique run identifier.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type identifier.
    data : dict[str, Any]
        Event-specific data payload.
    stage : str | None
        Current stage identifier.
    key : str | None
        Citation key if the event concerns one record.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    key: str | None = None
