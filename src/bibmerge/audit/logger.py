"""Structured audit logger for JSONL event logging.

Events are appended to a JSONL file (one JSON object per line) through a
persistent file handle and flushed after each write. Each event is written
as a single string under a lock, so sinks called from provider threads
never interleave with other events.
"""

import json
import threading
from collections.abc import Callable, Iterable
from dataclasses import asdict
from pathlib import Path
from typing import Any

from bibmerge.audit.helpers import get_iso_timestamp
from bibmerge.audit.models import LEVELS, LogEvent

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")
        self._lock = threading.Lock()

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        with self._lock:
            if not self._file.closed:
                self._file.flush()
                self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        key: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "stage_started").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        key : str | None, optional
            Citation key if the event concerns one record.

        Raises
        ------
        ValueError
            If ``level`` is not a known log level.
        """
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=stage if stage is not None else self.current_stage,
            key=key,
        )
        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        line = json.dumps(asdict(event), ensure_ascii=False, separators=(",", ":"))
        with self._lock:
            self._file.write(line + "\n")
            self._file.flush()

    def sink(self, event_type: str = "warning", level: str = "WARN") -> Callable[[str], None]:
        """Return a message sink that logs each message as one event.

        Parameters
        ----------
        event_type : str, optional
            Event type of the logged messages, by default "warning".
        level : str, optional
            Log level of the logged messages, by default "WARN".

        Returns
        -------
        Callable[[str], None]
            Sink usable wherever an ``ErrorSink`` is expected.
        """

        def log_message(message: str) -> None:
            self.event(event_type, data={"message": message}, level=level)

        return log_message

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started event."""
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        records_processed: int | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            Run status ("success", "failed").
        duration_seconds : float
            Total execution time in seconds.
        records_processed : int | None, optional
            Number of consolidated results.
        """
        data: dict[str, Any] = {"status": status, "duration_seconds": duration_seconds}
        if records_processed is not None:
            data["records_processed"] = records_processed
        self.event("run_finished", data=data)

    def stage_started(self, stage: str) -> None:
        """Log stage_started event and make ``stage`` the current stage."""
        self.set_stage(stage)
        self.event("stage_started", stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log stage_finished event and clear the current stage."""
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters
        self.event("stage_finished", data=data, stage=stage)
        self.set_stage(None)

    def source_searched(
        self,
        source: str,
        result_count: int,
        duration_seconds: float,
        failed: bool = False,
    ) -> None:
        """Log source_searched event.

        Parameters
        ----------
        source : str
            Source tag.
        result_count : int
            Number of results the source returned.
        duration_seconds : float
            Time spent in the source.
        failed : bool, optional
            Whether the source raised, by default False.
        """
        self.event(
            "source_searched",
            data={
                "source": source,
                "result_count": result_count,
                "duration_seconds": duration_seconds,
                "failed": failed,
            },
            level="WARN" if failed else "INFO",
        )

    def records_merged(self, key: str, sources: Iterable[str]) -> None:
        """Log records_merged event for a result found in several sources."""
        self.event("records_merged", data={"sources": sorted(sources)}, key=key)

    def error(self, exception_class: str, message: str, stage: str | None = None) -> None:
        """Log error event."""
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            stage=stage,
            level="ERROR",
        )
