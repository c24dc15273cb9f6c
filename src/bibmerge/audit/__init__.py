"""Structured JSONL audit logging."""

from bibmerge.audit.helpers import generate_run_id, get_iso_timestamp
from bibmerge.audit.logger import AuditLogger
from bibmerge.audit.models import LogEvent

__all__ = ["AuditLogger", "LogEvent", "generate_run_id", "get_iso_timestamp"]
