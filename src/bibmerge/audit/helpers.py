"""Run identifiers and timestamps for audit events."""

import secrets
from datetime import UTC, datetime

__all__ = ["generate_run_id", "get_iso_timestamp"]


def get_iso_timestamp() -> str:
    """Get current UTC timestamp in ISO8601 format with microseconds.

    Returns
    -------
    str
        ISO8601 timestamp (e.g., "2026-02-03T12:34:56.123456Z").
    """
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    return f"{get_iso_timestamp()}__{secrets.token_hex(4)}"
