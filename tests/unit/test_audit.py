"""Tests for the JSONL audit logger and its event schema."""

import json
import re
import threading
from pathlib import Path

import jsonschema
import pytest

from bibmerge.audit import AuditLogger, generate_run_id, get_iso_timestamp

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


@pytest.fixture
def logger(tmp_path: Path) -> AuditLogger:
    """Create a logger that auto-closes after test."""
    lg = AuditLogger(run_id="test_run", log_path=tmp_path / "logs" / "events.jsonl")
    yield lg
    lg.close()


def _read_events(path: Path) -> list[dict]:
    """Read all JSONL events from file."""
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


@pytest.mark.unit
def test_run_id_format() -> None:
    """Test run IDs are a timestamp plus eight hex digits."""
    run_id = generate_run_id()

    assert re.match(r"^\d{4}-\d{2}-\d{2}T.+Z__[0-9a-f]{8}$", run_id)
    assert generate_run_id() != run_id
    assert get_iso_timestamp().endswith("Z")


@pytest.mark.unit
def test_event_envelope(logger: AuditLogger) -> None:
    """Test event() writes one JSON object per line."""
    logger.event("custom", data={"n": 1}, key="Smith12")

    events = _read_events(logger.log_path)

    assert events == [
        {
            "ts": events[0]["ts"],
            "run_id": "test_run",
            "level": "INFO",
            "event": "custom",
            "data": {"n": 1},
            "stage": None,
            "key": "Smith12",
        }
    ]


@pytest.mark.unit
def test_unknown_level_rejected(logger: AuditLogger) -> None:
    """Test levels are restricted."""
    with pytest.raises(ValueError):
        logger.event("custom", level="LOUD")


@pytest.mark.unit
def test_stage_context(logger: AuditLogger) -> None:
    """Test events inherit the current stage until it finishes."""
    logger.stage_started("search")
    logger.event("inside")
    logger.stage_finished("search", duration_seconds=0.5, counters={"dblp": 3})
    logger.event("outside")

    events = _read_events(logger.log_path)

    assert [e["stage"] for e in events] == ["search", "search", "search", None]
    assert events[2]["data"] == {"duration_seconds": 0.5, "counters": {"dblp": 3}}


@pytest.mark.unit
def test_sink_logs_messages(logger: AuditLogger) -> None:
    """Test sinks turn messages into events of the given type and level."""
    warn = logger.sink()
    fail = logger.sink("error", "ERROR")

    warn("DBLP unavailable")
    fail("Line 3: Unclosed entry @misc")

    events = _read_events(logger.log_path)
    assert [(e["event"], e["level"]) for e in events] == [("warning", "WARN"), ("error", "ERROR")]
    assert events[1]["data"] == {"message": "Line 3: Unclosed entry @misc"}


@pytest.mark.unit
def test_close_is_idempotent(tmp_path: Path) -> None:
    """Test closing twice is harmless and the context manager closes."""
    with AuditLogger(run_id="r", log_path=tmp_path / "e.jsonl") as lg:
        lg.event("x")
    lg.close()

    assert len(_read_events(tmp_path / "e.jsonl")) == 1


@pytest.mark.unit
def test_concurrent_writers_keep_lines_whole(logger: AuditLogger) -> None:
    """Test sinks on several threads and the main thread never interleave lines."""
    sink = logger.sink()
    start = threading.Barrier(5)

    def write_warnings() -> None:
        start.wait()
        for _ in range(200):
            sink("x" * 2000)

    threads = [threading.Thread(target=write_warnings) for _ in range(4)]
    for thread in threads:
        thread.start()
    start.wait()
    for i in range(200):
        logger.source_searched("dblp", i, 0.1)
    for thread in threads:
        thread.join()
    logger.close()

    events = _read_events(logger.log_path)

    assert len(events) == 1000
    assert sum(e["event"] == "warning" for e in events) == 800
    assert all(e["data"]["message"] == "x" * 2000 for e in events if e["event"] == "warning")


@pytest.mark.unit
def test_generated_events_validate(logger: AuditLogger, event_schema: dict) -> None:
    """Test every helper produces schema-valid events."""
    logger.run_started(command=["types"], parameters={"timeout_seconds": 3.0})
    logger.stage_started("search")
    logger.source_searched("dblp", 4, 0.25)
    logger.source_searched("local", 0, 0.0, failed=True)
    logger.stage_finished("search", 0.3, counters={"dblp": 4})
    logger.records_merged("Smith12", {"managed", "dblp"})
    logger.sink()("something odd")
    logger.error("RuntimeError", "boom", stage="search")
    logger.run_finished(status="success", duration_seconds=0.4, records_processed=3)

    events = _read_events(logger.log_path)

    assert len(events) == 9
    for event in events:
        jsonschema.validate(instance=event, schema=event_schema)
    assert events[5]["data"] == {"sources": ["dblp", "managed"]}
    assert events[3]["level"] == "WARN"


@pytest.mark.unit
def test_schema_rejects_invalid_events(event_schema: dict) -> None:
    """Test schema rejects unknown levels, bad payloads and missing fields."""
    valid = {
        "ts": "2026-01-01T00:00:00.000001Z",
        "run_id": "2026-01-01T00:00:00.000001Z__0123abcd",
        "level": "INFO",
        "event": "records_merged",
        "data": {"sources": ["dblp", "managed"]},
        "stage": None,
        "key": "Smith12",
    }
    jsonschema.validate(instance=valid, schema=event_schema)

    invalid = [
        {**valid, "level": "LOUD"},
        {**valid, "data": {"sources": ["dblp"]}},
        {**valid, "key": None},
        {k: v for k, v in valid.items() if k != "ts"},
        {**valid, "extra": 1},
    ]
    for instance in invalid:
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(instance=instance, schema=event_schema)
