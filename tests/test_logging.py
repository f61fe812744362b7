"""Tests for JSONL event logging."""

import json
from pathlib import Path

import pytest

from slackq.logging import JSONLLogger, LogEntry, configure_logger, get_logger


@pytest.fixture
def logger(tmp_path: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=tmp_path / "events")


def read_entries(logger: JSONLLogger) -> list[dict]:
    with open(logger.log_path) as f:
        return [json.loads(line) for line in f]


def test_log_entry_to_dict():
    """LogEntry excludes None values and empty extras."""
    entry = LogEntry(timestamp="2024-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert data == {"timestamp": "2024-01-01T00:00:00Z", "event": "test"}


def test_log_creates_directory_and_file(tmp_path: Path):
    logger = JSONLLogger(log_dir=tmp_path / "nested" / "logs")
    logger.log("test_event")

    assert logger.log_path.exists()


def test_log_writes_jsonl(logger: JSONLLogger):
    logger.log("query_start", user_id="U1")
    logger.log("query_complete", user_id="U2", thread_id="t-1")

    entries = read_entries(logger)
    assert [e["event"] for e in entries] == ["query_start", "query_complete"]
    assert entries[0]["user_id"] == "U1"
    assert entries[1]["thread_id"] == "t-1"


def test_log_channel_search(logger: JSONLLogger):
    logger.log_channel_search(
        "C1",
        "general",
        user_id="U1",
        start_date="05/16/2024",
        end_date="06/15/2024",
        fetched=12,
        relevant=3,
    )

    entry = read_entries(logger)[0]
    assert entry["event"] == "channel_search"
    assert entry["channel_id"] == "C1"
    assert entry["extra"]["channel_name"] == "general"
    assert entry["extra"]["fetched"] == 12
    assert entry["extra"]["relevant"] == 3


def test_log_query_complete(logger: JSONLLogger):
    logger.log_query_complete(user_id="U1", thread_id="t-1", channels=2, duration_ms=12.5)

    entry = read_entries(logger)[0]
    assert entry["event"] == "query_complete"
    assert entry["duration_ms"] == 12.5
    assert entry["extra"]["channels"] == 2


def test_log_memory_error(logger: JSONLLogger):
    logger.log_memory_error("get_context", RuntimeError("HTTP 503"), user_id="U1", thread_id="t-1")

    entry = read_entries(logger)[0]
    assert entry["event"] == "memory_error"
    assert entry["user_id"] == "U1"
    assert entry["thread_id"] == "t-1"
    assert entry["error"] == "HTTP 503"
    assert entry["extra"] == {"operation": "get_context"}


def test_unset_fields_are_omitted(logger: JSONLLogger):
    logger.log("slack_event")

    assert set(read_entries(logger)[0]) == {"timestamp", "event"}


def test_rotation(tmp_path: Path):
    logger = JSONLLogger(log_dir=tmp_path, max_size_mb=0.001)  # ~1KB

    for i in range(100):
        logger.log(f"event_{i}", data="x" * 100)

    log_files = list(tmp_path.glob("events*.jsonl"))
    assert len(log_files) >= 2


def test_configure_logger_replaces_global(tmp_path: Path):
    configured = configure_logger(tmp_path / "global")

    assert get_logger() is configured
    assert configured.log_dir == tmp_path / "global"
