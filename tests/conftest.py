"""Pytest fixtures for SlackQ tests."""

from pathlib import Path

import pytest

from fakes import FakeMemoryService
from slackq.logging import JSONLLogger, configure_logger
from slackq.memory import KeyValueStore, ThreadDirectory


@pytest.fixture(autouse=True)
def event_logger(tmp_path: Path) -> JSONLLogger:
    """Route the global JSONL logger into a temporary directory."""
    return configure_logger(tmp_path / "logs")


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    """Create a KeyValueStore with a temporary database."""
    store = KeyValueStore(tmp_path / "threads.db")
    store.init_db()
    yield store
    store.close()


@pytest.fixture
def directory(store: KeyValueStore) -> ThreadDirectory:
    return ThreadDirectory(store)


@pytest.fixture
def memory_service() -> FakeMemoryService:
    return FakeMemoryService()
