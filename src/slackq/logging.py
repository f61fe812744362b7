"""JSONL event log for queries, channel searches, threads, and Slack traffic.

Diagnostics go through stdlib ``logging``; this log holds one structured
record per pipeline event so a query can be reconstructed afterwards.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DEFAULT_LOG_DIR = Path.home() / ".slackq" / "logs"


@dataclass
class LogEntry:
    """One pipeline event."""

    timestamp: str
    event: str
    user_id: str | None = None
    thread_id: str | None = None
    channel_id: str | None = None
    duration_ms: float | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, leaving out unset fields and an empty ``extra``."""
        return {k: v for k, v in asdict(self).items() if v is not None and v != {}}


class JSONLLogger:
    """Appends events to ``events.jsonl``, rotating it past a size cap."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "events.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        self.log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        if not self.log_path.exists() or self.log_path.stat().st_size < self.max_size_bytes:
            return
        suffix = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
        self.log_path.rename(self.log_dir / f"{self.log_path.stem}_{suffix}.jsonl")

    def log(
        self,
        event: str,
        *,
        user_id: str | None = None,
        thread_id: str | None = None,
        channel_id: str | None = None,
        duration_ms: float | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Record an event; keyword arguments beyond the fixed fields go to ``extra``."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            user_id=user_id,
            thread_id=thread_id,
            channel_id=channel_id,
            duration_ms=duration_ms,
            error=error,
            extra=extra,
        )
        self._rotate_if_needed()
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log_channel_search(
        self,
        channel_id: str,
        channel_name: str,
        *,
        user_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        fetched: int = 0,
        relevant: int = 0,
    ) -> None:
        """Record the date window and hit counts for one searched channel."""
        self.log(
            "channel_search",
            user_id=user_id,
            channel_id=channel_id,
            channel_name=channel_name,
            start_date=start_date,
            end_date=end_date,
            fetched=fetched,
            relevant=relevant,
        )

    def log_query_complete(
        self,
        *,
        user_id: str | None = None,
        thread_id: str | None = None,
        channels: int = 0,
        duration_ms: float | None = None,
    ) -> None:
        self.log(
            "query_complete",
            user_id=user_id,
            thread_id=thread_id,
            duration_ms=duration_ms,
            channels=channels,
        )

    def log_memory_error(
        self,
        operation: str,
        error: Exception,
        *,
        user_id: str | None = None,
        thread_id: str | None = None,
    ) -> None:
        """Record a memory service failure that the pipeline degraded past."""
        self.log(
            "memory_error",
            user_id=user_id,
            thread_id=thread_id,
            error=str(error),
            operation=operation,
        )


_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Return the process-wide event log, creating it under ~/.slackq on first use."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Replace the process-wide event log."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
