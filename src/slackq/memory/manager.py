"""Memory adapter: thread-scoped context, history, and write-back."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .client import MemoryServiceError
from .models import InteractionMessage

if TYPE_CHECKING:
    from ..logging import JSONLLogger
    from .client import MemoryService
    from .directory import ThreadDirectory

logger = logging.getLogger(__name__)

NO_CONTEXT = "No context found."


class MemoryAdapter:
    """Reads and writes memory for a user's current thread.

    A user without a current thread gets an empty context and history, and
    interactions are not stored. Service errors on read degrade the same
    way; write errors are logged and reported as a False return.
    """

    def __init__(
        self,
        service: MemoryService,
        directory: ThreadDirectory,
        history_limit: int = 20,
        event_logger: JSONLLogger | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            service: The memory service client.
            directory: Resolves each user's current thread.
            history_limit: Maximum number of recent history messages returned.
            event_logger: Optional JSONL logger for memory errors.
        """
        self.service = service
        self.directory = directory
        self.history_limit = history_limit
        self.event_logger = event_logger

    def _log_error(self, user_id: str, thread_id: str | None, operation: str, error: Exception) -> None:
        logger.warning(f"Memory {operation} failed for {user_id}: {error}")
        if self.event_logger:
            self.event_logger.log_memory_error(
                operation, error, user_id=user_id, thread_id=thread_id
            )

    async def get_context(self, user_id: str) -> str:
        """Get the context block for the user's current thread."""
        thread_id = self.directory.current_thread(user_id)
        if thread_id is None:
            return NO_CONTEXT

        try:
            context = await self.service.get_user_context(thread_id)
        except MemoryServiceError as e:
            self._log_error(user_id, thread_id, "get_context", e)
            return NO_CONTEXT

        return context or NO_CONTEXT

    async def get_history(self, user_id: str) -> list[dict[str, Any]]:
        """Get recent messages of the user's current thread as role/content dicts."""
        if self.history_limit <= 0:
            return []

        thread_id = self.directory.current_thread(user_id)
        if thread_id is None:
            return []

        try:
            messages = await self.service.get_messages(thread_id)
        except MemoryServiceError as e:
            self._log_error(user_id, thread_id, "get_history", e)
            return []

        history = []
        for msg in messages[-self.history_limit:]:
            entry = {"role": msg.get("role", "unknown"), "content": msg.get("content", "")}
            if msg.get("name"):
                entry["name"] = msg["name"]
            history.append(entry)
        return history

    async def store_interaction(
        self,
        user_id: str,
        user_query: str,
        response: str,
        user_name: str | None = None,
    ) -> bool:
        """Append a user/assistant message pair to the current thread.

        Returns:
            True if stored, False if there was no thread or the write failed.
        """
        thread_id = self.directory.current_thread(user_id)
        if thread_id is None:
            logger.info(f"No current thread for {user_id}, interaction not stored")
            return False

        messages = [
            InteractionMessage(role="user", content=user_query, name=user_name),
            InteractionMessage(role="assistant", content=response),
        ]
        try:
            await self.service.add_messages(thread_id, messages)
        except MemoryServiceError as e:
            self._log_error(user_id, thread_id, "store_interaction", e)
            return False

        logger.info(f"Stored interaction in memory thread {thread_id}")
        return True
