"""Thread lifecycle commands: create, list, switch."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..memory import MemoryServiceError
from .commands import USAGE, CommandKind, parse_command

if TYPE_CHECKING:
    from ..logging import JSONLLogger
    from ..memory import MemoryService, ThreadDirectory

logger = logging.getLogger(__name__)


def _new_thread_id() -> str:
    return str(uuid.uuid4())


class ThreadManager:
    """Creates, lists, and switches a user's memory threads."""

    def __init__(
        self,
        service: MemoryService,
        directory: ThreadDirectory,
        event_logger: JSONLLogger | None = None,
        id_factory: Callable[[], str] = _new_thread_id,
    ) -> None:
        self.service = service
        self.directory = directory
        self.event_logger = event_logger
        self.id_factory = id_factory

    async def new_thread(self, user_id: str) -> str:
        """Register a new thread and make it current.

        Raises:
            MemoryServiceError: If the memory service rejects the thread.
        """
        thread_id = self.id_factory()
        await self.service.ensure_user(user_id)
        await self.service.create_thread(thread_id, user_id)

        self.directory.add_thread(user_id, thread_id)
        self.directory.set_current(user_id, thread_id)

        logger.info(f"Created thread {thread_id} for user {user_id}")
        if self.event_logger:
            self.event_logger.log("thread_created", user_id=user_id, thread_id=thread_id)
        return thread_id

    async def ensure_thread(self, user_id: str) -> str:
        """Return the user's current thread, creating one if needed."""
        current = self.directory.current_thread(user_id)
        if current is not None:
            return current
        return await self.new_thread(user_id)

    async def create_thread(self, user_id: str) -> str:
        try:
            thread_id = await self.new_thread(user_id)
        except (MemoryServiceError, sqlite3.Error):
            logger.exception("Error creating thread")
            return "Error creating thread"
        return f"Created thread: {thread_id}"

    def list_threads(self, user_id: str) -> str:
        try:
            threads = self.directory.threads(user_id)
        except sqlite3.Error:
            logger.exception("Error listing threads")
            return "Error listing threads"

        if not threads:
            return "No threads found."

        result = "Threads:\n"
        for index, thread_id in enumerate(threads, start=1):
            result += f"{index}. {thread_id}\n"
        return result

    def switch_thread(self, user_id: str, thread_id: str) -> str:
        try:
            if not self.directory.has_thread(user_id, thread_id):
                return f"Thread {thread_id} not found in your threads."
            self.directory.set_current(user_id, thread_id)
        except sqlite3.Error:
            logger.exception("Error switching threads")
            return "Error switching threads"

        logger.info(f"Switched to thread {thread_id} for user {user_id}")
        if self.event_logger:
            self.event_logger.log("thread_switched", user_id=user_id, thread_id=thread_id)
        return f"Switched to thread: {thread_id}"


class CommandHandler:
    """Runs ``~`` commands and returns their text response."""

    def __init__(
        self,
        threads: ThreadManager,
        event_logger: JSONLLogger | None = None,
    ) -> None:
        self.threads = threads
        self.event_logger = event_logger

    async def handle(self, user_id: str, text: str) -> str:
        command = parse_command(text.strip())

        if self.event_logger:
            self.event_logger.log(
                "command",
                user_id=user_id,
                kind=command.kind.value,
                thread_arg=command.thread_id,
            )

        if command.kind == CommandKind.ERROR:
            return command.message or ""
        if command.kind == CommandKind.HELP:
            return USAGE
        if command.kind == CommandKind.CREATE:
            return await self.threads.create_thread(user_id)
        if command.kind == CommandKind.LIST:
            return self.threads.list_threads(user_id)

        assert command.thread_id is not None
        return self.threads.switch_thread(user_id, command.thread_id)
