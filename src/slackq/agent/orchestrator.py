"""Query orchestration: memory, instructions, channels, search, answer."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..llm import DEFAULT_MODEL, LLMClient
from ..logging import JSONLLogger, get_logger
from ..memory import MemoryServiceError
from ..slack.models import ChannelResult
from ..threads import CommandHandler, is_command
from .channels import ChannelSelector
from .history import HistorySearcher
from .prompts import (
    SEARCH_INSTRUCTIONS_PROMPT,
    build_answer_prompt,
    build_answer_system_prompt,
    build_instructions_prompt,
)

if TYPE_CHECKING:
    from ..memory import MemoryAdapter
    from ..threads import ThreadManager

logger = logging.getLogger(__name__)

NO_CHANNELS_RESPONSE = "No relevant channels found for your query."
NO_ANSWER_RESPONSE = "Failed to generate a response."


@dataclass
class AgentConfig:
    """Configuration for the query pipeline."""

    model: str = DEFAULT_MODEL
    default_user_id: str = "dog"
    include_thread_history: bool = True
    auto_create_thread: bool = True
    workspace_url: str = "https://slack.com"


@dataclass
class QueryResult:
    """Outcome of handling one input."""

    response: str
    is_command: bool = False
    search_instructions: str | None = None
    results: list[ChannelResult] = field(default_factory=list)
    stored: bool = False


class QueryOrchestrator:
    """Answers a user's query from Slack history, or runs a ``~`` command.

    Steps run strictly in order: memory read, instruction rewrite, channel
    selection, per-channel search (sequential, in selection order), answer
    synthesis, memory write-back.
    """

    def __init__(
        self,
        llm: LLMClient,
        channel_selector: ChannelSelector,
        history_searcher: HistorySearcher,
        memory: MemoryAdapter,
        commands: CommandHandler,
        threads: ThreadManager | None = None,
        config: AgentConfig | None = None,
        event_logger: JSONLLogger | None = None,
    ) -> None:
        self.llm = llm
        self.channel_selector = channel_selector
        self.history_searcher = history_searcher
        self.memory = memory
        self.commands = commands
        self.threads = threads
        self.config = config or AgentConfig()
        self.event_logger = event_logger or get_logger()

    async def handle(self, user_query: str, user_id: str | None = None) -> str:
        """Handle one input and return the text to send back."""
        result = await self.run(user_query, user_id=user_id)
        return result.response

    async def run(self, user_query: str, user_id: str | None = None) -> QueryResult:
        """Handle one input and return the response with pipeline details.

        Raises:
            NoChannelsError: If the workspace has no channels.
            ToolExecutionError: If a Slack read through the broker fails.
        """
        user_id = user_id or self.config.default_user_id

        if is_command(user_query):
            response = await self.commands.handle(user_id, user_query)
            return QueryResult(response=response, is_command=True)

        start_time = time.time()
        logger.info(f"Processing Slack query: {user_query}")
        self.event_logger.log("query_start", user_id=user_id, query=user_query)

        thread_id = await self._ensure_thread(user_id)

        memory_context = await self.memory.get_context(user_id)
        history: list[dict[str, Any]] | None = None
        if self.config.include_thread_history:
            history = await self.memory.get_history(user_id)

        search_instructions = await self.generate_search_instructions(
            user_query, memory_context, history, user_id=user_id
        )

        channels = await self.channel_selector.select(search_instructions, user_id=user_id)
        if not channels:
            return QueryResult(
                response=NO_CHANNELS_RESPONSE,
                search_instructions=search_instructions,
            )

        results: list[ChannelResult] = []
        for channel in channels:
            logger.info(f"Searching in channel: {channel.name}")
            messages = await self.history_searcher.search(
                channel, search_instructions, user_id=user_id
            )
            results.append(
                ChannelResult(channel_name=channel.name, channel_id=channel.id, messages=messages)
            )

        response = await self.synthesize_answer(user_query, memory_context, history, results)
        stored = await self._store(user_id, user_query, response)

        self.event_logger.log_query_complete(
            user_id=user_id,
            thread_id=thread_id,
            channels=len(results),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return QueryResult(
            response=response,
            search_instructions=search_instructions,
            results=results,
            stored=stored,
        )

    async def _ensure_thread(self, user_id: str) -> str | None:
        """Give a first-time user a thread so their memory has a scope."""
        if not self.config.auto_create_thread or self.threads is None:
            return None
        try:
            return await self.threads.ensure_thread(user_id)
        except MemoryServiceError as e:
            logger.warning(f"Could not create a thread for {user_id}: {e}")
            self.event_logger.log_memory_error("ensure_thread", e, user_id=user_id)
            return None

    async def generate_search_instructions(
        self,
        user_query: str,
        memory_context: str,
        history: list[dict[str, Any]] | None = None,
        user_id: str | None = None,
    ) -> str:
        """Rewrite the raw query into search instructions using memory context."""
        prompt = build_instructions_prompt(user_query, memory_context, history)
        instructions = await self.llm.complete(prompt, system=SEARCH_INSTRUCTIONS_PROMPT)
        instructions = instructions.strip() or user_query

        logger.info(f"Generated search instructions: {instructions}")
        self.event_logger.log("search_instructions", user_id=user_id, instructions=instructions)
        return instructions

    async def synthesize_answer(
        self,
        user_query: str,
        memory_context: str,
        history: list[dict[str, Any]] | None,
        results: list[ChannelResult],
    ) -> str:
        system = build_answer_system_prompt(self.config.workspace_url, history is not None)
        prompt = build_answer_prompt(
            user_query,
            memory_context,
            [result.to_dict() for result in results],
            history,
        )
        answer = await self.llm.complete(prompt, system=system)
        return answer or NO_ANSWER_RESPONSE

    async def _store(self, user_id: str, user_query: str, response: str) -> bool:
        """Write the interaction back to memory; never fails the query."""
        try:
            return await self.memory.store_interaction(user_id, user_query, response)
        except Exception:
            logger.exception("Error storing interaction in memory")
            return False
