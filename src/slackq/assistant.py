"""Builds a fully wired QueryOrchestrator from settings."""

from dataclasses import dataclass

from groq import AsyncGroq

from .agent import ChannelSelector, HistorySearcher, QueryOrchestrator
from .config import Settings
from .llm import GroqLLMClient, LLMClient
from .logging import configure_logger
from .memory import KeyValueStore, MemoryAdapter, MemoryService, ThreadDirectory, ZepMemoryClient
from .slack import ComposioSlackReader, SlackReader
from .threads import CommandHandler, ThreadManager


@dataclass
class Assistant:
    """The orchestrator plus the resources it owns."""

    orchestrator: QueryOrchestrator
    store: KeyValueStore
    reader: SlackReader
    memory_service: MemoryService

    async def aclose(self) -> None:
        """Release HTTP clients and the database connection."""
        for client in (self.reader, self.memory_service):
            close = getattr(client, "close", None)
            if close is not None:
                await close()
        self.store.close()


def build_assistant(
    settings: Settings,
    llm: LLMClient | None = None,
    reader: SlackReader | None = None,
    memory_service: MemoryService | None = None,
) -> Assistant:
    """Construct every component; any client may be substituted."""
    event_logger = configure_logger(settings.store.log_dir)

    if llm is None:
        llm = GroqLLMClient(AsyncGroq(api_key=settings.groq_api_key), model=settings.agent.model)
    if reader is None:
        reader = ComposioSlackReader(settings.broker)
    if memory_service is None:
        memory_service = ZepMemoryClient(settings.memory)

    store = KeyValueStore(settings.store.db_path)
    store.init_db()
    directory = ThreadDirectory(store)

    threads = ThreadManager(memory_service, directory, event_logger=event_logger)
    orchestrator = QueryOrchestrator(
        llm=llm,
        channel_selector=ChannelSelector(reader, llm, event_logger=event_logger),
        history_searcher=HistorySearcher(reader, llm, event_logger=event_logger),
        memory=MemoryAdapter(memory_service, directory, event_logger=event_logger),
        commands=CommandHandler(threads, event_logger=event_logger),
        threads=threads,
        config=settings.agent,
        event_logger=event_logger,
    )
    return Assistant(
        orchestrator=orchestrator,
        store=store,
        reader=reader,
        memory_service=memory_service,
    )
