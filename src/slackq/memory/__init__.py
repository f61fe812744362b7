"""Memory module: thread directory, memory service client, and adapter."""

from .client import MemoryConfig, MemoryService, MemoryServiceError, ZepMemoryClient
from .directory import ThreadDirectory
from .manager import NO_CONTEXT, MemoryAdapter
from .models import InteractionMessage
from .store import KeyValueStore

__all__ = [
    "NO_CONTEXT",
    "InteractionMessage",
    "KeyValueStore",
    "MemoryAdapter",
    "MemoryConfig",
    "MemoryService",
    "MemoryServiceError",
    "ThreadDirectory",
    "ZepMemoryClient",
]
